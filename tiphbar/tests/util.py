import asyncio
from typing import Any, Callable

from tiphbar.constants import AccountVerificationResult, NotificationSeverity
from tiphbar.types import Notification, ProfileRow, TipRecord


FAN_ACCOUNT_ID = "0.0.1001"
CREATOR_ACCOUNT_ID = "0.0.2002"
FAN_IDENTITY_KEY = "fan-5e1b"
CREATOR_IDENTITY_KEY = "creator-9a2c"


async def wait_until(predicate: Callable[[], bool], attempts: int=200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0.001)
    raise AssertionError("condition not reached")


class CollectingNotificationSink:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def titles(self) -> list[str]:
        return [ notification.title for notification in self.notifications ]

    def errors(self) -> list[Notification]:
        return [ notification for notification in self.notifications
            if notification.severity == NotificationSeverity.ERROR ]


class FakeIdentityService:
    def __init__(self, current_user: str|None=FAN_IDENTITY_KEY,
            profiles: list[ProfileRow]|None=None) -> None:
        self.current_user = current_user
        self.profiles: dict[str, ProfileRow] = {
            profile["id"]: profile for profile in (profiles or [])
        }
        self.tips: list[TipRecord] = []
        self.calls: list[str] = []
        # Method name to the exception that method raises.
        self.failures: dict[str, Exception] = {}
        # The named method waits on `block` once entered, as if the service were slow.
        self.blocked_method: str|None = None
        self.block = asyncio.Event()
        self.entered = asyncio.Event()

    async def _call(self, name: str) -> None:
        self.calls.append(name)
        if name == self.blocked_method:
            self.entered.set()
            await self.block.wait()
        if name in self.failures:
            raise self.failures[name]

    async def get_current_user(self) -> str|None:
        await self._call("get_current_user")
        return self.current_user

    async def get_profile(self, identity_key: str) -> ProfileRow|None:
        await self._call("get_profile")
        return self.profiles.get(identity_key)

    async def update_profile(self, identity_key: str, hedera_account_id: str) -> None:
        await self._call("update_profile")
        profile = self.profiles.setdefault(identity_key,
            { "id": identity_key, "hedera_account_id": None })
        profile["hedera_account_id"] = hedera_account_id

    async def find_profile_by_account_id(self, hedera_account_id: str) -> str|None:
        await self._call("find_profile_by_account_id")
        for profile in self.profiles.values():
            if profile["hedera_account_id"] == hedera_account_id:
                return profile["id"]
        return None

    async def insert_tip(self, tip: TipRecord) -> None:
        await self._call("insert_tip")
        self.tips.append(tip)


class FakeWalletExtension:
    def __init__(self, account_ids: tuple[str, ...]=(FAN_ACCOUNT_ID,)) -> None:
        self.connect_response: Any = { "success": True, "accountIds": list(account_ids) }
        self.transfer_response: Any = None
        self.error: Exception|None = None
        # When set the extension waits on it, as if the user had not yet answered the prompt.
        self.block: asyncio.Event|None = None

        self.connect_calls: list[dict[str, str]] = []
        self.submitted: list[dict[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._next_sequence = 1

    async def _wait(self) -> None:
        if self.block is not None:
            await self.block.wait()
        else:
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error

    async def connect(self, app_metadata: dict[str, str]) -> Any:
        self.connect_calls.append(app_metadata)
        await self._wait()
        return self.connect_response

    async def sign_and_submit(self, instruction: dict[str, Any]) -> Any:
        self.submitted.append(instruction)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self._wait()
        finally:
            self.in_flight -= 1
        if self.transfer_response is not None:
            return self.transfer_response
        transaction_id = f"{FAN_ACCOUNT_ID}@1700000000.{self._next_sequence:09d}"
        self._next_sequence += 1
        return { "success": True, "transactionId": transaction_id }


class FakeAccountVerifier:
    def __init__(self, result: AccountVerificationResult=AccountVerificationResult.VERIFIED) \
            -> None:
        self.result = result
        self.calls: list[str] = []
        self.entered = asyncio.Event()
        self.block: asyncio.Event|None = None

    async def verify(self, candidate: str) -> AccountVerificationResult:
        self.calls.append(candidate)
        self.entered.set()
        if self.block is not None:
            await self.block.wait()
        return self.result
