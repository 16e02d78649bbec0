from __future__ import annotations
import dataclasses
from decimal import Decimal
from typing import NamedTuple, Union
from typing_extensions import NotRequired, TypedDict

from .constants import NotificationSeverity, TipStatus, WalletConnectionState


class AccountId(NamedTuple):
    shard: int
    realm: int
    num: int

    def to_string(self) -> str:
        return f"{self.shard}.{self.realm}.{self.num}"


class AppMetadata(NamedTuple):
    name: str
    description: str
    icon: str


@dataclasses.dataclass(frozen=True)
class WalletState:
    account_id: str|None = None
    is_connected: bool = False
    is_connecting: bool = False

    def __post_init__(self) -> None:
        assert not self.is_connected or self.account_id is not None, \
            "connected wallet state requires an account"

    @property
    def connection_state(self) -> WalletConnectionState:
        if self.is_connecting:
            return WalletConnectionState.CONNECTING
        if self.is_connected:
            return WalletConnectionState.CONNECTED
        return WalletConnectionState.DISCONNECTED


class ConnectResult(NamedTuple):
    account_id: str
    # Set when the account is connected but could not be saved to the user's profile.
    persist_error: Exception|None = None


# Extension responses are converted to one of these at the provider boundary.

@dataclasses.dataclass(frozen=True)
class ConnectionApproved:
    account_ids: tuple[str, ...]

@dataclasses.dataclass(frozen=True)
class ConnectionRejected:
    reason: str

ConnectionResponse = Union[ConnectionApproved, ConnectionRejected]


@dataclasses.dataclass(frozen=True)
class TransferAccepted:
    transaction_id: str

@dataclasses.dataclass(frozen=True)
class TransferRejected:
    reason: str

TransferResponse = Union[TransferAccepted, TransferRejected]


class TransferLeg(NamedTuple):
    account_id: str
    # Negative for the debited account.
    tinybars: int


@dataclasses.dataclass(frozen=True)
class TransferInstruction:
    transfers: tuple[TransferLeg, ...]
    memo: str

    def is_balanced(self) -> bool:
        return sum(leg.tinybars for leg in self.transfers) == 0

    def to_dict(self) -> dict[str, object]:
        return {
            "transfers": [
                { "accountId": leg.account_id, "amount": leg.tinybars }
                for leg in self.transfers
            ],
            "memo": self.memo,
        }


class TransactionResult(NamedTuple):
    transaction_id: str
    instruction: TransferInstruction


class ProfileRow(TypedDict):
    id: str
    hedera_account_id: str|None
    display_name: NotRequired[str|None]


class TipRow(TypedDict):
    to_user_id: str
    from_user_id: str|None
    amount: str
    transaction_id: str
    status: str
    message: str|None


@dataclasses.dataclass(frozen=True)
class TipRecord:
    recipient_identity_key: str
    amount: Decimal
    transaction_id: str
    status: TipStatus = TipStatus.COMPLETED
    message: str|None = None
    sender_identity_key: str|None = None

    def to_row(self) -> TipRow:
        return {
            "to_user_id": self.recipient_identity_key,
            "from_user_id": self.sender_identity_key,
            # Decimal text so the numeric column receives the exact value.
            "amount": format(self.amount, "f"),
            "transaction_id": self.transaction_id,
            "status": self.status.value,
            "message": self.message,
        }


class RecordResult(NamedTuple):
    tip: TipRecord


class TipReceipt(NamedTuple):
    transaction_id: str
    tip: TipRecord|None
    # Set when the transfer happened but the off-chain record was not written.
    recording_error: Exception|None = None


class Notification(NamedTuple):
    title: str
    description: str
    severity: NotificationSeverity = NotificationSeverity.INFO
