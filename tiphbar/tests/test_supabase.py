import asyncio
from decimal import Decimal
from typing import Any

from aiohttp import web
import pytest

from tiphbar.constants import TipStatus
from tiphbar.exceptions import IdentityServiceError, NetworkError
from tiphbar.network_support.supabase import SupabaseIdentityService
from tiphbar.types import TipRecord


BASE_URL = ""  # no host or port for aiohttp pytest framework
API_KEY = "anon-key"
ACCESS_TOKEN = "user-access-token"


class MockSupabase:
    def __init__(self) -> None:
        self.profiles: list[dict[str, Any]] = [
            { "id": "user-1", "hedera_account_id": "0.0.1001", "display_name": "Fan" },
            { "id": "user-2", "hedera_account_id": None, "display_name": "Creator" },
        ]
        self.tips: list[dict[str, Any]] = []
        self.prefer_headers: list[str|None] = []
        self.fail_status: int|None = None
        self.delay = 0.0
        # Replaces the profile rows in responses when set.
        self.profiles_body: str|None = None

    def _check_request(self, request: web.Request) -> web.Response|None:
        assert request.headers.get("apikey") == API_KEY
        if self.fail_status is not None:
            return web.json_response({ "message": "failed" }, status=self.fail_status)
        return None

    def _filter(self, request: web.Request) -> list[dict[str, Any]]:
        rows = self.profiles
        for column in ("id", "hedera_account_id"):
            value = request.query.get(column)
            if value is not None:
                assert value.startswith("eq.")
                rows = [ row for row in rows if row[column] == value[3:] ]
        return rows

    async def get_user(self, request: web.Request) -> web.Response:
        failure = self._check_request(request)
        if failure is not None:
            return failure
        if request.headers.get("Authorization") != f"Bearer {ACCESS_TOKEN}":
            return web.json_response({ "message": "invalid JWT" }, status=401)
        return web.json_response({ "id": "user-1", "email": "fan@example.com" })

    async def get_profiles(self, request: web.Request) -> web.Response:
        failure = self._check_request(request)
        if failure is not None:
            return failure
        await asyncio.sleep(self.delay)
        if self.profiles_body is not None:
            return web.Response(text=self.profiles_body, content_type="application/json")
        rows = self._filter(request)
        columns = request.query["select"].split(",")
        rows = [ { column: row[column] for column in columns } for row in rows ]
        if "limit" in request.query:
            rows = rows[:int(request.query["limit"])]
        return web.json_response(rows)

    async def patch_profiles(self, request: web.Request) -> web.Response:
        failure = self._check_request(request)
        if failure is not None:
            return failure
        self.prefer_headers.append(request.headers.get("Prefer"))
        changes = await request.json()
        for row in self._filter(request):
            row.update(changes)
        return web.Response(status=204)

    async def post_tips(self, request: web.Request) -> web.Response:
        failure = self._check_request(request)
        if failure is not None:
            return failure
        self.prefer_headers.append(request.headers.get("Prefer"))
        self.tips.extend(await request.json())
        return web.Response(status=201)

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/auth/v1/user", self.get_user)
        app.router.add_get("/rest/v1/profiles", self.get_profiles)
        app.router.add_patch("/rest/v1/profiles", self.patch_profiles)
        app.router.add_post("/rest/v1/tips", self.post_tips)
        return app


async def _create_service(aiohttp_client, mock: MockSupabase, access_token: str|None=ACCESS_TOKEN,
        timeout: float=5.0) -> SupabaseIdentityService:
    test_session = await aiohttp_client(mock.create_app())
    return SupabaseIdentityService(test_session, BASE_URL, API_KEY, access_token, timeout)


async def test_get_current_user(aiohttp_client) -> None:
    service = await _create_service(aiohttp_client, MockSupabase())
    assert await service.get_current_user() == "user-1"


async def test_get_current_user_signed_out(aiohttp_client) -> None:
    mock = MockSupabase()
    # Any request would fail, no request should be made.
    mock.fail_status = 500
    service = await _create_service(aiohttp_client, mock, access_token=None)
    assert await service.get_current_user() is None


async def test_get_current_user_rejected_token(aiohttp_client) -> None:
    service = await _create_service(aiohttp_client, MockSupabase(), access_token="expired")
    assert await service.get_current_user() is None

    service.set_access_token(ACCESS_TOKEN)
    assert await service.get_current_user() == "user-1"


async def test_get_profile(aiohttp_client) -> None:
    service = await _create_service(aiohttp_client, MockSupabase())
    assert await service.get_profile("user-1") == { "id": "user-1",
        "hedera_account_id": "0.0.1001", "display_name": "Fan" }
    assert await service.get_profile("user-404") is None


async def test_update_profile_and_find(aiohttp_client) -> None:
    mock = MockSupabase()
    service = await _create_service(aiohttp_client, mock)
    assert await service.find_profile_by_account_id("0.0.2002") is None

    await service.update_profile("user-2", "0.0.2002")

    assert mock.profiles[1]["hedera_account_id"] == "0.0.2002"
    assert mock.prefer_headers == [ "return=minimal" ]
    assert await service.find_profile_by_account_id("0.0.2002") == "user-2"
    assert await service.find_profile_by_account_id("0.0.1001") == "user-1"


async def test_insert_tip(aiohttp_client) -> None:
    mock = MockSupabase()
    service = await _create_service(aiohttp_client, mock)
    tip = TipRecord("user-2", Decimal("0.00000001"), "0.0.1001@1700000000.000000001",
        TipStatus.COMPLETED, "Thanks!", "user-1")
    await service.insert_tip(tip)

    assert mock.tips == [ {
        "to_user_id": "user-2",
        "from_user_id": "user-1",
        "amount": "0.00000001",
        "transaction_id": "0.0.1001@1700000000.000000001",
        "status": "completed",
        "message": "Thanks!",
    } ]


async def test_error_status(aiohttp_client) -> None:
    mock = MockSupabase()
    mock.fail_status = 503
    service = await _create_service(aiohttp_client, mock)
    with pytest.raises(IdentityServiceError) as exc_info:
        await service.find_profile_by_account_id("0.0.1001")
    assert exc_info.value.status == 503
    assert isinstance(exc_info.value, NetworkError)


async def test_timeout(aiohttp_client) -> None:
    mock = MockSupabase()
    mock.delay = 0.5
    service = await _create_service(aiohttp_client, mock, timeout=0.05)
    with pytest.raises(NetworkError) as exc_info:
        await service.get_profile("user-1")
    assert not isinstance(exc_info.value, IdentityServiceError)


@pytest.mark.parametrize("body", ("<not json", '[{"hedera_account_id": "0.0.1001"}]',
    '{"id": "user-1"}', '["user-1"]'))
async def test_malformed_profile_response(aiohttp_client, body: str) -> None:
    mock = MockSupabase()
    mock.profiles_body = body
    service = await _create_service(aiohttp_client, mock)
    with pytest.raises(IdentityServiceError):
        await service.find_profile_by_account_id("0.0.1001")
    with pytest.raises(IdentityServiceError):
        await service.get_profile("user-1")
