import asyncio

import pytest

from tiphbar.exceptions import WalletUnavailableError
from tiphbar.types import AppMetadata, ConnectionApproved, ConnectionRejected, \
    TransferAccepted, TransferInstruction, TransferLeg, TransferRejected
from tiphbar.wallet_provider import AvailableWalletProvider, parse_connection_response, \
    parse_transfer_response, UnavailableWalletProvider

from .util import FakeWalletExtension


APP_METADATA = AppMetadata("TipHBAR", "Tipping", "https://example.com/icon.png")
INSTRUCTION = TransferInstruction((TransferLeg("0.0.1001", -5), TransferLeg("0.0.2002", 5)),
    "memo")


@pytest.mark.parametrize("response,expected", (
    ({ "success": True, "accountIds": [ "0.0.1001" ] }, ConnectionApproved(("0.0.1001",))),
    ({ "success": True, "accountIds": [ "0.0.1001", "0.0.1002" ] },
        ConnectionApproved(("0.0.1001", "0.0.1002"))),
    ({ "success": False, "error": "User closed the prompt" },
        ConnectionRejected("User closed the prompt")),
    ({ "success": False }, ConnectionRejected("Connection rejected")),
    ({ "success": True, "accountIds": [] }, ConnectionRejected("No accounts were shared")),
    ({ "success": True, "accountIds": "0.0.1001" },
        ConnectionRejected("Malformed connection response")),
    ({ "success": True, "accountIds": [ 1001 ] },
        ConnectionRejected("Malformed connection response")),
    ([], ConnectionRejected("Malformed connection response")),
))
def test_parse_connection_response(response, expected) -> None:
    assert parse_connection_response(response) == expected


@pytest.mark.parametrize("response,expected", (
    ({ "success": True, "transactionId": "0.0.1001@1700000000.000000001" },
        TransferAccepted("0.0.1001@1700000000.000000001")),
    ({ "success": False, "error": "INSUFFICIENT_PAYER_BALANCE" },
        TransferRejected("INSUFFICIENT_PAYER_BALANCE")),
    ({ "success": False }, TransferRejected("Transaction rejected")),
    ({ "success": True, "transactionId": "" },
        TransferRejected("Transaction response has no transaction id")),
    (None, TransferRejected("Malformed transaction response")),
))
def test_parse_transfer_response(response, expected) -> None:
    assert parse_transfer_response(response) == expected


async def test_unavailable_provider() -> None:
    provider = UnavailableWalletProvider()
    assert not provider.is_available
    with pytest.raises(WalletUnavailableError):
        await provider.request_connection(APP_METADATA)
    with pytest.raises(WalletUnavailableError):
        await provider.sign_and_submit(INSTRUCTION)


async def test_available_provider() -> None:
    extension = FakeWalletExtension()
    provider = AvailableWalletProvider(extension)
    assert provider.is_available

    assert await provider.request_connection(APP_METADATA) == \
        ConnectionApproved(("0.0.1001",))
    assert extension.connect_calls == [ { "name": "TipHBAR", "description": "Tipping",
        "icon": "https://example.com/icon.png" } ]

    response = await provider.sign_and_submit(INSTRUCTION)
    assert isinstance(response, TransferAccepted)
    assert extension.submitted == [ {
        "transfers": [
            { "accountId": "0.0.1001", "amount": -5 },
            { "accountId": "0.0.2002", "amount": 5 },
        ],
        "memo": "memo",
    } ]


async def test_available_provider_converts_errors() -> None:
    extension = FakeWalletExtension()
    extension.error = RuntimeError("popup blocked")
    provider = AvailableWalletProvider(extension)

    assert await provider.request_connection(APP_METADATA) == \
        ConnectionRejected("popup blocked")
    assert await provider.sign_and_submit(INSTRUCTION) == TransferRejected("popup blocked")

    extension.error = RuntimeError()
    assert await provider.request_connection(APP_METADATA) == \
        ConnectionRejected("RuntimeError")


async def test_available_provider_timeout() -> None:
    extension = FakeWalletExtension()
    extension.block = asyncio.Event()
    provider = AvailableWalletProvider(extension, timeout=0.01)

    assert await provider.request_connection(APP_METADATA) == ConnectionRejected("Timed out")
    assert await provider.sign_and_submit(INSTRUCTION) == TransferRejected("Timed out")
