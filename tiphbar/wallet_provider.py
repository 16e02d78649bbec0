# TipHBAR - micro-tipping for creators on Hedera
# Copyright (C) 2024-2026 The TipHBAR Developers
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

'''
Access to the wallet extension (HashPack or compatible).

The extension may or may not exist in a given environment. Rather than discovering it from some
global, the environment decides which provider to construct and hands it to the components
that need it:

    provider = AvailableWalletProvider(handle)   # the extension was found
    provider = UnavailableWalletProvider()       # it was not, manual connection only

The handle's responses are loosely shaped dictionaries. They are converted to the tagged
`Connection*`/`Transfer*` results here so nothing past this module inspects their shape.
'''

from __future__ import annotations
import asyncio
from typing import Any, Protocol

from .constants import DEFAULT_EXTENSION_TIMEOUT
from .exceptions import WalletUnavailableError
from .logs import logs
from .types import AppMetadata, ConnectionApproved, ConnectionRejected, ConnectionResponse, \
    TransferAccepted, TransferInstruction, TransferRejected, TransferResponse


logger = logs.get_logger("wallet-provider")


class WalletExtensionHandle(Protocol):
    async def connect(self, app_metadata: dict[str, str]) -> Any:
        """Expected to return `{"success": bool, "accountIds": [str, ...]}`."""
        ...

    async def sign_and_submit(self, instruction: dict[str, Any]) -> Any:
        """
        Receives `TransferInstruction.to_dict()`. Expected to return
        `{"success": bool, "transactionId": str, "error": str}`.
        """
        ...


def parse_connection_response(response: Any) -> ConnectionResponse:
    if not isinstance(response, dict):
        return ConnectionRejected("Malformed connection response")
    if not response.get("success"):
        return ConnectionRejected(str(response.get("error") or "Connection rejected"))
    account_ids = response.get("accountIds")
    if not isinstance(account_ids, (list, tuple)) or \
            not all(isinstance(account_id, str) for account_id in account_ids):
        return ConnectionRejected("Malformed connection response")
    if len(account_ids) == 0:
        return ConnectionRejected("No accounts were shared")
    return ConnectionApproved(tuple(account_ids))


def parse_transfer_response(response: Any) -> TransferResponse:
    if not isinstance(response, dict):
        return TransferRejected("Malformed transaction response")
    if not response.get("success"):
        return TransferRejected(str(response.get("error") or "Transaction rejected"))
    transaction_id = response.get("transactionId")
    if not isinstance(transaction_id, str) or not transaction_id:
        return TransferRejected("Transaction response has no transaction id")
    return TransferAccepted(transaction_id)


class WalletProvider:
    is_available = False

    async def request_connection(self, app_metadata: AppMetadata) -> ConnectionResponse:
        raise WalletUnavailableError()

    async def sign_and_submit(self, instruction: TransferInstruction) -> TransferResponse:
        raise WalletUnavailableError()


class UnavailableWalletProvider(WalletProvider):
    pass


class AvailableWalletProvider(WalletProvider):
    is_available = True

    def __init__(self, handle: WalletExtensionHandle,
            timeout: float=DEFAULT_EXTENSION_TIMEOUT) -> None:
        self._handle = handle
        self._timeout = timeout

    async def request_connection(self, app_metadata: AppMetadata) -> ConnectionResponse:
        """
        Ask the extension to share its accounts with this application.

        Raises nothing. Extension errors and timeouts are returned as `ConnectionRejected`.
        """
        try:
            response = await asyncio.wait_for(self._handle.connect(app_metadata._asdict()),
                self._timeout)
        except asyncio.TimeoutError:
            logger.error("wallet extension did not answer the connection request within %s "
                "seconds", self._timeout)
            return ConnectionRejected("Timed out")
        except Exception as exc:
            # The handle is foreign code and it may raise anything.
            logger.exception("wallet extension connection request errored")
            return ConnectionRejected(str(exc) or type(exc).__name__)
        return parse_connection_response(response)

    async def sign_and_submit(self, instruction: TransferInstruction) -> TransferResponse:
        """
        Ask the extension to sign the transfer and submit it to the ledger.

        Raises nothing. Extension errors and timeouts are returned as `TransferRejected`.
        """
        try:
            response = await asyncio.wait_for(
                self._handle.sign_and_submit(instruction.to_dict()), self._timeout)
        except asyncio.TimeoutError:
            logger.error("wallet extension did not answer the transfer request within %s "
                "seconds", self._timeout)
            return TransferRejected("Timed out")
        except Exception as exc:
            logger.exception("wallet extension transfer request errored")
            return TransferRejected(str(exc) or type(exc).__name__)
        return parse_transfer_response(response)
