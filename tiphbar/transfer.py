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

from __future__ import annotations
from decimal import Decimal
from typing import Union

from .account_verifier import parse_account_id
from .constants import DEFAULT_TIP_MEMO, MAX_MEMO_BYTES
from .exceptions import InvalidMemoError, InvalidTransferError, TransactionFailedError, \
    WalletNotConnectedError, WalletUnavailableError
from .logs import logs
from .types import TransactionResult, TransferInstruction, TransferLeg, TransferRejected
from .util import AccountLocks, format_hbar, hbar_to_tinybars, parse_hbar_amount
from .wallet_connection import WalletConnectionManager
from .wallet_provider import WalletProvider


logger = logs.get_logger("transfer")


def build_transfer_instruction(from_account: str, to_account: str, amount: Decimal,
        memo: str) -> TransferInstruction:
    """
    A transfer that debits `from_account` and credits `to_account` by exactly `amount`.
    """
    tinybars = hbar_to_tinybars(amount)
    instruction = TransferInstruction(
        transfers=(
            TransferLeg(from_account, -tinybars),
            TransferLeg(to_account, tinybars),
        ),
        memo=memo)
    assert instruction.is_balanced()
    return instruction


class TransferBuilder:
    """
    Builds HBAR transfers from the connected account and has the wallet extension sign and
    submit them.

    The extension handles one request at a time, so submissions from the same account are
    queued and go out one after the other. Atomicity of the two legs is the ledger's concern,
    there is nothing to roll back here.
    """

    def __init__(self, provider: WalletProvider, connection: WalletConnectionManager,
            default_memo: str=DEFAULT_TIP_MEMO, account_locks: AccountLocks|None=None) -> None:
        self._provider = provider
        self._connection = connection
        self._default_memo = default_memo
        self._account_locks = account_locks or AccountLocks()

    def _check_connected(self, from_account: str) -> None:
        wallet = self._connection.wallet
        if not wallet.is_connected or wallet.account_id != from_account:
            raise WalletNotConnectedError(f"Account {from_account} is not the connected account")

    def _resolve_memo(self, memo: str|None) -> str:
        if not memo:
            return self._default_memo
        if len(memo.encode("utf-8")) > MAX_MEMO_BYTES:
            raise InvalidMemoError(f"Memo is longer than {MAX_MEMO_BYTES} bytes")
        return memo

    async def submit(self, from_account: str, to_account: str,
            amount: Union[Decimal, int, float, str], memo: str|None=None) -> TransactionResult:
        """
        Sign and submit a transfer of `amount` HBAR.

        Raises `WalletNotConnectedError` if `from_account` is not the connected account.
        Raises `InvalidAccountFormatError` if `to_account` is not a valid account identifier.
        Raises `InvalidAmountError` or `InvalidMemoError` for unusable transfer details.
        Raises `WalletUnavailableError` if there is no wallet extension to sign with.
        Raises `TransactionFailedError` if the extension rejects, errors or times out.
        """
        self._check_connected(from_account)
        to_account = parse_account_id(to_account).to_string()
        if to_account == from_account:
            raise InvalidTransferError("Cannot transfer to the sending account")
        hbar_amount = parse_hbar_amount(amount)
        resolved_memo = self._resolve_memo(memo)
        if not self._provider.is_available:
            raise WalletUnavailableError()

        async with self._account_locks.hold(from_account):
            # The wallet may have been switched to another account while we were queued.
            self._check_connected(from_account)

            instruction = build_transfer_instruction(from_account, to_account, hbar_amount,
                resolved_memo)
            logger.debug("submitting transfer of %s from %s to %s", format_hbar(hbar_amount),
                from_account, to_account)
            response = await self._provider.sign_and_submit(instruction)

        if isinstance(response, TransferRejected):
            logger.error("transfer of %s from %s to %s failed: %s", format_hbar(hbar_amount),
                from_account, to_account, response.reason)
            raise TransactionFailedError(response.reason)

        logger.info("transfer %s of %s from %s to %s accepted", response.transaction_id,
            format_hbar(hbar_amount), from_account, to_account)
        return TransactionResult(response.transaction_id, instruction)
