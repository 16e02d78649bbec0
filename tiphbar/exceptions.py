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


# Exceptions are placed here to simplify the import dependency graph and resolve circular imports

class WalletUnavailableError(Exception):
    """
    There is no wallet extension in this environment. This is an expected condition and the
    user is offered the manual connection instead.
    """
    pass


class ConnectionFailedError(Exception):
    """
    The wallet extension is present but it rejected, failed or timed out on the connection
    request.
    """
    pass


class InvalidAccountFormatError(ValueError):
    def __init__(self, candidate: str) -> None:
        super().__init__(f"Invalid account identifier {candidate!r}")
        self.candidate = candidate


class AccountNotFoundError(Exception):
    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account {account_id} does not exist on the network")
        self.account_id = account_id


class NetworkError(Exception):
    """
    An external service call could not be completed. This covers connection problems, timeouts
    and remote failures where no authoritative answer was obtained.
    """
    pass


class IdentityServiceError(NetworkError):
    """
    The identity/persistence service answered but refused or failed the request.
    """
    def __init__(self, message: str, status: int|None=None) -> None:
        super().__init__(message)
        self.status = status


class NotSignedInError(Exception):
    pass


class WalletNotConnectedError(Exception):
    pass


class WalletBusyError(Exception):
    """
    Another connection attempt is in progress for this wallet.
    """
    pass


class InvalidTransferError(ValueError):
    pass

class InvalidAmountError(InvalidTransferError):
    pass

class InvalidMemoError(InvalidTransferError):
    pass


class TransactionFailedError(Exception):
    """
    The wallet extension rejected or failed to sign and submit the transfer. Nothing was
    recorded for it.
    """
    pass


class TipRecordingError(Exception):
    """
    The transfer was accepted by the ledger but there is no off-chain tip record for it.
    """
    def __init__(self, message: str, transaction_id: str) -> None:
        super().__init__(message)
        self.transaction_id = transaction_id

class RecipientUnresolvedError(TipRecordingError):
    def __init__(self, transaction_id: str, account_id: str) -> None:
        super().__init__(f"No profile is linked to account {account_id}", transaction_id)
        self.account_id = account_id

class RecordingFailedError(TipRecordingError):
    pass
