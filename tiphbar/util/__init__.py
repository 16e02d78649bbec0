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

import asyncio
from contextlib import asynccontextmanager
from decimal import Decimal, InvalidOperation
import os
import stat
from typing import AsyncIterator, Union

from ..constants import HBAR_DECIMAL_PLACES, MAX_HBAR_SUPPLY, TINYBARS_PER_HBAR
from ..exceptions import InvalidAmountError
from ..logs import logs


logger = logs.get_logger("util")


def make_dir(path: str) -> None:
    # Make directory if it does not yet exist.
    if not os.path.exists(path):
        if os.path.islink(path):
            raise Exception('Dangling link: ' + path)
        os.mkdir(path)
        os.chmod(path, stat.S_IRUSR | stat.S_IWUSR | stat.S_IXUSR)


def parse_hbar_amount(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Convert a user supplied HBAR amount to a `Decimal`.

    Floats go through their shortest string form so that `0.1` stays `0.1`.

    Raises `InvalidAmountError` if the value is not a finite positive number, is more precise
    than one tinybar or is more HBAR than exists.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"Invalid amount {value!r}") from None
    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount {value!r}")
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount}")
    if amount > MAX_HBAR_SUPPLY:
        raise InvalidAmountError(f"Amount {amount} exceeds the total HBAR supply")
    exponent = amount.normalize().as_tuple().exponent
    assert isinstance(exponent, int)
    if -exponent > HBAR_DECIMAL_PLACES:
        raise InvalidAmountError(f"Amount {amount} is smaller than one tinybar")
    return amount


def hbar_to_tinybars(amount: Decimal) -> int:
    tinybars = amount * TINYBARS_PER_HBAR
    assert tinybars == tinybars.to_integral_value(), "sub-tinybar amount"
    return int(tinybars)


def format_hbar(amount: Decimal) -> str:
    text = format(amount.normalize(), 'f')
    return f"{text} HBAR"


class AccountLocks:
    """
    Reference counted per-account locks. A lock exists only while some task holds or waits on
    it, so the mapping does not grow with every account ever used.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._counters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, account_id: str) -> AsyncIterator[None]:
        if account_id in self._locks:
            self._counters[account_id] += 1
        else:
            self._locks[account_id] = asyncio.Lock()
            self._counters[account_id] = 1
        lock = self._locks[account_id]

        try:
            if lock.locked():
                logger.debug("waiting for in-flight operation on account %s", account_id)
            async with lock:
                yield
        finally:
            if self._counters[account_id] == 1:
                del self._counters[account_id]
                del self._locks[account_id]
            else:
                self._counters[account_id] -= 1

    def is_locked(self, account_id: str) -> bool:
        lock = self._locks.get(account_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
