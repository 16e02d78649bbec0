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
import re

import aiohttp

from .constants import AccountVerificationResult, DEFAULT_MIRROR_NODE_TIMEOUT
from .exceptions import InvalidAccountFormatError
from .logs import logs
from .network_support.mirror_node import get_account_status_async
from .networks import Net
from .types import AccountId


logger = logs.get_logger("account-verifier")

# The canonical `shard.realm.number` form used across all interfaces.
ACCOUNT_ID_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$", re.ASCII)


def parse_account_id(text: str) -> AccountId:
    """
    Parse the textual form of an account identifier for the selected network.

    Raises `InvalidAccountFormatError` if `text` does not have the `shard.realm.number` form or
    if it names a shard or realm the selected network does not have.
    """
    match = ACCOUNT_ID_PATTERN.fullmatch(text)
    if match is None:
        raise InvalidAccountFormatError(text)
    account_id = AccountId(*(int(part) for part in match.groups()))
    if account_id.shard != Net.SHARD or account_id.realm != Net.REALM:
        raise InvalidAccountFormatError(text)
    return account_id


def is_valid_account_id(text: str) -> bool:
    try:
        parse_account_id(text)
    except InvalidAccountFormatError:
        return False
    return True


class AccountVerifier:
    """
    Confirms that a manually entered account exists before it is linked to anyone.

    The syntax check is local and comes first, so malformed input never costs a request.
    Verification has no side effects and can be repeated freely.
    """

    def __init__(self, session: aiohttp.ClientSession, mirror_node_url: str,
            timeout: float=DEFAULT_MIRROR_NODE_TIMEOUT) -> None:
        self._session = session
        self._mirror_node_url = mirror_node_url
        self._timeout = timeout

    async def verify(self, candidate: str) -> AccountVerificationResult:
        try:
            account_id = parse_account_id(candidate)
        except InvalidAccountFormatError:
            logger.debug("rejected malformed account identifier %r", candidate)
            return AccountVerificationResult.INVALID_FORMAT
        return await get_account_status_async(self._session, self._mirror_node_url,
            account_id.to_string(), self._timeout)
