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
Read-only queries against a Hedera mirror node REST API.

The mirror node does not take part in consensus, we only use it to learn whether an account
exists. No authentication is needed.
'''

from __future__ import annotations
import asyncio
from http import HTTPStatus

import aiohttp

from ..constants import AccountVerificationResult
from ..logs import logs


logger = logs.get_logger("mirror-node")

# The mirror node answers 400 for identifiers it will not look up (a shard or realm it does not
# serve, an out of range number). For our purposes these accounts do not exist either.
NOT_FOUND_STATUSES = { HTTPStatus.NOT_FOUND, HTTPStatus.BAD_REQUEST }


async def get_account_status_async(session: aiohttp.ClientSession, base_url: str,
        account_id: str, timeout: float) -> AccountVerificationResult:
    """
    Ask the mirror node whether `account_id` exists.

    `base_url` is the API root ending in a slash, e.g. `https://.../api/v1/`.

    Raises nothing. Connection problems, timeouts and server side failures are all reported as
    `NETWORK_ERROR` as there is no authoritative answer in any of those cases.
    """
    url = f"{base_url}accounts/{account_id}"
    headers = {
        'Accept':           'application/json',
        'User-Agent':       'TipHBAR',
    }
    try:
        async with session.get(url, headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout)) as response:
            if 200 <= response.status < 300:
                logger.debug("account %s exists", account_id)
                return AccountVerificationResult.VERIFIED
            if response.status in NOT_FOUND_STATUSES:
                logger.debug("account %s not found (status %d)", account_id, response.status)
                return AccountVerificationResult.NOT_FOUND
            logger.error("mirror node lookup of %s failed, status %d reason %s", account_id,
                response.status, response.reason)
            return AccountVerificationResult.NETWORK_ERROR
    except asyncio.TimeoutError:
        logger.error("mirror node lookup of %s timed out after %s seconds", account_id, timeout)
        return AccountVerificationResult.NETWORK_ERROR
    except aiohttp.ClientError:
        logger.debug("Wrapped aiohttp exception", exc_info=True)
        logger.error("mirror node lookup of %s failed, unable to connect: %s", account_id, url)
        return AccountVerificationResult.NETWORK_ERROR

