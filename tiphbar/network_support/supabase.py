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
The identity service backed by a Supabase project.

Profiles and tips are tables exposed through the project's PostgREST endpoint, the signed in
user comes from the auth endpoint. Requests carry the project API key and, where there is one,
the user's access token so that row level security applies as it would for the web client.
'''

from __future__ import annotations
import asyncio
from http import HTTPStatus
from typing import Any, cast

import aiohttp

from ..constants import DEFAULT_IDENTITY_SERVICE_TIMEOUT
from ..exceptions import IdentityServiceError, NetworkError
from ..logs import logs
from ..types import ProfileRow, TipRecord


logger = logs.get_logger("supabase")

PROFILES_PATH = "/rest/v1/profiles"
TIPS_PATH = "/rest/v1/tips"
USER_PATH = "/auth/v1/user"


def _check_profile_rows(rows: Any) -> list[dict[str, Any]]:
    if not isinstance(rows, list) or \
            not all(isinstance(row, dict) and isinstance(row.get("id"), str) for row in rows):
        raise IdentityServiceError("Malformed profile response")
    return rows


class SupabaseIdentityService:
    def __init__(self, session: aiohttp.ClientSession, base_url: str, api_key: str,
            access_token: str|None=None,
            timeout: float=DEFAULT_IDENTITY_SERVICE_TIMEOUT) -> None:
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._timeout = timeout

    def set_access_token(self, access_token: str|None) -> None:
        self._access_token = access_token

    def _get_headers(self, prefer: str|None=None) -> dict[str, str]:
        headers = {
            'Accept':           'application/json',
            'User-Agent':       'TipHBAR',
            'apikey':           self._api_key,
            'Authorization':    f'Bearer {self._access_token or self._api_key}',
        }
        if prefer is not None:
            headers['Prefer'] = prefer
        return headers

    async def _request(self, method: str, path: str, params: dict[str, str]|None=None,
            body: Any=None, prefer: str|None=None) -> Any:
        """
        Raises `IdentityServiceError` if the service answers with an error status or a body
            that is not valid JSON.
        Raises `NetworkError` if the service cannot be reached or does not answer in time.
        """
        url = f"{self._base_url}{path}"
        try:
            async with self._session.request(method, url, params=params, json=body,
                    headers=self._get_headers(prefer),
                    timeout=aiohttp.ClientTimeout(total=self._timeout)) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise IdentityServiceError(f"{method} {path} failed with status "
                        f"{response.status}: {text[:200]}", response.status)
                if response.status == HTTPStatus.NO_CONTENT:
                    return None
                if response.content_type != "application/json":
                    return None
                try:
                    return await response.json()
                except ValueError:
                    raise IdentityServiceError(f"{method} {path} returned malformed JSON",
                        response.status) from None
        except asyncio.TimeoutError:
            raise NetworkError(f"{method} {path} timed out after {self._timeout} seconds")
        except aiohttp.ClientError:
            logger.debug("Wrapped aiohttp exception", exc_info=True)
            raise NetworkError(f"Unable to establish server connection: {url}")

    async def get_current_user(self) -> str|None:
        if self._access_token is None:
            return None
        try:
            data = await self._request("GET", USER_PATH)
        except IdentityServiceError as exc:
            if exc.status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
                logger.debug("access token was not accepted, treating as signed out")
                return None
            raise
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise IdentityServiceError("Malformed user response")
        return cast(str, data["id"])

    async def get_profile(self, identity_key: str) -> ProfileRow|None:
        rows = await self._request("GET", PROFILES_PATH, params={
            "id": f"eq.{identity_key}",
            "select": "id,hedera_account_id,display_name",
        })
        rows = _check_profile_rows(rows)
        if len(rows) == 0:
            return None
        return cast(ProfileRow, rows[0])

    async def update_profile(self, identity_key: str, hedera_account_id: str) -> None:
        await self._request("PATCH", PROFILES_PATH, params={ "id": f"eq.{identity_key}" },
            body={ "hedera_account_id": hedera_account_id }, prefer="return=minimal")

    async def find_profile_by_account_id(self, hedera_account_id: str) -> str|None:
        rows = await self._request("GET", PROFILES_PATH, params={
            "hedera_account_id": f"eq.{hedera_account_id}",
            "select": "id",
            "limit": "1",
        })
        rows = _check_profile_rows(rows)
        if len(rows) == 0:
            return None
        return cast(str, rows[0]["id"])

    async def insert_tip(self, tip: TipRecord) -> None:
        await self._request("POST", TIPS_PATH, body=[ tip.to_row() ], prefer="return=minimal")
