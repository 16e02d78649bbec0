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
The wallet connection state machine.

    DISCONNECTED --connect--> CONNECTING --success--> CONNECTED
                                  |
                                  +--failure--> back to the state before the attempt

There are two ways in. The wallet extension vouches for the account it shares, while a manually
entered account is checked against the mirror node. Both end in the same CONNECTED state so
that consumers only ever look at `wallet.is_connected` and `wallet.account_id`.

The user's profile holds the canonical linked account, `WalletState` is a cache of it for this
session. `sync_with_profile` loads it and the connect paths write it back.
'''

from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
import dataclasses
from typing import AsyncIterator

from .account_verifier import AccountVerifier, parse_account_id
from .constants import AccountVerificationResult, APP_DESCRIPTION, APP_ICON_URL, APP_NAME, \
    NotificationSeverity
from .exceptions import AccountNotFoundError, ConnectionFailedError, InvalidAccountFormatError, \
    NetworkError, NotSignedInError, WalletBusyError, WalletUnavailableError
from .identity import IdentityService
from .logs import logs
from .notifications import LoggingNotificationSink, notification_for_error, NotificationSink
from .types import AppMetadata, ConnectionRejected, ConnectResult, Notification, WalletState
from .wallet_provider import WalletProvider


logger = logs.get_logger("wallet-connection")


class WalletConnectionManager:
    def __init__(self, provider: WalletProvider, verifier: AccountVerifier,
            identity: IdentityService, notifier: NotificationSink|None=None,
            app_metadata: AppMetadata|None=None) -> None:
        self._provider = provider
        self._verifier = verifier
        self._identity = identity
        self._notifier: NotificationSink = notifier or LoggingNotificationSink()
        self._app_metadata = app_metadata or AppMetadata(APP_NAME, APP_DESCRIPTION, APP_ICON_URL)

        # The only writer of the wallet state is this object.
        self._state = WalletState()
        # Held for the duration of a connection attempt or profile synchronisation.
        self._connect_lock = asyncio.Lock()
        # Set from the start of a connection attempt, including any wait for a sync to finish.
        self._connect_pending = False

    @property
    def wallet(self) -> WalletState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._connect_pending or self._connect_lock.locked()

    def _set_state(self, state: WalletState) -> None:
        logger.debug("wallet state %s -> %s", self._state.connection_state.name,
            state.connection_state.name)
        self._state = state

    def _notify_failure(self, exc: Exception) -> None:
        self._notifier.notify(notification_for_error(exc))

    @asynccontextmanager
    async def _connection_attempt(self) -> AsyncIterator[None]:
        """
        Run a connection attempt exclusively. On any failure the wallet state is put back the
        way it was before the attempt, and the user is told about it once.

        A profile synchronisation in progress is waited for, it does not make the wallet busy.

        Raises `WalletBusyError` if another attempt is in progress.
        """
        if self._connect_pending:
            busy_exc = WalletBusyError("A wallet connection is already in progress")
            self._notify_failure(busy_exc)
            raise busy_exc

        self._connect_pending = True
        try:
            async with self._connect_lock:
                previous_state = self._state
                try:
                    yield
                except BaseException as exc:
                    if self._state != previous_state:
                        self._set_state(previous_state)
                    if isinstance(exc, Exception):
                        logger.error("wallet connection failed: %r", exc)
                        self._notify_failure(exc)
                    raise
        finally:
            self._connect_pending = False

    def _begin_connecting(self) -> None:
        self._set_state(dataclasses.replace(self._state, is_connecting=True))

    async def connect_via_extension(self) -> ConnectResult:
        """
        Connect the first account the wallet extension shares with us.

        Raises `WalletUnavailableError` if there is no extension, nothing is contacted.
        Raises `ConnectionFailedError` if the extension rejects, errors or times out.
        Raises `WalletBusyError` if a connection attempt is already in progress.
        """
        async with self._connection_attempt():
            if not self._provider.is_available:
                raise WalletUnavailableError()

            self._begin_connecting()
            response = await self._provider.request_connection(self._app_metadata)
            if isinstance(response, ConnectionRejected):
                raise ConnectionFailedError(response.reason)

            account_id = response.account_ids[0]
            try:
                account_id = parse_account_id(account_id).to_string()
            except InvalidAccountFormatError:
                raise ConnectionFailedError(
                    f"Wallet shared an unusable account identifier {account_id!r}")
            return await self._complete_connection(account_id)

    async def connect_manually(self, candidate: str) -> ConnectResult:
        """
        Connect an account the user typed in, after checking that the network knows it.

        Raises `InvalidAccountFormatError` if `candidate` is not an account identifier for the
            selected network, surrounding whitespace included. No request is made in this case.
        Raises `AccountNotFoundError` if the mirror node does not know the account.
        Raises `NetworkError` if the mirror node could not answer.
        Raises `WalletBusyError` if a connection attempt is already in progress.
        """
        async with self._connection_attempt():
            account_id = parse_account_id(candidate).to_string()

            self._begin_connecting()
            result = await self._verifier.verify(account_id)
            if result == AccountVerificationResult.NOT_FOUND:
                raise AccountNotFoundError(account_id)
            elif result == AccountVerificationResult.NETWORK_ERROR:
                raise NetworkError(f"Unable to verify account {account_id}")
            elif result == AccountVerificationResult.INVALID_FORMAT:
                raise InvalidAccountFormatError(account_id)
            return await self._complete_connection(account_id)

    async def _complete_connection(self, account_id: str) -> ConnectResult:
        persist_error = await self._persist_account(account_id)
        self._set_state(WalletState(account_id=account_id, is_connected=True,
            is_connecting=False))
        logger.info("connected account %s", account_id)

        self._notifier.notify(Notification("Wallet Connected", f"Connected to {account_id}"))
        if persist_error is not None:
            # The connection stands, but it will not be remembered next session.
            self._notifier.notify(Notification("Account Not Saved",
                "Your wallet is connected but could not be linked to your profile",
                NotificationSeverity.WARNING))
        return ConnectResult(account_id, persist_error)

    async def _persist_account(self, account_id: str) -> Exception|None:
        """
        Link the account to the signed in user's profile.

        Raises nothing. Returns the reason the account could not be saved, if it could not.
        """
        try:
            identity_key = await self._identity.get_current_user()
            if identity_key is None:
                raise NotSignedInError("No signed in user to link the account to")
            await self._identity.update_profile(identity_key, account_id)
        except (NetworkError, NotSignedInError) as exc:
            logger.error("unable to save account %s to profile: %r", account_id, exc)
            return exc
        return None

    async def sync_with_profile(self) -> WalletState:
        """
        Adopt the account linked to the signed in user's profile, if there is one.

        The linked account is trusted as is. The profile is canonical, so a linked account that
        differs from the connected one replaces it. A session without a linked account keeps
        whatever state it has, so this never disconnects a connected wallet. It waits for any
        connection attempt in progress and can be called any number of times.

        Raises `NetworkError` if the profile could not be read.
        """
        async with self._connect_lock:
            try:
                identity_key = await self._identity.get_current_user()
                if identity_key is None:
                    return self._state
                profile = await self._identity.get_profile(identity_key)
            except NetworkError as exc:
                logger.error("unable to read profile: %r", exc)
                self._notify_failure(exc)
                raise

            account_id = profile.get("hedera_account_id") if profile is not None else None
            if not account_id:
                return self._state

            state = WalletState(account_id=account_id, is_connected=True, is_connecting=False)
            if state != self._state:
                if self._state.is_connected:
                    logger.warning("profile links account %s, replacing connected account %s",
                        account_id, self._state.account_id)
                logger.info("synchronised account %s from profile", account_id)
                self._set_state(state)
            return self._state
