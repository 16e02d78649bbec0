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
import dataclasses
from decimal import Decimal
from typing import Union

import aiohttp

from .account_verifier import AccountVerifier
from .constants import NotificationSeverity
from .exceptions import TipRecordingError, WalletNotConnectedError
from .identity import IdentityService
from .logs import logs
from .network_support.supabase import SupabaseIdentityService
from .notifications import LoggingNotificationSink, NotificationBroadcaster, \
    notification_for_error, NotificationSink
from .simple_config import SimpleConfig
from .tip_ledger import TipLedgerRecorder
from .transfer import TransferBuilder
from .types import Notification, TipReceipt, TipRecord
from .util import format_hbar, parse_hbar_amount
from .wallet_connection import WalletConnectionManager
from .wallet_provider import AvailableWalletProvider, UnavailableWalletProvider, \
    WalletExtensionHandle, WalletProvider


logger = logs.get_logger("tipping")


class TipService:
    """
    Sends a tip: the ledger transfer first, then the off-chain record of it.

    The ledger transfer is authoritative. Once it has been accepted the tip counts as sent and
    its transaction id is returned, whether or not the record could be written.
    """

    def __init__(self, connection: WalletConnectionManager, transfers: TransferBuilder,
            recorder: TipLedgerRecorder, notifier: NotificationSink|None=None) -> None:
        self._connection = connection
        self._transfers = transfers
        self._recorder = recorder
        self._notifier: NotificationSink = notifier or LoggingNotificationSink()

    async def send_tip(self, to_account: str, amount: Union[Decimal, int, float, str],
            message: str|None=None) -> TipReceipt:
        """
        Raises `WalletNotConnectedError` if no wallet is connected, nothing is contacted.
        Raises `InvalidAmountError` if `amount` is not a positive tinybar multiple, no
            transfer is built.
        Raises any of the `TransferBuilder.submit` errors if the transfer did not happen, in
            which case nothing is recorded.

        A transfer that happened but was not recorded is returned with `recording_error` set.
        """
        try:
            wallet = self._connection.wallet
            if not wallet.is_connected or wallet.account_id is None:
                raise WalletNotConnectedError("Connect a wallet before sending tips")
            hbar_amount = parse_hbar_amount(amount)
            result = await self._transfers.submit(wallet.account_id, to_account, hbar_amount,
                message)
        except Exception as exc:
            logger.error("tip to %s not sent: %r", to_account, exc)
            self._notifier.notify(notification_for_error(exc))
            raise

        recipient_account_id = result.instruction.transfers[-1].account_id
        tip: TipRecord|None = None
        recording_error: TipRecordingError|None = None
        try:
            tip = (await self._recorder.record(recipient_account_id, hbar_amount,
                result.transaction_id, message)).tip
        except TipRecordingError as exc:
            recording_error = exc

        self._notifier.notify(Notification("Tip Sent!",
            f"Successfully sent {format_hbar(hbar_amount)}"))
        if recording_error is not None:
            self._notifier.notify(notification_for_error(recording_error,
                NotificationSeverity.WARNING))
        return TipReceipt(result.transaction_id, tip, recording_error)



@dataclasses.dataclass
class TippingSession:
    provider: WalletProvider
    identity: IdentityService
    # Register callbacks here to show notifications to the user.
    notifications: NotificationBroadcaster
    connection: WalletConnectionManager
    transfers: TransferBuilder
    recorder: TipLedgerRecorder
    tips: TipService


def create_tipping_session(config: SimpleConfig, http_session: aiohttp.ClientSession,
        handle: WalletExtensionHandle|None, identity: IdentityService|None=None,
        access_token: str|None=None, notifier: NotificationSink|None=None) -> TippingSession:
    """
    Wire up the components for one user session. All of them share one notification
    broadcaster and the wallet state owned by the connection manager.

    `handle` is the wallet extension if this environment has one. Unless another `identity`
    service is given, the configured Supabase project is used with the signed in user's
    `access_token`.

    Raises `ValueError` if the Supabase project is needed but not configured.
    """
    provider: WalletProvider
    if handle is None:
        provider = UnavailableWalletProvider()
    else:
        provider = AvailableWalletProvider(handle, config.get_extension_timeout())

    if identity is None:
        supabase_url = config.get_supabase_url()
        supabase_api_key = config.get_supabase_api_key()
        if supabase_url is None or supabase_api_key is None:
            raise ValueError("The 'supabase_url' and 'supabase_api_key' settings are required")
        identity = SupabaseIdentityService(http_session, supabase_url, supabase_api_key,
            access_token, config.get_identity_service_timeout())

    notifications = NotificationBroadcaster()
    notifications.register_callback(LoggingNotificationSink().notify)
    if notifier is not None:
        notifications.register_callback(notifier.notify)

    verifier = AccountVerifier(http_session, config.get_mirror_node_url(),
        config.get_mirror_node_timeout())
    connection = WalletConnectionManager(provider, verifier, identity, notifications,
        config.get_app_metadata())
    transfers = TransferBuilder(provider, connection, config.get_default_memo())
    recorder = TipLedgerRecorder(identity)
    tips = TipService(connection, transfers, recorder, notifications)
    return TippingSession(provider, identity, notifications, connection, transfers, recorder,
        tips)
