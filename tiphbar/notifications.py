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
User-facing notifications.

Business logic never talks to a user interface directly. It hands a `Notification` to a sink
and carries on, the sink decides how it is shown. Error notifications are derived from the
exception class through `ERROR_MESSAGES` so that every failure of a given kind reads the same.
'''

from __future__ import annotations
import logging
import threading
from typing import Callable, Protocol

from .constants import NotificationSeverity
from .exceptions import AccountNotFoundError, ConnectionFailedError, IdentityServiceError, \
    InvalidAccountFormatError, InvalidAmountError, InvalidMemoError, InvalidTransferError, \
    NetworkError, NotSignedInError, RecipientUnresolvedError, RecordingFailedError, \
    TransactionFailedError, WalletBusyError, WalletNotConnectedError, WalletUnavailableError
from .logs import logs
from .types import Notification


logger = logs.get_logger("notifications")


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class LoggingNotificationSink:
    """Writes notifications to the log, for headless use."""

    _levels = {
        NotificationSeverity.INFO: logging.INFO,
        NotificationSeverity.WARNING: logging.WARNING,
        NotificationSeverity.ERROR: logging.ERROR,
    }

    def __init__(self, name: str="user") -> None:
        self._logger = logs.get_logger(name)

    def notify(self, notification: Notification) -> None:
        self._logger.log(self._levels[notification.severity], "%s: %s", notification.title,
            notification.description)


NotificationCallback = Callable[[Notification], None]


class NotificationBroadcaster:
    """
    Fans each notification out to the registered callbacks. A failing callback is logged and
    does not prevent delivery to the others.
    """

    def __init__(self) -> None:
        self._callbacks: list[NotificationCallback] = []
        self._callback_lock = threading.Lock()

    def register_callback(self, callback: NotificationCallback) -> None:
        with self._callback_lock:
            if callback in self._callbacks:
                logger.error("Callback reregistered %s", callback)
                return
            self._callbacks.append(callback)

    def unregister_callback(self, callback: NotificationCallback) -> None:
        with self._callback_lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def notify(self, notification: Notification) -> None:
        with self._callback_lock:
            callbacks = self._callbacks[:]
        for callback in callbacks:
            try:
                callback(notification)
            except Exception:
                logger.exception("Notification callback %s failed", callback)


# Title and description for each failure kind. Looked up along the exception's MRO so that
# subclasses without their own entry use their parent's.
ERROR_MESSAGES: dict[type[BaseException], tuple[str, str]] = {
    WalletUnavailableError: ("Wallet Not Found",
        "Please install HashPack wallet extension or use manual connection"),
    ConnectionFailedError: ("Connection Failed", "Failed to connect wallet"),
    WalletBusyError: ("Connection In Progress",
        "Please wait for the current wallet connection to finish"),
    InvalidAccountFormatError: ("Invalid Account ID",
        "Please enter a valid Hedera account ID (e.g., 0.0.1234567)"),
    AccountNotFoundError: ("Account Not Found",
        "This Hedera account does not exist on the network"),
    NetworkError: ("Network Error",
        "Could not reach the network, please try again"),
    IdentityServiceError: ("Service Error",
        "The TipHBAR service could not complete the request"),
    NotSignedInError: ("Not Signed In", "Please log in to continue"),
    WalletNotConnectedError: ("Wallet Not Connected", "Please connect your wallet first"),
    InvalidAmountError: ("Invalid Amount", "Please enter a valid tip amount"),
    InvalidMemoError: ("Message Too Long", "Please shorten the tip message"),
    InvalidTransferError: ("Invalid Tip", "This tip cannot be sent"),
    TransactionFailedError: ("Transaction Failed", "Failed to send tip"),
    RecipientUnresolvedError: ("Tip Not Recorded",
        "The tip was sent but the recipient has no TipHBAR profile linked to that account"),
    RecordingFailedError: ("Tip Not Recorded",
        "The tip was sent but could not be saved to your tip history"),
}

DEFAULT_ERROR_MESSAGE = ("Error", "Something went wrong")


def notification_for_error(exc: BaseException,
        severity: NotificationSeverity=NotificationSeverity.ERROR) -> Notification:
    for exception_class in type(exc).__mro__:
        if exception_class in ERROR_MESSAGES:
            title, description = ERROR_MESSAGES[exception_class]
            break
    else:
        title, description = DEFAULT_ERROR_MESSAGE
    return Notification(title, description, severity)
