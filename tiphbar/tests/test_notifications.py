import logging

import pytest

from tiphbar.constants import NotificationSeverity
from tiphbar.exceptions import AccountNotFoundError, IdentityServiceError, \
    InvalidAccountFormatError, InvalidAmountError, InvalidTransferError, NetworkError, \
    RecipientUnresolvedError, WalletUnavailableError
from tiphbar.notifications import DEFAULT_ERROR_MESSAGE, LoggingNotificationSink, \
    notification_for_error, NotificationBroadcaster
from tiphbar.types import Notification


@pytest.mark.parametrize("exc,title", (
    (WalletUnavailableError(), "Wallet Not Found"),
    (InvalidAccountFormatError("abc"), "Invalid Account ID"),
    (AccountNotFoundError("0.0.9"), "Account Not Found"),
    (NetworkError("down"), "Network Error"),
    (IdentityServiceError("refused", 500), "Service Error"),
    (InvalidAmountError("zero"), "Invalid Amount"),
    (InvalidTransferError("self"), "Invalid Tip"),
    (RecipientUnresolvedError("tx", "0.0.9"), "Tip Not Recorded"),
))
def test_notification_for_error(exc: Exception, title: str) -> None:
    notification = notification_for_error(exc)
    assert notification.title == title
    assert notification.severity == NotificationSeverity.ERROR


def test_notification_for_error_subclass() -> None:
    class ExtensionGoneError(WalletUnavailableError):
        pass

    assert notification_for_error(ExtensionGoneError()).title == "Wallet Not Found"


def test_notification_for_unknown_error() -> None:
    notification = notification_for_error(KeyError("x"), NotificationSeverity.WARNING)
    assert (notification.title, notification.description) == DEFAULT_ERROR_MESSAGE
    assert notification.severity == NotificationSeverity.WARNING


def test_logging_sink(caplog) -> None:
    sink = LoggingNotificationSink()
    with caplog.at_level(logging.INFO, logger="tiphbar.user"):
        sink.notify(Notification("Tip Sent!", "Successfully sent 1 HBAR"))
        sink.notify(Notification("Tip Not Recorded", "No profile",
            NotificationSeverity.WARNING))

    assert [ (record.levelno, record.getMessage()) for record in caplog.records ] == [
        (logging.INFO, "Tip Sent!: Successfully sent 1 HBAR"),
        (logging.WARNING, "Tip Not Recorded: No profile"),
    ]


def test_broadcaster() -> None:
    received1: list[Notification] = []
    received2: list[Notification] = []

    def failing_callback(notification: Notification) -> None:
        raise RuntimeError("broken view")

    broadcaster = NotificationBroadcaster()
    broadcaster.register_callback(failing_callback)
    broadcaster.register_callback(received1.append)
    broadcaster.register_callback(received2.append)

    notification = Notification("Wallet Connected", "Connected to 0.0.1001")
    broadcaster.notify(notification)
    assert received1 == [ notification ]
    assert received2 == [ notification ]

    broadcaster.unregister_callback(received2.append)
    broadcaster.notify(notification)
    assert len(received1) == 2
    assert len(received2) == 1
