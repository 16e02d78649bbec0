from __future__ import annotations
from decimal import Decimal

from .constants import TipStatus
from .exceptions import NetworkError, RecipientUnresolvedError, RecordingFailedError
from .identity import IdentityService
from .logs import logs
from .types import RecordResult, TipRecord


logger = logs.get_logger("tip-ledger")


class TipLedgerRecorder:
    """
    Mirrors completed transfers into the off-chain tip history.

    The ledger transfer has already happened by the time this is called. A record that cannot
    be written leaves a transfer that no tip refers to, and the caller is told which of the two
    reasons applies: nobody is linked to the recipient account, or the service failed.
    """

    def __init__(self, identity: IdentityService) -> None:
        self._identity = identity

    async def record(self, recipient_account_id: str, amount: Decimal, transaction_id: str,
            message: str|None=None) -> RecordResult:
        """
        Raises `RecipientUnresolvedError` if no profile is linked to `recipient_account_id`.
        Raises `RecordingFailedError` if the service could not look up or store the tip, for
            whatever reason. The transfer has already happened so nothing else escapes.
        """
        try:
            recipient_key = await self._identity.find_profile_by_account_id(recipient_account_id)
        except Exception as exc:
            logger.error("tip %s not recorded, recipient lookup failed: %r", transaction_id, exc,
                exc_info=not isinstance(exc, NetworkError))
            raise RecordingFailedError(f"Recipient lookup failed: {exc}",
                transaction_id) from exc

        if recipient_key is None:
            logger.warning("tip %s not recorded, no profile is linked to account %s",
                transaction_id, recipient_account_id)
            raise RecipientUnresolvedError(transaction_id, recipient_account_id)

        try:
            sender_key = await self._identity.get_current_user()
            tip = TipRecord(
                recipient_identity_key=recipient_key,
                amount=amount,
                transaction_id=transaction_id,
                status=TipStatus.COMPLETED,
                message=message or None,
                sender_identity_key=sender_key)
            await self._identity.insert_tip(tip)
        except Exception as exc:
            logger.error("tip %s not recorded, insert failed: %r", transaction_id, exc,
                exc_info=not isinstance(exc, NetworkError))
            raise RecordingFailedError(f"Tip insert failed: {exc}", transaction_id) from exc

        logger.debug("recorded tip %s for %s", transaction_id, recipient_key)
        return RecordResult(tip)
