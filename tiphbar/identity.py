from __future__ import annotations
from typing import Protocol

from .types import ProfileRow, TipRecord


class IdentityService(Protocol):
    """
    The persistence and identity backend. Implementations raise `NetworkError` (or its
    `IdentityServiceError` subclass) for any call that could not be completed.
    """

    async def get_current_user(self) -> str|None:
        """The identity key of the signed in user, or `None` if nobody is signed in."""
        ...

    async def get_profile(self, identity_key: str) -> ProfileRow|None:
        ...

    async def update_profile(self, identity_key: str, hedera_account_id: str) -> None:
        ...

    async def find_profile_by_account_id(self, hedera_account_id: str) -> str|None:
        """The identity key of the profile linked to the account, or `None`."""
        ...

    async def insert_tip(self, tip: TipRecord) -> None:
        ...
