"""
Persistence contract for server-side refresh-token records.

:class:`~ficom.repositories.refresh_token.RefreshTokenRepository` satisfies it
structurally.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol


class RefreshTokenStore(Protocol):
    """Server-side refresh-token records.

    ``revoke`` and ``revoke_all_for_user`` only flip the revoked flag; records
    are never deleted.
    """

    def create(self, *, user_id: int, token: str, expires_at: datetime) -> Any: ...
    def get_by_token(self, token: str) -> Any | None: ...
    def revoke(self, token_id: int) -> int: ...
    def revoke_all_for_user(self, user_id: int) -> int: ...
