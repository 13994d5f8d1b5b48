from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TokenDenylistStore(Protocol):
    """
    Abstraction for a denylist store for **access tokens**.

    Methods are expected to be idempotent.
    """

    def is_revoked(self, jti: str) -> bool: ...
    def revoke_jti(self, jti: str, expires_at: datetime, *, user_id: int | None = None) -> None: ...

