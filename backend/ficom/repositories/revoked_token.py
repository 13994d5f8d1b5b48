"""SQL-backed denylist of revoked access-token identifiers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from ficom.models.revoked_token import RevokedToken
from ficom.repositories.base import BaseRepository


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Persistence-only repository for :class:`RevokedToken`.

    Implements the ``DenylistStore`` port on top of the relational store.
    """

    model = RevokedToken

    def _pk_attr(self):
        return RevokedToken.jti

    def revoke_jti(self, jti: str, expires_at: datetime, *, user_id: int | None = None) -> None:
        """Record ``jti`` as revoked; repeated calls are no-ops."""
        if self.get(jti) is not None:
            return
        self.add(RevokedToken(jti=jti, user_id=user_id, expires_at=expires_at))

    def is_revoked(self, jti: str) -> bool:
        stmt = select(RevokedToken.jti).where(RevokedToken.jti == jti)
        return self.session.execute(stmt).first() is not None
