"""Refresh-token repository (server-side session records)."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from ficom.models.refresh_token import RefreshToken
from ficom.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Revocation only flips ``is_revoked``; rows are never deleted here.
    """

    model = RefreshToken

    def create(self, *, user_id: int, token: str, expires_at: datetime) -> RefreshToken:
        """Persist a new, non-revoked record and flush to get its id."""
        return self.add(
            RefreshToken(user_id=user_id, token=token, expires_at=expires_at, is_revoked=False)
        )

    def get_by_token(self, token: str) -> RefreshToken | None:
        """Look up a record by its opaque value with the owner eager-loaded.

        :param token: Value presented by the client.
        :type token: str
        :returns: Record or ``None``.
        :rtype: RefreshToken | None
        """
        stmt = (
            select(RefreshToken)
            .options(joinedload(RefreshToken.user))
            .where(RefreshToken.token == token)
        )
        result = self.session.execute(stmt).scalars().first()
        return cast(RefreshToken | None, result)

    def revoke(self, token_id: int) -> int:
        """Mark one record as revoked if it is still active.

        The ``is_revoked`` guard makes the flip a compare-and-set: of two
        concurrent rotations of the same token only one touches the row.

        :param token_id: Primary key of the record.
        :type token_id: int
        :returns: Rows touched (``0`` when already revoked or missing).
        :rtype: int
        """
        result = self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)

    def revoke_all_for_user(self, user_id: int) -> int:
        """Revoke every still-active record owned by ``user_id``.

        :returns: Number of records flipped to revoked.
        :rtype: int
        """
        result = self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)

