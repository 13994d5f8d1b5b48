"""Denylist entry for access tokens revoked by logout."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ficom.core.extensions import db


class RevokedToken(db.Model):
    """
    Access-token ``jti`` that must be rejected until ``expires_at``.

    Only used when Redis is not configured; rows past ``expires_at`` are
    harmless because the token itself is expired by then.
    """

    __tablename__ = "revoked_tokens"

    jti: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_revoked_tokens_expires_at", "expires_at"),)

    def __repr__(self) -> str:
        return f"<RevokedToken jti={self.jti}>"
