"""Server-side record of an opaque refresh token."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ficom.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class RefreshToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One refresh credential handed to a client.

    Records are never deleted by the auth flows; rotation and new logins only
    flip ``is_revoked``. A record is usable while it is not revoked and
    ``expires_at`` has not passed.

    Fields
    ------
    token : str
        uuid4 string given to the client (stored as issued).
    user_id : int
        Owner; rows go away with the user (``ON DELETE CASCADE``).
    expires_at : datetime
        Absolute expiry.
    is_revoked : bool
        Terminal revocation flag.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        Index("ix_refresh_tokens_user_id", "user_id"),
    )
