"""User repository backing registration, login and token validation."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select, update

from ficom.models.user import User
from ficom.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes passwords or issues tokens; the auth service does.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email.

        Only surrounding whitespace is ignored; the comparison is
        case-sensitive.

        :param email: Email address to search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.strip())
        return bool(self.session.execute(stmt).first())

    def update_tokens_valid_from(self, user_id: int, valid_from: datetime) -> int:
        """Move the stale-token cut-off of one user.

        Issued as a single ``UPDATE`` so concurrent logins never interleave a
        read-modify-write. Identity-map copies are refreshed on next access.

        :param user_id: Identifier of the user.
        :type user_id: int
        :param valid_from: New cut-off (whole seconds, UTC).
        :type valid_from: datetime
        :returns: Number of rows touched (``0`` when the user is gone).
        :rtype: int
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(tokens_valid_from=valid_from)
            .execution_options(synchronize_session="fetch")
        )
        return int(result.rowcount or 0)
