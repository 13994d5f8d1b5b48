"""Issue the access/refresh token pair handed to clients."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from ficom.services._shared.clock import utcnow
from ficom.services._shared.ports import RefreshTokenStore, TokenProvider
from ficom.services.auth.dto import AuthTokenConfig, IssuedRefreshToken


class TokenIssuer:
    """
    Mint signed access tokens and opaque refresh tokens.

    Access tokens carry ``sub`` (user id as string), ``email``, ``iat``,
    ``exp`` and ``jti``. Refresh tokens are random uuid4 strings whose only
    meaning is the server-side record created alongside them.

    :param provider: JWT signing adapter.
    :param cfg: Lifetimes for both token kinds.
    """

    def __init__(self, *, provider: TokenProvider, cfg: AuthTokenConfig) -> None:
        self.provider = provider
        self.cfg = cfg

    def issue_access_token(self, user_id: int, email: str) -> str:
        return self.provider.create_access_token(
            identity=user_id,
            additional_claims={"email": email},
            expires_delta=self.cfg.access_expires,
        )

    def issue_refresh_token(
        self,
        store: RefreshTokenStore,
        user_id: int,
        *,
        now: datetime | None = None,
    ) -> IssuedRefreshToken:
        """
        Generate a refresh token and persist its record through ``store``.

        :param store: Refresh-token store bound to the caller's Unit of Work.
        :param user_id: Owner of the new token.
        :param now: Issue instant; defaults to the current UTC time.
        :returns: The plaintext token and its expiry.
        """
        token = str(uuid4())
        expires_at = (now or utcnow()) + self.cfg.refresh_expires
        store.create(user_id=user_id, token=token, expires_at=expires_at)
        return IssuedRefreshToken(token=token, expires_at=expires_at)


def subject_user_id(claims: dict) -> int | None:
    """Return the user id carried in ``sub``, or ``None`` when it is not one."""
    sub = claims.get("sub")
    if isinstance(sub, int):
        return sub
    if isinstance(sub, str) and sub.isdigit():
        return int(sub)
    return None
