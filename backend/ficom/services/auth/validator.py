"""Request-time admission of access tokens."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import NoReturn

from ficom.models.user import User
from ficom.services._shared.base import BaseService
from ficom.services._shared.clock import as_utc
from ficom.services._shared.errors import InvalidTokenError, TokenRejected
from ficom.services._shared.ports import TokenDenylistStore, TokenProvider
from ficom.services.auth.tokens import subject_user_id

log = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


class TokenValidator(BaseService):
    """
    Decide whether an access token may act for its user.

    Steps, first failure wins:

    1. Signature, format and expiry (``invalid``).
    2. ``jti`` on the logout denylist (``revoked``).
    3. User referenced by ``sub`` exists (``user_not_found``).
    4. ``iat`` not earlier than the user's ``tokens_valid_from`` (``stale``).

    Nothing is cached: every call reads the user row.
    """

    def __init__(
        self,
        *,
        provider: TokenProvider,
        denylist: TokenDenylistStore | None = None,
    ) -> None:
        self.provider = provider
        self.denylist = denylist

    def validate(self, token: str | None) -> User:
        """
        Return the user the token speaks for.

        :param token: Encoded access JWT (without the ``Bearer`` prefix).
        :returns: The admitted user.
        :raises TokenRejected: With the failing step as ``reason``.
        """
        if not token:
            raise TokenRejected("missing")

        try:
            claims = self.provider.decode(token)
        except InvalidTokenError as exc:
            log.info("auth.token_rejected", extra={"reason": "invalid"})
            raise TokenRejected("invalid") from exc

        user_id = subject_user_id(claims)
        iat = claims.get("iat")
        if claims.get("type") != ACCESS_TOKEN_TYPE or user_id is None or iat is None:
            log.info("auth.token_rejected", extra={"reason": "invalid"})
            raise TokenRejected("invalid")

        issued_at = datetime.fromtimestamp(int(iat), UTC)
        jti = claims.get("jti")

        with self.ro_uow() as uow:
            denylist = self.denylist or uow.revoked_tokens
            if jti and denylist.is_revoked(str(jti)):
                self._reject("revoked", user_id)

            user = uow.users.get(user_id)
            if user is None:
                self._reject("user_not_found", user_id)

            if issued_at < as_utc(user.tokens_valid_from):
                self._reject("stale", user_id)

        return user

    @staticmethod
    def _reject(reason: str, user_id: int) -> NoReturn:
        log.info("auth.token_rejected", extra={"reason": reason, "user_id": user_id})
        raise TokenRejected(reason)
