from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token as _create_access
from flask_jwt_extended import decode_token as _decode
from flask_jwt_extended.exceptions import JWTExtendedException

from ficom.services._shared.errors import InvalidTokenError
from ficom.services._shared.ports import TokenProvider


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Signing key, algorithm and default lifetime come from ``JWT_SECRET_KEY``,
    ``JWT_ALGORITHM`` and ``JWT_ACCESS_TOKEN_EXPIRES``. ``iat`` is whole seconds
    and ``jti`` is generated per token.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        # ``sub`` must be a string for PyJWT >= 2.10
        return cast(
            str,
            _create_access(
                identity=str(identity),
                additional_claims=additional_claims or {},
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        :raises InvalidTokenError: On any signature, format or expiry failure.
        """
        try:
            return cast(dict[str, Any], _decode(token))
        except (pyjwt.PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError(type(exc).__name__) from exc
