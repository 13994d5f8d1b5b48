"""Shared API helpers for service wiring, authentication and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request, session

from ficom.core.extensions import get_redis
from ficom.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
from ficom.infra.redis.redis_denylist_store import RedisTokenDenylistStore
from ficom.services import (
    AuthService,
    AuthTokenConfig,
    CredentialHasher,
    TokenIssuer,
    TokenValidator,
)
from ficom.services._shared.errors import TokenRejected
from ficom.services._shared.ports import TokenDenylistStore

F = TypeVar("F", bound=Callable[..., Any])

SESSION_ACCESS_KEY = "accessToken"
SESSION_REFRESH_KEY = "refreshToken"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Service wiring -------------------------------


def denylist_store() -> TokenDenylistStore | None:
    """Redis denylist when configured; ``None`` selects the SQL table."""

    client = get_redis()
    return RedisTokenDenylistStore(client) if client is not None else None


def build_auth_service() -> AuthService:
    """Assemble :class:`AuthService` from the current app configuration."""

    config = current_app.config
    issuer = TokenIssuer(provider=JWTTokenProvider(), cfg=AuthTokenConfig.from_config(config))
    return AuthService(
        hasher=CredentialHasher(rounds=int(config.get("BCRYPT_ROUNDS", 10))),
        issuer=issuer,
        denylist=denylist_store(),
    )


def build_token_validator() -> TokenValidator:
    return TokenValidator(
        provider=JWTTokenProvider(),
        denylist=denylist_store(),
    )


# ------------------------------ Token transport ------------------------------


def bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""

    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


def request_access_token() -> str | None:
    """Bearer header first, then the session cookie."""

    return bearer_token() or session.get(SESSION_ACCESS_KEY)


def remember_tokens(access_token: str, refresh_token: str) -> None:
    """Store the pair in the signed, httpOnly session cookie."""

    session.permanent = True
    session[SESSION_ACCESS_KEY] = access_token
    session[SESSION_REFRESH_KEY] = refresh_token


def forget_tokens() -> None:
    session.pop(SESSION_ACCESS_KEY, None)
    session.pop(SESSION_REFRESH_KEY, None)


def require_auth(func: F) -> F:
    """Admit the request only with a valid access token.

    The admitted user is stored on ``flask.g.current_user``; rejections
    become 401 problem responses.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        validator = build_token_validator()
        try:
            g.current_user = validator.validate(request_access_token())
        except TokenRejected as exc:
            raise validator.translate_exceptions(exc) from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
