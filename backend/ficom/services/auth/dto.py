from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from ficom.services.auth.messages import AuthMessage

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: Email as typed by the user (only whitespace is trimmed).
    :type email: str
    :param password: Raw password.
    :type password: str
    :param name: Display name.
    :type name: str
    """

    email: str
    password: str
    name: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token (uuid4 string).
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout. Either token may be missing.

    :param access_token: Encoded access JWT to denylist.
    :type access_token: str | None
    :param refresh_token: Opaque refresh token to revoke.
    :type refresh_token: str | None
    """

    access_token: str | None = None
    refresh_token: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public view of a user (never carries the password hash)."""

    id: int
    email: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: Any) -> UserOut:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class IssuedRefreshToken:
    """
    Refresh token handed to a client together with its absolute expiry.

    :param token: Opaque uuid4 value.
    :type token: str
    :param expires_at: UTC expiry.
    :type expires_at: datetime
    """

    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AuthPayload:
    """
    Token pair plus the authenticated user.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    :param user: Public user view.
    :type user: UserOut
    """

    access_token: str
    refresh_token: str
    user: UserOut


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Uniform outcome of every auth operation.

    Business rejections are values, not exceptions: ``is_valid`` is ``False``,
    ``data`` is ``None`` and ``code`` tells which rule failed.

    :param is_valid: Whether the operation succeeded.
    :type is_valid: bool
    :param code: Stable result code.
    :type code: AuthMessage
    :param data: Token pair and user on success.
    :type data: AuthPayload | None
    """

    is_valid: bool
    code: AuthMessage
    data: AuthPayload | None = field(default=None)

    @property
    def message(self) -> str:
        return self.code.text

    @classmethod
    def ok(cls, code: AuthMessage, data: AuthPayload | None = None) -> AuthResult:
        return cls(is_valid=True, code=code, data=data)

    @classmethod
    def fail(cls, code: AuthMessage) -> AuthResult:
        return cls(is_valid=False, code=code, data=None)


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)

    @classmethod
    def from_config(cls, config: Any) -> AuthTokenConfig:
        """Build from a Flask config mapping, falling back to defaults."""
        defaults = cls()
        return cls(
            access_expires=config.get("JWT_ACCESS_TOKEN_EXPIRES") or defaults.access_expires,
            refresh_expires=config.get("JWT_REFRESH_TOKEN_EXPIRES") or defaults.refresh_expires,
        )


MIN_PASSWORD_LENGTH = 8
