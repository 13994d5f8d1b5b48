"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask, HTTP or
SQLAlchemy. Expected business rejections (wrong password, revoked refresh
token, ...) are NOT exceptions; the auth service returns them as
:class:`~ficom.services.auth.dto.AuthResult` failures.

The translation to HTTP responses (RFC 7807) is handled by
``ficom/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` through ``BaseService``.
    """


class InvariantViolation(ServiceError):
    """Raised when persisted state contradicts what the service just wrote."""


class UserNotFoundAfterUpdate(InvariantViolation):
    """The user row vanished between the login update and the re-read."""

    code = "USER_NOT_FOUND_AFTER_UPDATE"

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found after update")
        self.user_id = user_id


class InvalidTokenError(ServiceError):
    """Raised by token providers when a token cannot be decoded or verified."""


class TokenRejected(ServiceError):
    """
    Raised by the token validator when a request must not be admitted.

    :param reason: Short machine-readable cause (``invalid``, ``revoked``,
        ``user_not_found``, ``stale``).
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Access token rejected: {reason}")
        self.reason = reason
