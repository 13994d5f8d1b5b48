"""Stable result codes and their client-facing messages."""

from __future__ import annotations

from enum import Enum


class AuthMessage(str, Enum):
    """Codes carried by every :class:`~ficom.services.auth.dto.AuthResult`."""

    SIGNUP_SUCCESS = "SIGNUP_SUCCESS"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    TOKEN_REFRESH_SUCCESS = "TOKEN_REFRESH_SUCCESS"
    LOGOUT_SUCCESS = "LOGOUT_SUCCESS"

    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    PASSWORD_TOO_SHORT = "PASSWORD_TOO_SHORT"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    REFRESH_TOKEN_REVOKED = "REFRESH_TOKEN_REVOKED"
    REFRESH_TOKEN_EXPIRED = "REFRESH_TOKEN_EXPIRED"
    USER_NOT_FOUND_AFTER_UPDATE = "USER_NOT_FOUND_AFTER_UPDATE"

    @property
    def text(self) -> str:
        return AUTH_MESSAGES[self]


AUTH_MESSAGES: dict[AuthMessage, str] = {
    AuthMessage.SIGNUP_SUCCESS: "Registration completed",
    AuthMessage.LOGIN_SUCCESS: "Logged in successfully",
    AuthMessage.TOKEN_REFRESH_SUCCESS: "Tokens refreshed successfully",
    AuthMessage.LOGOUT_SUCCESS: "Logged out successfully",
    AuthMessage.EMAIL_ALREADY_EXISTS: "This email address is already registered",
    AuthMessage.PASSWORD_TOO_SHORT: "Password must be at least 8 characters long",
    AuthMessage.INVALID_CREDENTIALS: "Email address or password is incorrect",
    AuthMessage.INVALID_REFRESH_TOKEN: "Invalid refresh token",
    AuthMessage.REFRESH_TOKEN_REVOKED: "Refresh token has been revoked",
    AuthMessage.REFRESH_TOKEN_EXPIRED: "Refresh token has expired",
    AuthMessage.USER_NOT_FOUND_AFTER_UPDATE: "Failed to load the user after update",
}
