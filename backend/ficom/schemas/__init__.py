"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthEnvelopeSchema,
    AuthPayloadSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    UserSchema,
)

__all__ = [
    "AuthEnvelopeSchema",
    "AuthPayloadSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "UserSchema",
]
