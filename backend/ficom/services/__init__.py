"""Service layer public API.

Callers import from :mod:`ficom.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``ficom.services._shared.base``)
    * :class:`BaseService`

- Credentials (from ``ficom.services.credentials``)
    * :class:`CredentialHasher`

- Auth (from ``ficom.services.auth``)
    * :class:`AuthService`, :class:`TokenIssuer`, :class:`TokenValidator`
    * Result: :class:`AuthResult`, :class:`AuthMessage`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`, :class:`AuthPayload`, :class:`UserOut`,
      :class:`AuthTokenConfig`
"""

from __future__ import annotations

from ficom.services._shared.base import BaseService
from ficom.services.auth import (
    AuthMessage,
    AuthPayload,
    AuthResult,
    AuthService,
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenIssuer,
    TokenValidator,
    UserOut,
)
from ficom.services.credentials import CredentialHasher

__all__ = [
    "AuthMessage",
    "AuthPayload",
    "AuthResult",
    "AuthService",
    "AuthTokenConfig",
    "BaseService",
    "CredentialHasher",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "RegisterIn",
    "TokenIssuer",
    "TokenValidator",
    "UserOut",
]
