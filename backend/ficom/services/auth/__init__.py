from ficom.services.auth.dto import (
    AuthPayload,
    AuthResult,
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    UserOut,
)
from ficom.services.auth.messages import AuthMessage
from ficom.services.auth.service import AuthService
from ficom.services.auth.tokens import TokenIssuer
from ficom.services.auth.validator import TokenValidator

__all__ = [
    "AuthMessage",
    "AuthPayload",
    "AuthResult",
    "AuthService",
    "AuthTokenConfig",
    "LoginIn",
    "LogoutIn",
    "RefreshIn",
    "RegisterIn",
    "TokenIssuer",
    "TokenValidator",
    "UserOut",
]
