from ficom.models.refresh_token import RefreshToken
from ficom.models.revoked_token import RevokedToken
from ficom.models.user import User

__all__ = [
    "RefreshToken",
    "RevokedToken",
    "User",
]
