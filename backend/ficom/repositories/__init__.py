"""Repository package exposing persistence-layer access for the auth models."""

from __future__ import annotations

from ficom.repositories.base import BaseRepository
from ficom.repositories.refresh_token import RefreshTokenRepository
from ficom.repositories.revoked_token import RevokedTokenRepository
from ficom.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "RevokedTokenRepository",
    "UserRepository",
]
