"""
ficom.services._shared.ports
============================

*Ports* (hexagonal interfaces) between the auth services and the
infrastructure that signs tokens and stores session state.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, the abstraction for JWT signing and
    verification.

- :mod:`denylist_store`:
    Defines :class:`~.TokenDenylistStore` for access tokens revoked by logout.

- :mod:`session_store`:
    Defines :class:`~.RefreshTokenStore`, the persistence contract the token
    issuer writes through.

Concrete adapters live under ``ficom.infra`` and ``ficom.repositories``.
"""

from __future__ import annotations

from .denylist_store import TokenDenylistStore
from .session_store import RefreshTokenStore
from .token_provider import TokenProvider

__all__ = [
    "TokenProvider",
    "TokenDenylistStore",
    "RefreshTokenStore",
]
