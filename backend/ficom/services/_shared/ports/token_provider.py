from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for signing and verifying access JWTs.

    ``decode`` MUST verify signature and expiry and raise
    :class:`~ficom.services._shared.errors.InvalidTokenError` on any failure.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...
