from datetime import datetime
from typing import cast

import redis

from ficom.services._shared.clock import as_utc, utcnow


class RedisTokenDenylistStore:
    """
    Denylist for **access tokens** by jti, with entries expiring alongside
    the token they block.
    """

    def __init__(self, r: redis.Redis):
        self.r = r

    @staticmethod
    def _k(jti: str) -> str:
        return f"deny:at:{jti}"

    def is_revoked(self, jti: str) -> bool:
        return cast(int, self.r.exists(self._k(jti))) == 1

    def revoke_jti(self, jti: str, expires_at: datetime, *, user_id: int | None = None) -> None:
        ttl = max(1, int((as_utc(expires_at) - utcnow()).total_seconds()))
        # marker value records the owner for audits; idempotent
        self.r.set(self._k(jti), str(user_id) if user_id is not None else "1", ex=ttl)
