"""
Fixed-window rate limiting backed by Redis.

Each client gets one counter per window:

    ratelimit:{client}:{window_start}  -> INCR, EXPIRE window

Circuit breaker:
  On Redis failure the limiter fails open and admits the request. Losing
  rate limiting for a while is better than rejecting every visitor because
  the cache is down.
"""

import time
from dataclasses import dataclass
from typing import Optional

from resort_api.core.logging import get_logger
from resort_api.core.metrics import rate_limited_requests, redis_errors

logger = get_logger(__name__)


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int  # seconds until the window resets


class FixedWindowRateLimiter:
    def __init__(self, limit: int, window_seconds: int, prefix: str = "ratelimit"):
        self.limit = limit
        self.window_seconds = window_seconds
        self.prefix = prefix

    def _key(self, identifier: str, now: float) -> tuple[str, int]:
        window_start = int(now // self.window_seconds) * self.window_seconds
        retry_after = max(window_start + self.window_seconds - int(now), 1)
        return f"{self.prefix}:{identifier}:{window_start}", retry_after

    async def hit(self, client, identifier: str, now: Optional[float] = None) -> RateLimitDecision:
        """Count one request for ``identifier`` and decide whether to admit it."""
        now = time.time() if now is None else now
        key, retry_after = self._key(identifier, now)

        if client is None:
            return RateLimitDecision(True, self.limit, retry_after)

        try:
            count = await client.incr(key)
            if count == 1:
                await client.expire(key, self.window_seconds)
        except Exception as e:
            redis_errors.inc()
            logger.warning("rate_limiter_unavailable", error=str(e))
            return RateLimitDecision(True, self.limit, retry_after)

        if count > self.limit:
            rate_limited_requests.inc()
            logger.warning("rate_limit_exceeded", client=identifier, count=count, limit=self.limit)
            return RateLimitDecision(False, 0, retry_after)

        return RateLimitDecision(True, self.limit - count, retry_after)
