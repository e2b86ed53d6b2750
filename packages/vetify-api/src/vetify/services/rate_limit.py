"""Per-key sliding-window rate limiter backed by Redis.

Each API key owns one sorted set. Every admitted request adds a member scored
by its timestamp in milliseconds; members older than the window are trimmed
before counting. Trim, count, add and expiry run inside a single Lua script,
so concurrent requests for the same key, from any number of processes, can
never both take the last slot. Denied requests are not recorded and do not
push the reset time back.
"""

import asyncio
import logging
import math
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from redis.asyncio import Redis
from redis.exceptions import RedisError

from vetify.errors import RateLimitStoreUnavailable

logger = logging.getLogger(__name__)

_SLIDING_WINDOW_LUA = r"""
-- KEYS: 1 per-key window zset
-- ARGV: 1 now_ms, 2 window_ms, 3 limit, 4 member
local key = KEYS[1]
local now_ms = tonumber(ARGV[1])
local window_ms = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, '-inf', now_ms - window_ms)
local count = redis.call('ZCARD', key)

local allowed = 0
if count < limit then
  redis.call('ZADD', key, now_ms, ARGV[4])
  redis.call('PEXPIRE', key, window_ms)
  count = count + 1
  allowed = 1
end

local oldest_ms = now_ms
local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
if oldest[2] then
  oldest_ms = tonumber(oldest[2])
end

return {allowed, count, oldest_ms}
"""


@dataclass
class RateLimitResult:
    """Outcome of one check-and-consume call."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # Unix timestamp, seconds
    retry_after: int | None = None


class SlidingWindowRateLimiter:
    """Redis sliding-window limiter keyed by API key id."""

    def __init__(
        self,
        redis: Redis,
        *,
        window_seconds: int = 3600,
        key_prefix: str = "vetify:api:v1:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix
        self._clock = clock
        self._script = redis.register_script(_SLIDING_WINDOW_LUA)

    def _key(self, key_id: str) -> str:
        return f"{self.key_prefix}{key_id}"

    async def check_and_consume(self, key_id: str, limit_per_hour: int) -> RateLimitResult:
        """Count this request against the key's window if there is room.

        Raises:
            RateLimitStoreUnavailable: Redis errored or timed out. The caller
                decides whether that fails open or closed.
        """
        now_ms = int(self._clock() * 1000)
        window_ms = self.window_seconds * 1000
        member = f"{now_ms}:{uuid.uuid4().hex}"

        # Shielded so a caller disconnect cannot abort a consumption already sent.
        call = self._script(
            keys=[self._key(key_id)],
            args=[now_ms, window_ms, limit_per_hour, member],
        )
        try:
            allowed, count, oldest_ms = await asyncio.shield(call)
        except (RedisError, OSError, TimeoutError) as exc:
            logger.error("Rate limit store unavailable for key %s: %s", key_id, exc)
            raise RateLimitStoreUnavailable() from exc

        reset_at = math.ceil((int(oldest_ms) + window_ms) / 1000)
        if int(allowed) == 1:
            return RateLimitResult(
                allowed=True,
                limit=limit_per_hour,
                remaining=max(0, limit_per_hour - int(count)),
                reset_at=reset_at,
            )

        now_s = now_ms // 1000
        return RateLimitResult(
            allowed=False,
            limit=limit_per_hour,
            remaining=0,
            reset_at=reset_at,
            retry_after=max(1, reset_at - now_s),
        )
