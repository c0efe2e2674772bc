"""
Redis connection and request throttling counters.
"""
from typing import Optional

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.core.config import settings

logger = structlog.get_logger(__name__)


class RedisClient:
    """Async Redis client wrapper used for rate-limit counters.

    Every operation is a no-op while the client is not connected, so the
    API keeps serving when Redis is disabled or unavailable.
    """

    def __init__(self):
        self.redis: Optional[aioredis.Redis] = None

    @property
    def connected(self) -> bool:
        return self.redis is not None

    async def connect(self):
        """Establish Redis connection."""
        self.redis = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=10,
        )

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def ping(self) -> bool:
        if not self.redis:
            return False
        return await self.redis.ping()

    async def incr(self, key: str, amount: int = 1) -> int:
        """Increment counter."""
        if not self.redis:
            return 0
        return await self.redis.incrby(key, amount)

    async def expire(self, key: str, seconds: int) -> bool:
        """Set expiration on key."""
        if not self.redis:
            return False
        return await self.redis.expire(key, seconds)

    async def delete(self, key: str) -> bool:
        """Delete key."""
        if not self.redis:
            return False
        await self.redis.delete(key)
        return True

    async def hit(self, key: str, window_seconds: int = 60) -> int:
        """
        Count one attempt against a fixed window.

        Args:
            key: Counter key
            window_seconds: Window length, applied when the counter is created

        Returns:
            Number of attempts in the current window (0 when not connected)
        """
        try:
            count = await self.incr(key)
            if count == 1:
                await self.expire(key, window_seconds)
        except RedisError as e:
            logger.warning("rate_limit_counter_unavailable", key=key, error=str(e))
            return 0
        return count


# Global Redis client instance
redis_client = RedisClient()


async def get_redis() -> RedisClient:
    """Dependency for getting Redis client."""
    return redis_client
