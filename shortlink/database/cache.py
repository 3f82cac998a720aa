"""Redis read-through cache for short code lookups."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisCache:
    """Best-effort cache of short code -> original URL.

    Mappings are immutable, so a cached URL can never go stale. The cache is
    never the source of truth: errors are logged and reported as misses, and
    click accounting always goes to the store.
    """

    KEY_PREFIX = "shortlink:url:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis; disables the cache if the server is unreachable."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis, caching disabled: {e}")
            self.enabled = False

    def get_cache_key(self, short_code: str) -> str:
        return f"{self.KEY_PREFIX}{short_code}"

    async def get_url(self, short_code: str) -> Optional[str]:
        """Cached original URL for ``short_code``, or None on miss or error."""
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(self.get_cache_key(short_code))
        except (RedisError, OSError) as e:
            self.logger.warning(f"Cache get error for {short_code}: {e}")
            return None

    async def set_url(self, short_code: str, original_url: str) -> bool:
        """Cache a mapping. Returns True if stored."""
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(self.get_cache_key(short_code), self.ttl_seconds, original_url)
            return True
        except (RedisError, OSError) as e:
            self.logger.warning(f"Cache set error for {short_code}: {e}")
            return False

    async def ping(self) -> bool:
        """True if Redis answers; also True when caching is disabled."""
        if not self.enabled or not self.client:
            return True
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
