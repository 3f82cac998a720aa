"""Business logic service for short links."""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from .allocator import Allocator, utc_now
from .analytics import Analytics
from .click_log import ClickLog
from .config import Config
from .database.base import URLShortenerDBBase
from .database.cache import RedisCache
from .database.memory import InMemoryURLShortenerDB
from .database.models import DailyCount, UrlMapping
from .database.postgres import URLShortenerPostgresDB
from .errors import NotFound, Unauthorized
from .mapping_store import MappingStore
from .resolver import Resolver
from .shortcode import ShortCodeGenerator

T = TypeVar("T")


def create_backend(config: Config, logger: Optional[logging.Logger] = None) -> URLShortenerDBBase:
    """Build the storage backend named by ``config.storage_backend``."""
    if config.storage_backend == "memory":
        return InMemoryURLShortenerDB(logger=logger)
    return URLShortenerPostgresDB(
        db_config=config.database_url,
        pool_max_size=config.database_pool_max_size,
        create_tables=config.database_create_tables,
        logger=logger,
    )


async def _bounded(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    if timeout is None:
        return await awaitable
    return await asyncio.wait_for(awaitable, timeout)


class ShortLinkService:
    """Public surface of the short link core.

    Wires the allocator, resolver and analytics over one storage backend.
    Redirect and analytics calls take an optional ``timeout`` in seconds;
    on expiry ``asyncio.TimeoutError`` is raised.
    """

    def __init__(
        self,
        db: URLShortenerDBBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize short link service.

        Args:
            db: Storage backend
            cache: Optional lookup cache
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Allocation attempts before giving up
            clock: Source of UTC timestamps for creation and clicks
        """
        self.db = db
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

        self.mappings = MappingStore(db, logger=self.logger)
        self.clicks = ClickLog(db, logger=self.logger)
        self.allocator = Allocator(
            self.mappings,
            generator=short_code_generator or ShortCodeGenerator(),
            cache=cache,
            max_attempts=max_collision_retries,
            clock=clock,
            logger=self.logger,
        )
        self.resolver = Resolver(self.mappings, self.clicks, cache=cache, clock=clock, logger=self.logger)
        self.analytics = Analytics(self.mappings, self.clicks, logger=self.logger)

    async def create_short_link(self, original_url: str, owner_id: str) -> UrlMapping:
        """Create a new short link with ``click_count == 0``."""
        return await self.allocator.allocate(original_url, owner_id)

    async def redirect(self, short_code: str, timeout: Optional[float] = None) -> str:
        """Resolve ``short_code`` to its original URL, recording one click."""
        return await _bounded(self.resolver.resolve(short_code), timeout)

    async def list_owner_links(self, owner_id: str) -> List[UrlMapping]:
        """All mappings owned by ``owner_id``, newest first."""
        return await self.mappings.list_by_owner(owner_id)

    async def get_link_info(self, short_code: str, owner_id: str) -> UrlMapping:
        """Current state of one mapping, for its owner only."""
        mapping = await self.mappings.get(short_code)
        if mapping is None:
            raise NotFound(short_code)
        if mapping.owner_id != owner_id:
            raise Unauthorized(f"Not allowed to view '{short_code}'")
        return mapping

    async def get_per_url_analytics(
        self,
        short_code: str,
        owner_id: str,
        start_date: date,
        end_date: date,
        zero_fill: bool = False,
        timeout: Optional[float] = None,
    ) -> List[DailyCount]:
        """Daily click counts for one mapping, ascending by date."""
        return await _bounded(
            self.analytics.per_url_daily_counts(short_code, owner_id, start_date, end_date, zero_fill),
            timeout,
        )

    async def get_owner_totals(
        self,
        owner_id: str,
        start_date: date,
        end_date: date,
        requester: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[date, int]:
        """Daily click totals across all of ``owner_id``'s mappings."""
        return await _bounded(
            self.analytics.total_clicks_by_date(owner_id, start_date, end_date, requester),
            timeout,
        )

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        db_stats = await self.mappings.statistics()
        return {
            **db_stats,
            "cache_enabled": self.cache is not None and self.cache.enabled,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with database, cache and overall status
        """
        db_healthy = await self.db.health_check()
        cache_healthy = await self.cache.ping() if self.cache else True
        return {
            "database": db_healthy,
            "cache": cache_healthy,
            "overall": db_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
        if self.cache:
            await self.cache.close()
