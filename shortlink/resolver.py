"""Resolution of short codes to original URLs."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .allocator import utc_now
from .click_log import ClickLog
from .database.cache import RedisCache
from .errors import NotFound
from .mapping_store import MappingStore
from .shortcode import ShortCodeGenerator


class Resolver:
    """Resolve a short code and count the click.

    The hot path is one lookup (cache first, when configured) and one
    compound store write. Store failures propagate; a click is never reported
    as served unless it was recorded.
    """

    def __init__(
        self,
        mappings: MappingStore,
        clicks: ClickLog,
        cache: Optional[RedisCache] = None,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        self.mappings = mappings
        self.clicks = clicks
        self.cache = cache
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def _lookup(self, short_code: str) -> Optional[str]:
        if self.cache:
            cached = await self.cache.get_url(short_code)
            if cached:
                self.logger.debug(f"Cache hit for {short_code}")
                return cached

        mapping = await self.mappings.get(short_code)
        if mapping is None:
            return None
        if self.cache:
            await self.cache.set_url(short_code, mapping.original_url)
        return mapping.original_url

    async def resolve(self, short_code: str) -> str:
        """Return the original URL for ``short_code`` and record the click.

        Raises:
            NotFound: unknown code; nothing is recorded
            StorageUnavailable: backend failure
        """
        if not ShortCodeGenerator.is_valid_format(short_code):
            self.logger.info(f"Rejected malformed short code: {short_code!r}")
            raise NotFound(short_code)

        original_url = await self._lookup(short_code)
        if original_url is None:
            self.logger.info(f"Short code not found: {short_code}")
            raise NotFound(short_code)

        event = await self.clicks.record(short_code, self.clock())
        if event is None:
            # Only reachable through a cache entry for a mapping the store lacks
            self.logger.warning(f"Short code {short_code} vanished before its click was recorded")
            raise NotFound(short_code)

        self.logger.debug(f"Resolved {short_code} -> {original_url}")
        return original_url
