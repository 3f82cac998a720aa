"""Allocation of new short codes."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .common.validators import is_valid_url
from .database.cache import RedisCache
from .database.models import UrlMapping
from .errors import AllocationExhausted, InvalidUrl, Unauthorized
from .mapping_store import MappingStore
from .shortcode import ShortCodeGenerator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Allocator:
    """Create mappings under fresh, globally unique short codes.

    Each attempt draws a random code and tries a conditional insert. A
    collision leaves nothing behind and the next attempt draws again; after
    ``max_attempts`` collisions the allocation fails with
    :class:`AllocationExhausted`.
    """

    def __init__(
        self,
        mappings: MappingStore,
        generator: Optional[ShortCodeGenerator] = None,
        cache: Optional[RedisCache] = None,
        max_attempts: int = 5,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.mappings = mappings
        self.generator = generator or ShortCodeGenerator()
        self.cache = cache
        self.max_attempts = max_attempts
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def allocate(self, original_url: str, owner_id: str) -> UrlMapping:
        """Allocate a short code for ``original_url`` owned by ``owner_id``.

        Raises:
            InvalidUrl: URL is not an absolute http/https URI
            Unauthorized: no owner identity supplied
            AllocationExhausted: every attempted code collided
            StorageUnavailable: backend failure
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidUrl(f"Invalid URL: {error}")
        if not owner_id or not owner_id.strip():
            raise Unauthorized("An owner identity is required to create short links")

        for attempt in range(1, self.max_attempts + 1):
            mapping = UrlMapping(
                short_code=self.generator.generate(),
                original_url=original_url,
                owner_id=owner_id,
                created_at=self.clock(),
                click_count=0,
            )
            if await self.mappings.insert_if_absent(mapping):
                if attempt > 1:
                    self.logger.debug(f"Allocated {mapping.short_code} after {attempt} attempts")
                if self.cache:
                    await self.cache.set_url(mapping.short_code, original_url)
                self.logger.info(f"Created short URL: {mapping.short_code} -> {original_url} (owner={owner_id})")
                return mapping

            self.logger.warning(f"Short code collision on attempt {attempt}: {mapping.short_code}")

        self.logger.error(
            f"Allocation exhausted after {self.max_attempts} attempts for owner={owner_id}"
        )
        raise AllocationExhausted(self.max_attempts)
