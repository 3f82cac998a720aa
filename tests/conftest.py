"""Pytest configuration and fixtures."""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import pytest

from shortlink.database.cache import RedisCache
from shortlink.database.memory import InMemoryURLShortenerDB
from shortlink.database.models import ClickEvent, UrlMapping
from shortlink.service import ShortLinkService
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import setup_logging


class FixedClock:
    """Settable stand-in for the UTC clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, *args) -> None:
        self.now = datetime(*args, tzinfo=timezone.utc)


class SequenceGenerator(ShortCodeGenerator):
    """Hands out predetermined codes, repeating the last one."""

    def __init__(self, codes: Iterable[str]):
        super().__init__(default_length=8)
        self.codes: List[str] = list(codes)
        self.calls = 0

    def generate(self, length: Optional[int] = None) -> str:
        code = self.codes[min(self.calls, len(self.codes) - 1)]
        self.calls += 1
        return code


class InterleavingMemoryDB(InMemoryURLShortenerDB):
    """In-memory backend that yields to the event loop inside every write.

    A missing lock around a check-then-write or read-modify-write shows up
    as duplicate codes or lost counter updates under ``asyncio.gather``.
    """

    async def _write_mapping(self, mapping: UrlMapping) -> None:
        await asyncio.sleep(0)
        await super()._write_mapping(mapping)

    async def _bump_counter(self, mapping: UrlMapping) -> int:
        current = mapping.click_count
        await asyncio.sleep(0)
        mapping.click_count = current + 1
        return mapping.click_count

    async def append_click(self, short_code: str, clicked_at: datetime) -> ClickEvent:
        await asyncio.sleep(0)
        return await super().append_click(short_code, clicked_at)


class DictCache(RedisCache):
    """RedisCache with a dict in place of the Redis client."""

    def __init__(self):
        super().__init__(redis_url="redis://cache.invalid:6379/0")
        self.data: Dict[str, str] = {}

    async def get_url(self, short_code: str) -> Optional[str]:
        return self.data.get(self.get_cache_key(short_code))

    async def set_url(self, short_code: str, original_url: str) -> bool:
        self.data[self.get_cache_key(short_code)] = original_url
        return True

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.data.clear()


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def test_db(logger) -> InMemoryURLShortenerDB:
    """Create test database instance."""
    return InMemoryURLShortenerDB(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=8)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 12, 15, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def service(test_db, short_code_generator, logger, clock) -> ShortLinkService:
    """Create service instance."""
    return ShortLinkService(
        db=test_db,
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/a",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def interleaving_db(logger) -> InterleavingMemoryDB:
    """Backend that switches tasks mid-write, for concurrency tests."""
    return InterleavingMemoryDB(logger=logger)
