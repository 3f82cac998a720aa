"""Tests for redirect resolution and click recording."""

import asyncio
from datetime import datetime, timezone

import pytest

from conftest import DictCache
from shortlink.allocator import Allocator
from shortlink.click_log import ClickLog
from shortlink.database.memory import InMemoryURLShortenerDB
from shortlink.errors import NotFound, StorageUnavailable
from shortlink.mapping_store import MappingStore
from shortlink.resolver import Resolver


class FailingClickDB(InMemoryURLShortenerDB):
    """Backend whose click writes always fail."""

    async def record_click(self, short_code, clicked_at):
        raise StorageUnavailable("record click failed: connection reset")


def make_resolver(db, clock, cache=None) -> Resolver:
    return Resolver(MappingStore(db), ClickLog(db), cache=cache, clock=clock)


@pytest.mark.asyncio
class TestResolver:

    async def test_round_trip(self, service, test_db, clock, sample_urls):
        mapping = await service.create_short_link(sample_urls[0], "alice")

        original = await make_resolver(test_db, clock).resolve(mapping.short_code)

        assert original == sample_urls[0]

    async def test_click_recorded_with_clock_time(self, service, test_db, clock):
        mapping = await service.create_short_link("https://example.com/a", "alice")
        clock.set(2024, 12, 16, 8, 0)

        await make_resolver(test_db, clock).resolve(mapping.short_code)

        events = await test_db.scan_clicks(
            mapping.short_code,
            datetime(2024, 1, 1, tzinfo=timezone.utc),
            datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        assert [e.clicked_at for e in events] == [datetime(2024, 12, 16, 8, 0, tzinfo=timezone.utc)]
        assert (await test_db.get_mapping(mapping.short_code)).click_count == 1

    async def test_unknown_code_records_nothing(self, service, test_db, clock):
        mapping = await service.create_short_link("https://example.com/a", "alice")
        resolver = make_resolver(test_db, clock)

        with pytest.raises(NotFound):
            await resolver.resolve("ZZZZZZZZ")

        assert await test_db.count_clicks("ZZZZZZZZ") == 0
        assert (await test_db.get_statistics())["total_clicks"] == 0
        assert (await test_db.get_mapping(mapping.short_code)).click_count == 0

    async def test_malformed_code_is_not_found(self, test_db, clock):
        with pytest.raises(NotFound):
            await make_resolver(test_db, clock).resolve("../etc")

    async def test_concurrent_resolutions_all_counted(self, interleaving_db, clock):
        mapping = await Allocator(MappingStore(interleaving_db), clock=clock).allocate(
            "https://example.com/hot", "alice"
        )
        resolver = make_resolver(interleaving_db, clock)
        k = 250

        results = await asyncio.gather(*(resolver.resolve(mapping.short_code) for _ in range(k)))

        assert results == ["https://example.com/hot"] * k
        assert (await interleaving_db.get_mapping(mapping.short_code)).click_count == k
        assert await interleaving_db.count_clicks(mapping.short_code) == k

    async def test_storage_failure_propagates(self, logger, clock):
        db = FailingClickDB(logger=logger)
        store = MappingStore(db)
        mapping = await Allocator(store, clock=clock).allocate("https://example.com/a", "alice")

        with pytest.raises(StorageUnavailable):
            await make_resolver(db, clock).resolve(mapping.short_code)

        assert await db.count_clicks(mapping.short_code) == 0

    async def test_cache_hit_still_counts_click(self, service, test_db, clock):
        mapping = await service.create_short_link("https://example.com/a", "alice")
        cache = DictCache()
        resolver = make_resolver(test_db, clock, cache=cache)

        await resolver.resolve(mapping.short_code)  # miss, fills cache
        assert await cache.get_url(mapping.short_code) == "https://example.com/a"
        await resolver.resolve(mapping.short_code)  # hit

        assert (await test_db.get_mapping(mapping.short_code)).click_count == 2
        assert await test_db.count_clicks(mapping.short_code) == 2

    async def test_stale_cache_entry_is_not_found(self, test_db, clock):
        """A cached code the store does not know must not count or redirect."""
        cache = DictCache()
        await cache.set_url("GHOST123", "https://example.com/ghost")

        with pytest.raises(NotFound):
            await make_resolver(test_db, clock, cache=cache).resolve("GHOST123")
        assert await test_db.count_clicks("GHOST123") == 0
