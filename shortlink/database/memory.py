"""In-process storage backend for development and tests."""

import asyncio
import itertools
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from typing import Any, DefaultDict, Dict, List, Optional

from .base import URLShortenerDBBase
from .models import ClickEvent, UrlMapping, ensure_utc


class InMemoryURLShortenerDB(URLShortenerDBBase):
    """Dictionary-backed store.

    There is no native atomic increment, so every mutation of a mapping row
    goes through a per-code ``asyncio.Lock``. Inserts share one lock so the
    check-and-set of a short code cannot interleave.
    """

    name = "memory"

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)

        self._mappings: Dict[str, UrlMapping] = {}
        self._clicks: DefaultDict[str, List[ClickEvent]] = defaultdict(list)
        self._event_ids = itertools.count(1)
        self._insert_lock = asyncio.Lock()
        self._row_locks: Dict[str, asyncio.Lock] = {}

    def _row_lock(self, short_code: str) -> asyncio.Lock:
        # Only taken for stored codes; mappings are never removed
        return self._row_locks.setdefault(short_code, asyncio.Lock())

    async def insert_mapping_if_absent(self, mapping: UrlMapping) -> bool:
        async with self._insert_lock:
            if mapping.short_code in self._mappings:
                self.logger.debug(f"Short code already taken: {mapping.short_code}")
                return False
            await self._write_mapping(replace(mapping, created_at=ensure_utc(mapping.created_at)))
        return True

    async def _write_mapping(self, mapping: UrlMapping) -> None:
        self._mappings[mapping.short_code] = mapping

    async def get_mapping(self, short_code: str) -> Optional[UrlMapping]:
        mapping = self._mappings.get(short_code)
        # Hand out copies so callers cannot mutate the stored row
        return replace(mapping) if mapping else None

    async def increment_click_count(self, short_code: str) -> Optional[int]:
        mapping = self._mappings.get(short_code)
        if mapping is None:
            return None
        async with self._row_lock(short_code):
            return await self._bump_counter(mapping)

    async def _bump_counter(self, mapping: UrlMapping) -> int:
        """Read-modify-write of the counter; callers hold the row lock."""
        mapping.click_count += 1
        return mapping.click_count

    async def append_click(self, short_code: str, clicked_at: datetime) -> ClickEvent:
        event = ClickEvent(
            event_id=next(self._event_ids),
            short_code=short_code,
            clicked_at=ensure_utc(clicked_at),
        )
        self._clicks[short_code].append(event)
        return event

    async def record_click(self, short_code: str, clicked_at: datetime) -> Optional[ClickEvent]:
        mapping = self._mappings.get(short_code)
        if mapping is None:
            return None
        async with self._row_lock(short_code):
            await self._bump_counter(mapping)
            return await self.append_click(short_code, clicked_at)

    async def list_mappings_by_owner(self, owner_id: str) -> List[UrlMapping]:
        owned = [replace(m) for m in self._mappings.values() if m.owner_id == owner_id]
        owned.sort(key=lambda m: m.created_at, reverse=True)
        return owned

    def _in_range(self, events: List[ClickEvent], start: datetime, end: datetime) -> List[ClickEvent]:
        start, end = ensure_utc(start), ensure_utc(end)
        return [e for e in events if start <= e.clicked_at < end]

    async def scan_clicks(self, short_code: str, start: datetime, end: datetime) -> List[ClickEvent]:
        events = self._in_range(self._clicks.get(short_code, []), start, end)
        return sorted(events, key=lambda e: (e.clicked_at, e.event_id))

    async def scan_owner_clicks(self, owner_id: str, start: datetime, end: datetime) -> List[ClickEvent]:
        events: List[ClickEvent] = []
        for code, mapping in self._mappings.items():
            if mapping.owner_id == owner_id:
                events.extend(self._in_range(self._clicks.get(code, []), start, end))
        return sorted(events, key=lambda e: (e.clicked_at, e.event_id))

    async def count_clicks(self, short_code: str) -> int:
        return len(self._clicks.get(short_code, []))

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_urls": len(self._mappings),
            "total_clicks": sum(m.click_count for m in self._mappings.values()),
            "database": self.name,
        }

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug("In-memory store closed")
