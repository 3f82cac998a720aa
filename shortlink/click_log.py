"""Append-only log of click events."""

import logging
from datetime import datetime
from typing import List, Optional

from .database.base import URLShortenerDBBase
from .database.models import ClickEvent, ensure_utc


class ClickLog:
    """Click events keyed by mapping, scanned by time interval.

    Events are never updated or removed. :meth:`record` is the only entry
    point used when resolving a link: it appends the event and bumps the
    mapping's counter in one backend call so the two cannot drift apart.
    """

    def __init__(self, db: URLShortenerDBBase, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    async def record(self, short_code: str, clicked_at: datetime) -> Optional[ClickEvent]:
        """Count one click against ``short_code``.

        Returns:
            The stored event, or None if the mapping does not exist
        """
        event = await self.db.record_click(short_code, ensure_utc(clicked_at))
        if event is not None:
            self.logger.debug(f"Recorded click #{event.event_id} for {short_code}")
        return event

    async def scan(self, short_code: str, start: datetime, end: datetime) -> List[ClickEvent]:
        """Events of one mapping with ``start <= clicked_at < end``, ascending."""
        return await self.db.scan_clicks(short_code, ensure_utc(start), ensure_utc(end))

    async def scan_owner(self, owner_id: str, start: datetime, end: datetime) -> List[ClickEvent]:
        """Events of every mapping owned by ``owner_id`` in ``[start, end)``, ascending."""
        return await self.db.scan_owner_clicks(owner_id, ensure_utc(start), ensure_utc(end))
