"""Date-bucketed click analytics."""

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from .click_log import ClickLog
from .common.validators import is_valid_date_range
from .database.models import ClickEvent, DailyCount
from .errors import InvalidRange, NotFound, Unauthorized
from .mapping_store import MappingStore


def day_bounds(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
    """UTC interval ``[start_date 00:00, end_date + 1 day 00:00)`` covering both dates."""
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return start, end


def bucket_by_day(events: Iterable[ClickEvent]) -> Dict[date, int]:
    """Count events per UTC calendar date, keys ascending."""
    counts = Counter(event.day for event in events)
    return {day: counts[day] for day in sorted(counts)}


class Analytics:
    """Read-only aggregation of click events for a mapping's owner."""

    def __init__(
        self,
        mappings: MappingStore,
        clicks: ClickLog,
        logger: Optional[logging.Logger] = None,
    ):
        self.mappings = mappings
        self.clicks = clicks
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _check_range(start_date: date, end_date: date) -> None:
        is_valid, error = is_valid_date_range(start_date, end_date)
        if not is_valid:
            raise InvalidRange(error)

    async def per_url_daily_counts(
        self,
        short_code: str,
        requester: str,
        start_date: date,
        end_date: date,
        zero_fill: bool = False,
    ) -> List[DailyCount]:
        """Clicks per day for one mapping over the inclusive date range.

        Days without clicks are omitted unless ``zero_fill`` is set.

        Raises:
            InvalidRange: ``start_date`` after ``end_date``
            NotFound: unknown short code
            Unauthorized: ``requester`` does not own the mapping
        """
        self._check_range(start_date, end_date)

        mapping = await self.mappings.get(short_code)
        if mapping is None:
            raise NotFound(short_code)
        if mapping.owner_id != requester:
            self.logger.warning(f"Denied analytics for {short_code} to {requester!r}")
            raise Unauthorized(f"Not allowed to view analytics for '{short_code}'")

        start, end = day_bounds(start_date, end_date)
        buckets = bucket_by_day(await self.clicks.scan(short_code, start, end))

        if zero_fill:
            days = (end_date - start_date).days + 1
            return [
                DailyCount(day, buckets.get(day, 0))
                for day in (start_date + timedelta(days=i) for i in range(days))
            ]
        return [DailyCount(day, count) for day, count in buckets.items()]

    async def total_clicks_by_date(
        self,
        owner_id: str,
        start_date: date,
        end_date: date,
        requester: Optional[str] = None,
    ) -> Dict[date, int]:
        """Clicks per day summed over every mapping owned by ``owner_id``.

        ``requester`` defaults to ``owner_id``; any other identity is refused.

        Raises:
            InvalidRange: ``start_date`` after ``end_date``
            Unauthorized: ``requester`` is not ``owner_id``
        """
        self._check_range(start_date, end_date)

        requester = owner_id if requester is None else requester
        if not owner_id or requester != owner_id:
            self.logger.warning(f"Denied owner totals for {owner_id!r} to {requester!r}")
            raise Unauthorized("Not allowed to view another owner's analytics")

        start, end = day_bounds(start_date, end_date)
        return bucket_by_day(await self.clicks.scan_owner(owner_id, start, end))
