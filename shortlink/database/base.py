"""Abstract base class for short link storage backends."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime

from .models import UrlMapping, ClickEvent


class URLShortenerDBBase(ABC):
    """Abstract base class for short link storage operations.

    Implementations must provide atomic primitives: a conditional insert keyed
    by short code and an increment that never loses concurrent updates.
    Failures of the underlying store are raised as
    :class:`shortlink.errors.StorageUnavailable`.
    """

    #: Name reported in statistics
    name = "base"

    def __init__(self, db_config: str):
        """Initialize storage backend.

        Args:
            db_config: Backend connection string
        """
        self.db_config = db_config

    async def initialize(self) -> None:
        """Prepare the backend (create tables, open pools). No-op by default."""

    @abstractmethod
    async def insert_mapping_if_absent(self, mapping: UrlMapping) -> bool:
        """Insert a mapping unless its short code is already taken.

        Args:
            mapping: The mapping to store

        Returns:
            True if inserted, False if the short code already exists
        """

    @abstractmethod
    async def get_mapping(self, short_code: str) -> Optional[UrlMapping]:
        """Get the mapping for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The mapping if found, None otherwise
        """

    @abstractmethod
    async def increment_click_count(self, short_code: str) -> Optional[int]:
        """Atomically add one to the click counter of a mapping.

        Args:
            short_code: The short code to update

        Returns:
            The new counter value, or None if the short code is unknown
        """

    @abstractmethod
    async def append_click(self, short_code: str, clicked_at: datetime) -> ClickEvent:
        """Append an immutable click event.

        Args:
            short_code: The mapping the click belongs to
            clicked_at: UTC time of the click

        Returns:
            The stored event with its assigned id
        """

    async def record_click(self, short_code: str, clicked_at: datetime) -> Optional[ClickEvent]:
        """Increment the counter and append the click event for one resolution.

        The default increments first so the counter never trails the click
        log. Backends with transactions should override this and commit both
        writes together.

        Returns:
            The stored event, or None if the short code is unknown
        """
        if await self.increment_click_count(short_code) is None:
            return None
        return await self.append_click(short_code, clicked_at)

    @abstractmethod
    async def list_mappings_by_owner(self, owner_id: str) -> List[UrlMapping]:
        """List the mappings owned by ``owner_id``, newest first."""

    @abstractmethod
    async def scan_clicks(
        self,
        short_code: str,
        start: datetime,
        end: datetime,
    ) -> List[ClickEvent]:
        """Range scan of click events for one mapping.

        Args:
            short_code: Mapping to scan
            start: Inclusive lower bound (UTC)
            end: Exclusive upper bound (UTC)

        Returns:
            Events ordered ascending by timestamp
        """

    @abstractmethod
    async def scan_owner_clicks(
        self,
        owner_id: str,
        start: datetime,
        end: datetime,
    ) -> List[ClickEvent]:
        """Range scan of click events across every mapping owned by ``owner_id``.

        Bounds as for :meth:`scan_clicks`; ordered ascending by timestamp.
        """

    @abstractmethod
    async def count_clicks(self, short_code: str) -> int:
        """Number of click events stored for a mapping."""

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get backend statistics.

        Returns:
            Dictionary with total_urls, total_clicks and database name
        """

    @abstractmethod
    async def close(self) -> None:
        """Close backend connections."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is healthy.

        Returns:
            True if healthy, False otherwise
        """
