"""Durable table of short code -> mapping."""

import logging
from typing import Any, Dict, List, Optional

from .database.base import URLShortenerDBBase
from .database.models import UrlMapping


class MappingStore:
    """Mapping table on top of a storage backend.

    Writes go through the backend's conditional insert and atomic increment;
    this class never reads a row to write it back.
    """

    def __init__(self, db: URLShortenerDBBase, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(__name__)

    async def insert_if_absent(self, mapping: UrlMapping) -> bool:
        """Store ``mapping`` unless its code is taken. False signals a collision."""
        if mapping.click_count != 0:
            raise ValueError("new mappings must start with click_count=0")
        return await self.db.insert_mapping_if_absent(mapping)

    async def get(self, short_code: str) -> Optional[UrlMapping]:
        return await self.db.get_mapping(short_code)

    async def list_by_owner(self, owner_id: str) -> List[UrlMapping]:
        """Mappings owned by ``owner_id``, newest first."""
        return await self.db.list_mappings_by_owner(owner_id)

    async def statistics(self) -> Dict[str, Any]:
        return await self.db.get_statistics()
