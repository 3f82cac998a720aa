"""Storage layer for short links."""

from .base import URLShortenerDBBase
from .memory import InMemoryURLShortenerDB
from .postgres import URLShortenerPostgresDB
from .cache import RedisCache
from .models import UrlMapping, ClickEvent, DailyCount

__all__ = [
    "URLShortenerDBBase",
    "InMemoryURLShortenerDB",
    "URLShortenerPostgresDB",
    "RedisCache",
    "UrlMapping",
    "ClickEvent",
    "DailyCount",
]
