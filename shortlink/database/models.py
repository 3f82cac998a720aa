"""Data models for short links and click events."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as a tz-aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value))


@dataclass
class UrlMapping:
    """Represents a short code mapping in the store."""

    short_code: str
    original_url: str
    owner_id: str
    created_at: datetime
    click_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "short_code": self.short_code,
            "original_url": self.original_url,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat(),
            "click_count": self.click_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UrlMapping":
        """Create from dictionary or database row."""
        return cls(
            short_code=data["short_code"],
            original_url=data["original_url"],
            owner_id=data["owner_id"],
            created_at=_parse_datetime(data["created_at"]),
            click_count=int(data.get("click_count") or 0),
        )


@dataclass(frozen=True)
class ClickEvent:
    """One recorded resolution of a short code. Immutable once stored."""

    event_id: int
    short_code: str
    clicked_at: datetime

    @property
    def day(self) -> date:
        """Calendar date (UTC) the click falls on."""
        return ensure_utc(self.clicked_at).date()

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "short_code": self.short_code,
            "clicked_at": self.clicked_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClickEvent":
        return cls(
            event_id=int(data["id"] if "id" in data else data["event_id"]),
            short_code=data["short_code"],
            clicked_at=_parse_datetime(data["clicked_at"]),
        )


@dataclass(frozen=True)
class DailyCount:
    """Aggregated clicks for one calendar date. Derived, never persisted."""

    date: date
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "count": self.count}
