"""Data models for the shortlink store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class ShortLink:
    """A short code mapped to its original URL."""

    code: str
    original_url: str
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "original_url": self.original_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortLink":
        """Create from dictionary (or a database row mapping)."""
        return cls(
            code=data["code"],
            original_url=data["original_url"],
            created_at=_parse_timestamp(data["created_at"]),
        )


@dataclass(frozen=True)
class ClickEvent:
    """One served redirect. Written once, never updated."""

    code: str
    timestamp: datetime
    source_label: str
    location_label: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
            "source_label": self.source_label,
            "location_label": self.location_label,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClickEvent":
        """Create from dictionary (or a database row mapping)."""
        return cls(
            code=data["code"],
            timestamp=_parse_timestamp(data["timestamp"]),
            source_label=data["source_label"],
            location_label=data["location_label"],
        )
