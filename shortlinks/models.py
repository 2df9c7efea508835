"""Data models for the link registry."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class ClickEvent:
    """A single successful resolution of a link."""

    timestamp: datetime
    source: str = "direct"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@dataclass
class Link:
    """Represents a shortened link held by the registry.

    Everything except the click log is fixed at creation.
    """

    id: str
    original_url: str
    shortcode: str
    created_at: datetime
    expiry_at: datetime
    click_log: List[ClickEvent] = field(default_factory=list)

    @property
    def clicks(self) -> int:
        return len(self.click_log)

    def is_expired(self, now: datetime) -> bool:
        """A link stops resolving once the current time passes its expiry."""
        return now > self.expiry_at

    def is_active(self, now: datetime) -> bool:
        return not self.is_expired(now)

    def record_click(self, click: ClickEvent) -> None:
        self.click_log.append(click)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "original_url": self.original_url,
            "shortcode": self.shortcode,
            "created_at": self.created_at.isoformat(),
            "expiry_at": self.expiry_at.isoformat(),
            "clicks": self.clicks,
            "click_log": [click.to_dict() for click in self.click_log],
        }
