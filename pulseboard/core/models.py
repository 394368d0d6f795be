"""Record types consumed by the aggregation core.

These are deliberately independent of SQL row shapes; the storage
repository adapts query results into them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


DEVICE_TYPES = ("desktop", "mobile", "tablet")
ROLES = ("ADMIN", "VIEWER")


@dataclass(frozen=True)
class VisitorRecord:
    id: int
    country: str
    browser: str
    device: str
    os: str = ""


@dataclass(frozen=True)
class SessionRecord:
    """One browsing session. A session with exactly one page view is a bounce."""
    id: int
    visitor_id: int
    started_at: datetime
    duration: int = 0  # seconds
    page_view_count: int = 0
    ended_at: datetime | None = None
    visitor: VisitorRecord | None = None

    @property
    def is_bounce(self) -> bool:
        return self.page_view_count == 1


@dataclass(frozen=True)
class PageViewRecord:
    id: int
    session_id: int
    path: str
    created_at: datetime
    referrer: str | None = None
    visitor_id: int | None = None  # owning session's visitor, when joined


@dataclass(frozen=True)
class EventRecord:
    """Pre-counted analytics event (one row per event name per day)."""
    id: int
    name: str
    category: str
    count: int
    date: datetime
