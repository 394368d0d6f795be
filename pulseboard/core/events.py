"""Event-log explorer: paginated listing and category/monthly/top-event metrics."""

from __future__ import annotations

import logging
import math

from pulseboard.core.utils import ValidationError, js_round
from pulseboard.core.window import end_of_day, parse_day, start_of_day
from pulseboard.storage.repository import EventRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
TOP_EVENTS_LIMIT = 10


def _event_dict(ev) -> dict:
    return {
        "id": ev.id,
        "name": ev.name,
        "category": ev.category,
        "count": ev.count,
        "date": ev.date.isoformat(),
    }


class EventService:
    def __init__(self, repo: EventRepository, *, top_events_limit: int = TOP_EVENTS_LIMIT):
        self.repo = repo
        self.top_events_limit = top_events_limit

    def list_events(
        self, category: str | None = None,
        start_date: str | None = None, end_date: str | None = None,
        page: int = 1, limit: int = 20,
    ) -> dict:
        """Newest-first page of events, optionally filtered by category and date bounds.

        Either bound may be given alone; the end bound covers its whole day.
        """
        if page < 1:
            raise ValidationError("page must be >= 1")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

        start = start_of_day(parse_day(start_date)) if start_date else None
        end = end_of_day(parse_day(end_date)) if end_date else None

        events, total = self.repo.page(
            category=category, start=start, end=end,
            limit=limit, offset=(page - 1) * limit,
        )
        logger.debug("Event log page %d: %d of %d events", page, len(events), total)
        return {
            "events": [_event_dict(ev) for ev in events],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    def metrics(self, category: str | None = None) -> dict:
        """Per-category totals, monthly totals and the highest-count event names.

        `category` narrows every figure except `topEvents`, which always ranks
        the whole event log.
        """
        events = self.repo.all(category=category)

        category_metrics: dict[str, dict] = {}
        monthly: dict[str, int] = {}
        for ev in events:
            m = category_metrics.setdefault(ev.category, {"totalCount": 0, "eventCount": 0, "avgCount": 0})
            m["totalCount"] += ev.count
            m["eventCount"] += 1

            month = ev.date.strftime("%Y-%m")
            monthly[month] = monthly.get(month, 0) + ev.count

        by_name: dict[str, int] = {}
        for ev in (events if category is None else self.repo.all()):
            by_name[ev.name] = by_name.get(ev.name, 0) + ev.count

        for m in category_metrics.values():
            m["avgCount"] = js_round(m["totalCount"] / m["eventCount"])

        top = sorted(by_name.items(), key=lambda item: -item[1])[:self.top_events_limit]

        return {
            "categoryMetrics": category_metrics,
            "monthlyData": [{"month": k, "total": monthly[k]} for k in sorted(monthly)],
            "topEvents": [{"name": name, "totalCount": total} for name, total in top],
            "totalEvents": len(events),
            "totalCount": sum(ev.count for ev in events),
        }
