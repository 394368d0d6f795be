"""Dashboard: stat cards, visitors chart, traffic sources and top pages."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from pulseboard.core import breakdown, comparison, timeseries
from pulseboard.core.window import (
    DEFAULT_WINDOW_DAYS, Window, as_utc, end_of_day, start_of_day, trailing_window,
)
from pulseboard.storage.repository import AnalyticsRepository

logger = logging.getLogger(__name__)


class DashboardService:
    """Overview numbers for the trailing period (30 days by default)."""

    def __init__(
        self, repo: AnalyticsRepository, *,
        window_days: int = DEFAULT_WINDOW_DAYS,
        top_pages_limit: int = breakdown.TOP_PAGES_LIMIT,
    ):
        self.repo = repo
        self.window_days = window_days
        self.top_pages_limit = top_pages_limit

    def stats(self, now: datetime | None = None) -> dict:
        """Current period vs the equal-length period immediately before it."""
        current = trailing_window(self.window_days, now=now)
        prior = current.previous()

        result = comparison.summarize_period(
            self.repo.sessions(current),
            self.repo.sessions(prior),
            self.repo.page_view_count(current),
            self.repo.page_view_count(prior),
        )
        logger.debug(
            "Dashboard stats: %d visitors, %d page views",
            result["totalVisitors"], result["totalPageViews"],
        )
        return result

    def visitors_over_time(self, now: datetime | None = None) -> list[dict]:
        """Unique visitors per day for the last `window_days` calendar days, today included."""
        today = as_utc(now or datetime.now(timezone.utc)).date()
        window = Window(
            start_of_day(today - timedelta(days=self.window_days - 1)),
            end_of_day(today),
        )
        sessions = self.repo.sessions(window)
        return timeseries.bucket_distinct_by_day(
            ((s.started_at, s.visitor_id) for s in sessions),
            window,
            value_key="value",
        )

    def traffic_sources(self, now: datetime | None = None) -> list[dict]:
        window = trailing_window(self.window_days, now=now)
        return breakdown.traffic_sources(self.repo.page_views(window))

    def top_pages(self, now: datetime | None = None) -> list[dict]:
        window = trailing_window(self.window_days, now=now)
        return breakdown.top_pages(self.repo.page_views(window), limit=self.top_pages_limit)
