"""Analytics explorer: page views over time and audience breakdowns for any window."""

from __future__ import annotations

import logging
from datetime import datetime

from pulseboard.core.breakdown import Dimension, aggregate_by_category, relabel, unique_visitors
from pulseboard.core.timeseries import bucket_by_day
from pulseboard.core.window import DEFAULT_WINDOW_DAYS, resolve_window
from pulseboard.storage.repository import AnalyticsRepository

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Read-only explorer over visitors, sessions and page views."""

    def __init__(self, repo: AnalyticsRepository, *, default_days: int = DEFAULT_WINDOW_DAYS):
        self.repo = repo
        self.default_days = default_days

    def explore(
        self, from_input: str | None = None, to_input: str | None = None,
        now: datetime | None = None,
    ) -> dict:
        """Everything the analytics page shows for one window.

        Device, browser and country shares count each visitor once, however
        many sessions they had in the window. Raises InvalidRange for an
        unparseable date.
        """
        window = resolve_window(from_input, to_input, now=now, default_days=self.default_days)

        page_views = self.repo.page_views(window)
        sessions = self.repo.sessions(window)
        visitors = unique_visitors(sessions)

        logger.debug(
            "Explorer %s..%s: %d page views, %d sessions, %d visitors",
            window.start.date(), window.end.date(),
            len(page_views), len(sessions), len(visitors),
        )

        return {
            "range": window.to_dict(),
            "pageViewsOverTime": bucket_by_day((pv.created_at for pv in page_views), window),
            "devices": relabel(aggregate_by_category(visitors, Dimension.DEVICE), "name"),
            "browsers": relabel(aggregate_by_category(visitors, Dimension.BROWSER), "name"),
            "countries": relabel(
                aggregate_by_category(visitors, Dimension.COUNTRY), "country", "visitors",
            ),
            "summary": {
                "totalPageViews": len(page_views),
                "totalSessions": len(sessions),
                "uniqueVisitors": len(visitors),
            },
        }
