"""Period-over-period comparison for the dashboard stat cards."""

from __future__ import annotations

from collections.abc import Sequence

from pulseboard.core.models import SessionRecord
from pulseboard.core.utils import js_round, round1


def percent_change(current: float, prior: float) -> float:
    """Relative change in percent, one decimal.

    A zero baseline reports +100 for any growth and 0 otherwise.
    """
    if prior == 0:
        return 100 if current > 0 else 0
    return round1((current - prior) / prior * 100)


def point_change(current: float, prior: float) -> float:
    """Absolute difference in percentage points, one decimal."""
    return round1(current - prior)


def compare_windows(current: float, prior: float) -> dict:
    return {"current": current, "changePct": percent_change(current, prior)}


def bounce_rate(sessions: Sequence[SessionRecord]) -> float:
    """Unrounded share of sessions with exactly one page view, in percent."""
    if not sessions:
        return 0
    bounces = sum(1 for s in sessions if s.is_bounce)
    return bounces / len(sessions) * 100


def average_duration(sessions: Sequence[SessionRecord]) -> float:
    """Unrounded mean session duration in seconds."""
    if not sessions:
        return 0
    return sum(s.duration for s in sessions) / len(sessions)


def distinct_visitor_count(sessions: Sequence[SessionRecord]) -> int:
    return len({s.visitor_id for s in sessions})


def summarize_period(
    current_sessions: Sequence[SessionRecord],
    prior_sessions: Sequence[SessionRecord],
    current_page_views: int,
    prior_page_views: int,
) -> dict:
    """Stat-card values for the current period against the one before it.

    Visitors, page views and duration report relative change; bounce rate
    reports the difference in points (40% vs 30% is +10, not +33.3).
    Changes are computed from unrounded values.
    """
    visitors = distinct_visitor_count(current_sessions)
    prior_visitors = distinct_visitor_count(prior_sessions)

    rate = bounce_rate(current_sessions)
    prior_rate = bounce_rate(prior_sessions)

    duration = average_duration(current_sessions)
    prior_duration = average_duration(prior_sessions)

    return {
        "totalVisitors": visitors,
        "totalPageViews": current_page_views,
        "bounceRate": round1(rate),
        "avgDuration": js_round(duration),
        "visitorsChange": percent_change(visitors, prior_visitors),
        "pageViewsChange": percent_change(current_page_views, prior_page_views),
        "bounceRateChange": point_change(rate, prior_rate),
        "durationChange": percent_change(duration, prior_duration),
    }
