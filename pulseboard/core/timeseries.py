"""Daily time-series bucketing with explicit zero-fill."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from datetime import date, datetime, timedelta, timezone

from pulseboard.core.window import Window


def date_key(ts: datetime) -> str:
    """UTC calendar day of a timestamp as YYYY-MM-DD."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d")


def iter_days(window: Window) -> Iterable[date]:
    """Every calendar day from window.start to window.end, ascending."""
    day = window.start.date()
    last = window.end.date()
    while day <= last:
        yield day
        day += timedelta(days=1)


def bucket_by_day(
    timestamps: Iterable[datetime],
    window: Window,
    *,
    value_key: str = "count",
) -> list[dict]:
    """Count timestamps per UTC day across the window.

    Returns one {"date", <value_key>} point per day in the window, zero
    where nothing happened. Timestamps outside the window are ignored.
    An inverted window yields [].
    """
    if window.end < window.start:
        return []

    counts: dict[str, int] = {}
    for ts in timestamps:
        if not window.contains(ts):
            continue
        key = date_key(ts)
        counts[key] = counts.get(key, 0) + 1

    return [
        {"date": day.isoformat(), value_key: counts.get(day.isoformat(), 0)}
        for day in iter_days(window)
    ]


def bucket_distinct_by_day(
    pairs: Iterable[tuple[datetime, Hashable]],
    window: Window,
    *,
    value_key: str = "count",
) -> list[dict]:
    """Like bucket_by_day, but counts distinct identifiers per day.

    `pairs` are (timestamp, identifier) tuples, e.g. (session start,
    visitor id) for unique visitors per day.
    """
    if window.end < window.start:
        return []

    seen: dict[str, set] = {}
    for ts, ident in pairs:
        if not window.contains(ts):
            continue
        seen.setdefault(date_key(ts), set()).add(ident)

    return [
        {"date": day.isoformat(), value_key: len(seen.get(day.isoformat(), ()))}
        for day in iter_days(window)
    ]
