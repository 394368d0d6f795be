"""Categorical breakdowns: device/browser/country/source/path shares and top pages."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from typing import Any

from pulseboard.core.models import PageViewRecord, SessionRecord, VisitorRecord
from pulseboard.core.utils import js_round

TOP_PAGES_LIMIT = 10


class Dimension(str, Enum):
    """Categorical attribute a breakdown groups by.

    The value is the record attribute read; `fallback` labels records where
    that attribute is null or empty.
    """
    DEVICE = "device"
    BROWSER = "browser"
    COUNTRY = "country"
    SOURCE = "referrer"
    PATH = "path"

    @property
    def fallback(self) -> str:
        return "Direct" if self is Dimension.SOURCE else "Unknown"

    def key_of(self, record: Any) -> str:
        value = getattr(record, self.value, None)
        return str(value) if value else self.fallback


def percentage(count: int, total: int) -> float:
    """Share of total, one decimal place; 0 for an empty total."""
    if total <= 0:
        return 0
    return js_round(count / total * 1000) / 10


def aggregate_by_category(
    records: Sequence[Any],
    key: Dimension | Callable[[Any], str | None],
    *,
    fallback: str | None = None,
    limit: int | None = None,
) -> list[dict]:
    """Group records by a category and rank by count.

    Output rows are {"key", "count", "percentage"}, ordered by count
    descending; equal counts keep first-seen order. Percentages are of
    all records, including any cut off by `limit`.
    """
    if isinstance(key, Dimension):
        key_fn = key.key_of
    else:
        label = fallback or "Unknown"

        def key_fn(record):
            value = key(record)
            return str(value) if value else label

    counts: dict[str, int] = {}
    total = 0
    for record in records:
        k = key_fn(record)
        counts[k] = counts.get(k, 0) + 1
        total += 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]

    return [
        {"key": k, "count": c, "percentage": percentage(c, total)}
        for k, c in ranked
    ]


def relabel(rows: Iterable[dict], key_field: str, count_field: str = "count",
            *, with_percentage: bool = True) -> list[dict]:
    """Rename generic breakdown fields to the names a chart expects."""
    out = []
    for row in rows:
        item = {key_field: row["key"], count_field: row["count"]}
        if with_percentage:
            item["percentage"] = row["percentage"]
        out.append(item)
    return out


def unique_visitors(sessions: Iterable[SessionRecord]) -> list[VisitorRecord]:
    """Collapse sessions to their distinct visitors, first occurrence wins."""
    seen: dict[int, VisitorRecord] = {}
    for s in sessions:
        if s.visitor_id in seen or s.visitor is None:
            continue
        seen[s.visitor_id] = s.visitor
    return list(seen.values())


def visitor_breakdown(sessions: Sequence[SessionRecord], dimension: Dimension) -> list[dict]:
    """Breakdown over unique visitors, not raw sessions."""
    return aggregate_by_category(unique_visitors(sessions), dimension)


def traffic_sources(page_views: Sequence[PageViewRecord]) -> list[dict]:
    """Referrer shares over raw page views; a missing referrer counts as Direct."""
    return relabel(aggregate_by_category(page_views, Dimension.SOURCE), "source")


def top_pages(page_views: Iterable[PageViewRecord], limit: int = TOP_PAGES_LIMIT) -> list[dict]:
    """Most-viewed paths with view count and distinct visitors per path."""
    stats: dict[str, tuple[int, set]] = {}
    for pv in page_views:
        views, visitors = stats.get(pv.path, (0, set()))
        if pv.visitor_id is not None:
            visitors.add(pv.visitor_id)
        stats[pv.path] = (views + 1, visitors)

    ranked = sorted(stats.items(), key=lambda item: -item[1][0])[:limit]
    return [
        {"path": path, "views": views, "uniqueVisitors": len(visitors)}
        for path, (views, visitors) in ranked
    ]
