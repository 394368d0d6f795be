"""Window resolution: turn optional date strings into a concrete UTC range."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

DEFAULT_WINDOW_DAYS = 30

_END_OF_DAY = time(23, 59, 59, 999000)


class InvalidRange(ValueError):
    """A window bound could not be parsed as a calendar date."""


@dataclass(frozen=True)
class Window:
    """Date range used to filter records before aggregation.

    `end` is inclusive unless `end_inclusive` is False (prior-period windows
    stop just before the current period starts). An inverted window
    (end < start) is legal and contains nothing.
    """
    start: datetime
    end: datetime
    end_inclusive: bool = True

    def contains(self, ts: datetime) -> bool:
        ts = as_utc(ts)
        if ts < self.start:
            return False
        return ts <= self.end if self.end_inclusive else ts < self.end

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def days(self) -> int:
        """Inclusive count of calendar days covered, 0 when inverted."""
        if self.end < self.start:
            return 0
        return (self.end.date() - self.start.date()).days + 1

    def previous(self) -> Window:
        """The adjacent window of equal length ending where this one starts."""
        return Window(self.start - self.span, self.start, end_inclusive=False)

    def to_dict(self) -> dict:
        return {"from": self.start.isoformat(), "to": self.end.isoformat()}


def as_utc(ts: datetime) -> datetime:
    """Naive timestamps are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_day(raw: str) -> date:
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return as_utc(datetime.fromisoformat(text)).date()
    except ValueError:
        raise InvalidRange(f"Invalid date: {raw!r}") from None


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, _END_OF_DAY, tzinfo=timezone.utc)


def resolve_window(
    from_input: str | None = None,
    to_input: str | None = None,
    *,
    now: datetime | None = None,
    default_days: int = DEFAULT_WINDOW_DAYS,
) -> Window:
    """Resolve optional `from`/`to` date strings into a Window.

    If either bound is missing, the trailing `default_days` ending today is
    used. `to` always extends to the last millisecond of its day so a
    date-only bound includes the whole final day. Raises InvalidRange on
    unparseable input. No ordering check: inverted ranges pass through.
    """
    if not from_input or not to_input:
        now = as_utc(now or datetime.now(timezone.utc))
        start_day = (now - timedelta(days=default_days)).date()
        return Window(start_of_day(start_day), end_of_day(now.date()))

    start_day = parse_day(from_input)
    end_day = parse_day(to_input)
    return Window(start_of_day(start_day), end_of_day(end_day))


def trailing_window(days: int = DEFAULT_WINDOW_DAYS, *, now: datetime | None = None) -> Window:
    """[now - days, now]: the dashboard's current comparison period."""
    now = as_utc(now or datetime.now(timezone.utc))
    return Window(now - timedelta(days=days), now)
