from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (the store keeps naive UTC values).

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date."""
    value = (value or "").strip()
    if len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_day_start(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), datetime.min.time())


def week_start(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing ``moment``."""
    day = utc_day_start(moment)
    return day - timedelta(days=day.weekday())


def overlap_hours(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> float:
    """Hours of [start, end) that fall inside [window_start, window_end)."""
    lo = max(start, window_start)
    hi = min(end, window_end)
    if hi <= lo:
        return 0.0
    return (hi - lo).total_seconds() / 3600


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a 1-based calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def parse_date_range(start: Optional[str], end: Optional[str]) -> tuple[Optional[date], Optional[date]]:
    """Lenient range parsing for query strings: bad values are ignored, inverted ranges swapped."""

    def _parse(value: Optional[str]) -> Optional[date]:
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            return None

    start_d = _parse(start)
    end_d = _parse(end)
    if start_d and end_d and start_d > end_d:
        start_d, end_d = end_d, start_d
    return start_d, end_d


def clamp_pagination(page, limit, max_limit: int = 100, default_limit: int = 10) -> tuple[int, int, int]:
    """Return (page, limit, offset) with page >= 1 and 1 <= limit <= max_limit."""

    def _to_int(value, fallback: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return fallback

    p = max(1, _to_int(page, 1))
    lim = max(1, min(max_limit, _to_int(limit, default_limit)))
    return p, lim, (p - 1) * lim


def month_label(year: int, month: int) -> str:
    """e.g. ``March 2026``."""
    return f"{calendar.month_name[month]} {year}"
