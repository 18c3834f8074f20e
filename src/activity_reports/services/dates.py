"""Calendar date helpers for report queries."""

from __future__ import annotations

from datetime import date, timedelta

from ..config import settings
from ..errors import InvalidRange, RangeTooLarge


def parse_report_date(value: date | str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` value into a calendar date."""

    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidRange(f"Invalid date '{value}'; expected YYYY-MM-DD.") from exc


def expand_date_range(start: date, end: date, *, max_days: int | None = None) -> list[date]:
    """Return every calendar date from ``start`` to ``end`` inclusive.

    Works on calendar dates only, so month/year rollover and DST changes
    cannot produce gaps or duplicates.
    """

    limit = max_days if max_days is not None else settings.max_range_days
    if start > end:
        raise InvalidRange(f"Start date {start.isoformat()} is after end date {end.isoformat()}.")

    day_count = (end - start).days + 1
    if day_count > limit:
        raise RangeTooLarge(day_count, limit)

    return [start + timedelta(days=offset) for offset in range(day_count)]
