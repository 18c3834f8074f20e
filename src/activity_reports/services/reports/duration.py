"""Working duration derived from a day's activity log."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Sequence

from ...config import settings
from ...errors import InsufficientData
from ...models.domain import Activity, Elapsed

_TIME_FORMATS = ("%H:%M:%S.%f", "%H:%M:%S", "%H:%M")
_DAY = timedelta(days=1)

INSUFFICIENT_DATA = "Insufficient data"
NO_ACTIVITY = "0 seconds"


def _parse_time_of_day(value: str) -> datetime:
    # strptime fills in 1900-01-01, which serves as the common reference date
    text = (value or "").strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise InsufficientData(f"Unrecognised activity time '{value}'")


def find_start_stop(
    activities: Sequence[Activity], start_label: str | None = None
) -> tuple[Activity, Activity]:
    """Return the first start event and the first non-start event after it."""
    label = start_label if start_label is not None else settings.start_status_label
    start_index = next((i for i, activity in enumerate(activities) if activity.status == label), None)
    if start_index is None:
        raise InsufficientData("No start event in activity log")
    stop = next((activity for activity in activities[start_index + 1 :] if activity.status != label), None)
    if stop is None:
        raise InsufficientData("No stop event after the start event")
    return activities[start_index], stop


def working_duration(activities: Sequence[Activity], *, start_label: str | None = None) -> Elapsed:
    """Elapsed time between the first start/stop pair of a day's log.

    Only the first pair is measured. A stop earlier than its start is read as
    crossing midnight.
    """
    start, stop = find_start_stop(activities, start_label)
    delta = _parse_time_of_day(stop.time) - _parse_time_of_day(start.time)
    if delta < timedelta(0):
        delta += _DAY

    total = delta.total_seconds()
    minutes = int(total // 60)
    seconds = int(math.floor(total - minutes * 60 + 0.5))
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return Elapsed(minutes=minutes, seconds=seconds)


def format_duration(activities: Sequence[Activity] | None, *, start_label: str | None = None) -> str:
    if activities is None:
        return NO_ACTIVITY
    try:
        return str(working_duration(activities, start_label=start_label))
    except InsufficientData:
        return INSUFFICIENT_DATA
