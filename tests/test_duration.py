import pytest

from activity_reports.errors import InsufficientData
from activity_reports.models.domain import Activity, Elapsed
from activity_reports.services.reports.duration import find_start_stop, format_duration, working_duration

START = "starting working"


def test_working_duration_uses_first_non_start_after_start():
    activities = [
        Activity(time="09:00:00", status=START),
        Activity(time="09:05:00", status="moving"),
        Activity(time="09:20:00", status="ending"),
    ]

    elapsed = working_duration(activities, start_label=START)

    assert elapsed == Elapsed(minutes=5, seconds=0)
    assert str(elapsed) == "5 minutes 0 seconds"


def test_working_duration_skips_repeated_start_events():
    activities = [
        Activity(time="08:00:00", status="moving"),
        Activity(time="08:10:00", status=START),
        Activity(time="08:12:00", status=START),
        Activity(time="08:40:30", status="ending"),
        Activity(time="09:00:00", status=START),
        Activity(time="10:00:00", status="ending"),
    ]

    start, stop = find_start_stop(activities, START)

    assert start.time == "08:10:00"
    assert stop.time == "08:40:30"
    assert working_duration(activities, start_label=START) == Elapsed(minutes=30, seconds=30)


def test_working_duration_without_start_is_insufficient():
    activities = [Activity(time="09:00:00", status="moving"), Activity(time="09:10:00", status="ending")]

    with pytest.raises(InsufficientData):
        working_duration(activities, start_label=START)


def test_working_duration_without_stop_is_insufficient():
    activities = [Activity(time="09:00:00", status=START), Activity(time="09:10:00", status=START)]

    with pytest.raises(InsufficientData):
        working_duration(activities, start_label=START)


def test_working_duration_rejects_unparseable_time():
    activities = [Activity(time="nine", status=START), Activity(time="09:10:00", status="moving")]

    with pytest.raises(InsufficientData):
        working_duration(activities, start_label=START)


def test_working_duration_wraps_past_midnight():
    activities = [Activity(time="23:50:00", status=START), Activity(time="00:10:15", status="moving")]

    assert working_duration(activities, start_label=START) == Elapsed(minutes=20, seconds=15)


def test_working_duration_rounds_fractional_seconds():
    activities = [Activity(time="09:00:00", status=START), Activity(time="09:01:10.6", status="moving")]
    assert working_duration(activities, start_label=START) == Elapsed(minutes=1, seconds=11)

    carry = [Activity(time="09:00:00", status=START), Activity(time="09:01:59.7", status="moving")]
    assert working_duration(carry, start_label=START) == Elapsed(minutes=2, seconds=0)


def test_format_duration_display_strings():
    assert format_duration(None, start_label=START) == "0 seconds"
    assert format_duration([], start_label=START) == "Insufficient data"
    assert format_duration([Activity(time="09:00:00", status="moving")], start_label=START) == "Insufficient data"
    assert (
        format_duration(
            [Activity(time="09:00:00", status=START), Activity(time="10:30:05", status="moving")],
            start_label=START,
        )
        == "90 minutes 5 seconds"
    )
