from datetime import date

import pytest

from activity_reports.errors import InvalidRange, RangeTooLarge
from activity_reports.services.dates import expand_date_range, parse_report_date


def test_expand_date_range_crosses_month_boundary():
    dates = expand_date_range(date(2024, 1, 30), date(2024, 2, 2))

    assert dates == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]


def test_expand_date_range_crosses_year_and_leap_day():
    dates = expand_date_range(date(2023, 12, 31), date(2024, 1, 1))
    assert dates == [date(2023, 12, 31), date(2024, 1, 1)]

    leap = expand_date_range(date(2024, 2, 28), date(2024, 3, 1))
    assert leap == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_expand_date_range_single_day():
    assert expand_date_range(date(2024, 3, 31), date(2024, 3, 31)) == [date(2024, 3, 31)]


def test_expand_date_range_allows_exactly_45_days():
    start = date(2024, 1, 1)
    dates = expand_date_range(start, date(2024, 2, 14))

    assert len(dates) == 45
    assert len(set(dates)) == 45
    assert all(later > earlier for earlier, later in zip(dates, dates[1:]))


def test_expand_date_range_rejects_46_days():
    with pytest.raises(RangeTooLarge) as excinfo:
        expand_date_range(date(2024, 1, 1), date(2024, 2, 15))

    assert excinfo.value.day_count == 46
    assert excinfo.value.max_days == 45


def test_expand_date_range_rejects_reversed_range():
    with pytest.raises(InvalidRange):
        expand_date_range(date(2024, 2, 2), date(2024, 1, 30))


def test_expand_date_range_respects_custom_limit():
    with pytest.raises(RangeTooLarge):
        expand_date_range(date(2024, 1, 1), date(2024, 1, 8), max_days=7)


def test_parse_report_date():
    assert parse_report_date("2024-05-06") == date(2024, 5, 6)
    assert parse_report_date(date(2024, 5, 6)) == date(2024, 5, 6)
    with pytest.raises(InvalidRange):
        parse_report_date("06/05/2024")
