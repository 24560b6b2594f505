from datetime import date, datetime, timedelta, timezone

import pytest

from utils.datetime_utils import (
    date_of,
    day_index,
    day_of_month,
    epoch_seconds,
    monday_of,
    weekday_of,
)


def test_epoch_is_day_zero_and_a_thursday():
    assert day_index(date(1970, 1, 1)) == 0
    assert weekday_of(0) == 3


def test_day_index_known_dates():
    assert day_index(date(2024, 1, 1)) == 19723
    assert date_of(19723) == date(2024, 1, 1)
    assert day_of_month(19723 + 30) == 31


def test_naive_datetime_is_treated_as_utc():
    naive = datetime(2024, 1, 1, 23, 59)
    shifted = datetime(2024, 1, 2, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert day_index(naive) == day_index(date(2024, 1, 1))
    assert day_index(shifted) == day_index(date(2024, 1, 1))


def test_monday_of_floors_to_week_start():
    monday = day_index(date(2024, 1, 1))
    for offset in range(7):
        assert monday_of(monday + offset) == monday
    assert monday_of(monday - 1) == monday - 7


def test_epoch_seconds_of_aware_datetime():
    moment = datetime(1970, 1, 2, tzinfo=timezone.utc)
    assert epoch_seconds(moment) == 86400


def test_unrepresentable_day_overflows():
    with pytest.raises(OverflowError):
        date_of(10**9)
