from datetime import date

from core.recurrence import (
    ALL_WEEKDAYS,
    WEEKEND,
    Recurrence,
    ScheduleRule,
    is_due,
    weekday_mask,
)
from utils.datetime_utils import day_index

MONDAY = day_index(date(2024, 1, 1))


def _rule(recurrence, effective_from=MONDAY, effective_to=None):
    return ScheduleRule(
        task_id=1,
        effective_from=effective_from,
        effective_to=effective_to,
        recurrence=recurrence,
    )


def test_daily_due_from_effective_day():
    rule = _rule(Recurrence.daily())
    assert not is_due(rule, MONDAY - 1)
    assert all(is_due(rule, MONDAY + offset) for offset in range(60))


def test_closed_rule_not_due_after_effective_to():
    rule = _rule(Recurrence.daily(), effective_to=MONDAY + 2)
    assert is_due(rule, MONDAY + 2)
    assert not is_due(rule, MONDAY + 3)


def test_weekly_mask_selects_weekdays():
    rule = _rule(Recurrence.weekly(weekday_mask(0, 2)))
    due = [offset for offset in range(7) if is_due(rule, MONDAY + offset)]
    assert due == [0, 2]


def test_weekend_and_full_masks():
    weekend = _rule(Recurrence.weekly(WEEKEND))
    everyday = _rule(Recurrence.weekly(ALL_WEEKDAYS))
    assert [o for o in range(7) if is_due(weekend, MONDAY + o)] == [5, 6]
    assert all(is_due(everyday, MONDAY + o) for o in range(7))


def test_monthly_matches_day_of_month():
    rule = _rule(Recurrence.monthly(15))
    due = [day for day in range(MONDAY, MONDAY + 366) if is_due(rule, day)]
    assert len(due) == 12
    assert due[0] == day_index(date(2024, 1, 15))


def test_monthly_31_never_due_in_thirty_day_month():
    rule = _rule(Recurrence.monthly(31))
    april_first = day_index(date(2024, 4, 1))
    assert not any(is_due(rule, april_first + offset) for offset in range(30))
    assert is_due(rule, day_index(date(2024, 5, 31)))


def test_custom_interval_counts_from_effective_from():
    rule = _rule(Recurrence.custom(3), effective_from=MONDAY + 1)
    due = [day - MONDAY for day in range(MONDAY, MONDAY + 10) if is_due(rule, day)]
    assert due == [1, 4, 7]


def test_malformed_descriptors_are_never_due():
    rules = [
        _rule(Recurrence.weekly(None)),
        _rule(Recurrence.monthly(None)),
        _rule(Recurrence.custom(None)),
        _rule(Recurrence.custom(0)),
        _rule(Recurrence.custom(-2)),
        _rule(Recurrence("yearly")),
    ]
    for rule in rules:
        assert not any(is_due(rule, MONDAY + offset) for offset in range(40))


def test_overlaps_uses_inclusive_bounds():
    rule = _rule(Recurrence.daily(), effective_from=10, effective_to=20)
    assert rule.overlaps(20, 25)
    assert rule.overlaps(0, 10)
    assert not rule.overlaps(21, 30)
    assert not rule.overlaps(0, 9)
    assert _rule(Recurrence.daily(), effective_from=10).overlaps(1000, 1006)
