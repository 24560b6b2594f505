"""Per-task and cross-task streak calculations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Callable, Iterable, Optional, Tuple

from core.recurrence import ScheduleRule, is_due
from core.settings import STREAKS
from utils.datetime_utils import monday_of


@dataclass(frozen=True)
class StreakStats:
    current_streak: int
    best_streak: int
    last_completed_day: Optional[int]


def current_streak(
    rule: ScheduleRule,
    completed_days: AbstractSet[int],
    today: int,
    *,
    max_scan_days: int = STREAKS.max_scan_days,
) -> int:
    """Count consecutive completed due days ending today (or yesterday).

    An unfinished today is a grace day and does not break the streak. Days on
    which the rule is not due are skipped.
    """

    day = today if today in completed_days else today - 1
    floor = max(rule.effective_from, today - max_scan_days)

    streak = 0
    while day >= floor:
        if is_due(rule, day):
            if day not in completed_days:
                break
            streak += 1
        day -= 1
    return streak


def compute_stats(
    rule: ScheduleRule,
    completed_days: AbstractSet[int],
    today: int,
    previous_best: int = 0,
) -> StreakStats:
    streak = current_streak(rule, completed_days, today)
    past_days = [day for day in completed_days if day <= today]
    return StreakStats(
        current_streak=streak,
        best_streak=max(previous_best, streak),
        last_completed_day=max(past_days) if past_days else None,
    )


def is_week_perfect(
    rules: Iterable[ScheduleRule],
    completions: AbstractSet[Tuple[int, int]],
    monday: int,
) -> bool:
    """True when every obligation due in ``[monday, monday + 6]`` was completed.

    ``completions`` holds ``(task_id, day)`` pairs. A week with nothing due is
    not perfect.
    """

    sunday = monday + 6
    week_rules = [rule for rule in rules if rule.overlaps(monday, sunday)]

    due_count = 0
    for day in range(monday, sunday + 1):
        for rule in week_rules:
            if not is_due(rule, day):
                continue
            due_count += 1
            if (rule.task_id, day) not in completions:
                return False
    return due_count > 0


def weekly_streak(
    week_is_perfect: Callable[[int], bool],
    today: int,
    *,
    max_weeks: int = STREAKS.max_weekly_weeks,
) -> int:
    """Count consecutive perfect weeks ending with the current week.

    ``week_is_perfect`` receives the day index of a Monday.
    """

    this_monday = monday_of(today)
    if not week_is_perfect(this_monday):
        return 0

    streak = 1
    monday = this_monday - 7
    for _ in range(max_weeks):
        if monday < 0 or not week_is_perfect(monday):
            break
        streak += 1
        monday -= 7
    return streak


__all__ = [
    "StreakStats",
    "compute_stats",
    "current_streak",
    "is_week_perfect",
    "weekly_streak",
]
