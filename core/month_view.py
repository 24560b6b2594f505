"""Fixed-size calendar grid of due/done aggregates."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Dict, Iterable, List, Tuple

from core.recurrence import ScheduleRule, is_due
from core.settings import STREAKS
from utils.datetime_utils import day_index, monday_of


@dataclass(frozen=True)
class MonthTask:
    task_id: int
    title: str
    is_done: bool


@dataclass(frozen=True)
class MonthViewDay:
    day: int
    due_count: int
    done_count: int
    all_done: bool
    tasks: Tuple[MonthTask, ...]


def grid_bounds(year: int, month: int) -> Tuple[int, int]:
    """Return the first and last day index of the grid for ``year``/``month``.

    The grid starts on the Monday on or before the 1st and always spans
    ``STREAKS.month_grid_days`` days, so trailing days of long months fall
    outside it.
    """

    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1..12, got {month}")
    start = monday_of(day_index(date(year, month, 1)))
    return start, start + STREAKS.month_grid_days - 1


def build_month_view(
    year: int,
    month: int,
    rules: Iterable[Tuple[ScheduleRule, str]],
    completions: AbstractSet[Tuple[int, int]],
) -> List[MonthViewDay]:
    """Aggregate due and done tasks per grid day.

    ``rules`` pairs each schedule rule with its task title; ``completions``
    holds ``(task_id, day)`` pairs. A task whose schedule changed inside the
    grid is counted once per day.
    """

    start, end = grid_bounds(year, month)
    grid_rules = [(rule, title) for rule, title in rules if rule.overlaps(start, end)]

    cells: List[MonthViewDay] = []
    for day in range(start, end + 1):
        due_tasks: Dict[int, MonthTask] = {}
        for rule, title in grid_rules:
            if rule.task_id in due_tasks or not is_due(rule, day):
                continue
            due_tasks[rule.task_id] = MonthTask(
                task_id=rule.task_id,
                title=title,
                is_done=(rule.task_id, day) in completions,
            )

        tasks = tuple(sorted(due_tasks.values(), key=lambda t: t.task_id))
        due_count = len(tasks)
        done_count = sum(1 for t in tasks if t.is_done)
        cells.append(
            MonthViewDay(
                day=day,
                due_count=due_count,
                done_count=done_count,
                all_done=due_count > 0 and due_count == done_count,
                tasks=tasks,
            )
        )
    return cells


__all__ = ["MonthTask", "MonthViewDay", "build_month_view", "grid_bounds"]
