"""Recurrence descriptors, versioned schedule rules and the due predicate."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from utils.datetime_utils import day_of_month, weekday_of

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
CUSTOM = "custom"

# Bit i of a weekday mask is Monday=0 … Sunday=6.
ALL_WEEKDAYS = (1 << 7) - 1
WEEKEND = (1 << 5) | (1 << 6)


@dataclass(frozen=True)
class Recurrence:
    """What a caller asks for when creating or editing a task.

    Descriptors are deliberately not validated: a weekly rule without a mask,
    a monthly rule without a day or a custom rule with a non-positive interval
    is stored as given and simply never comes due.
    """

    kind: str
    weekday_mask: Optional[int] = None
    monthday: Optional[int] = None
    interval_days: Optional[int] = None

    @classmethod
    def daily(cls) -> "Recurrence":
        return cls(DAILY)

    @classmethod
    def weekly(cls, weekday_mask: Optional[int]) -> "Recurrence":
        return cls(WEEKLY, weekday_mask=weekday_mask)

    @classmethod
    def monthly(cls, monthday: Optional[int]) -> "Recurrence":
        return cls(MONTHLY, monthday=monthday)

    @classmethod
    def custom(cls, interval_days: Optional[int]) -> "Recurrence":
        return cls(CUSTOM, interval_days=interval_days)


def weekday_mask(*weekdays: int) -> int:
    """Build a mask from Monday-based weekday numbers."""
    mask = 0
    for weekday in weekdays:
        mask |= 1 << weekday
    return mask


@dataclass(frozen=True)
class ScheduleRule:
    """One immutable version of a task's schedule.

    ``effective_to`` of ``None`` marks the task's active rule. Both bounds are
    inclusive day indices.
    """

    task_id: int
    effective_from: int
    recurrence: Recurrence
    effective_to: Optional[int] = None
    id: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.effective_to is None

    def covers(self, day: int) -> bool:
        if day < self.effective_from:
            return False
        return self.effective_to is None or day <= self.effective_to

    def overlaps(self, start: int, end: int) -> bool:
        if self.effective_from > end:
            return False
        return self.effective_to is None or self.effective_to >= start


def is_due(rule: ScheduleRule, day: int) -> bool:
    if not rule.covers(day):
        return False

    recurrence = rule.recurrence
    kind = recurrence.kind
    if kind == DAILY:
        return True
    if kind == WEEKLY:
        if recurrence.weekday_mask is None:
            return False
        return bool(recurrence.weekday_mask & (1 << weekday_of(day)))
    if kind == MONTHLY:
        if recurrence.monthday is None:
            return False
        return day_of_month(day) == recurrence.monthday
    if kind == CUSTOM:
        interval = recurrence.interval_days
        if interval is None or interval <= 0:
            return False
        return (day - rule.effective_from) % interval == 0
    return False


__all__ = [
    "ALL_WEEKDAYS",
    "CUSTOM",
    "DAILY",
    "MONTHLY",
    "Recurrence",
    "ScheduleRule",
    "WEEKEND",
    "WEEKLY",
    "is_due",
    "weekday_mask",
]
