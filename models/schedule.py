"""SQLModel table for versioned task schedules."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field, SQLModel

from core.recurrence import Recurrence, ScheduleRule


class TaskSchedule(SQLModel, table=True):
    """One row per schedule version; ``effective_to`` is NULL for the active one."""

    __tablename__ = "task_schedule"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_id: int = Field(foreign_key="task.id", index=True)
    effective_from: int
    effective_to: Optional[int] = None
    type: str
    weekday_mask: Optional[int] = None
    monthday: Optional[int] = None
    interval_days: Optional[int] = None
    params_json: Optional[str] = None

    @classmethod
    def open(cls, task_id: int, effective_from: int, recurrence: Recurrence) -> "TaskSchedule":
        return cls(
            task_id=task_id,
            effective_from=effective_from,
            type=recurrence.kind,
            weekday_mask=recurrence.weekday_mask,
            monthday=recurrence.monthday,
            interval_days=recurrence.interval_days,
        )

    @property
    def recurrence(self) -> Recurrence:
        return Recurrence(
            kind=self.type,
            weekday_mask=self.weekday_mask,
            monthday=self.monthday,
            interval_days=self.interval_days,
        )

    def to_rule(self) -> ScheduleRule:
        return ScheduleRule(
            id=self.id,
            task_id=self.task_id,
            effective_from=self.effective_from,
            effective_to=self.effective_to,
            recurrence=self.recurrence,
        )


__all__ = ["TaskSchedule"]
