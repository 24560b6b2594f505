from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from core.recurrence import Recurrence, ScheduleRule
from core.streaks import StreakStats
from models import STATUS_DONE, Task, TaskCompletion, TaskSchedule, TaskStats
from utils.datetime_utils import epoch_seconds


class StorageError(RuntimeError):
    """Raised for any failure of the underlying database."""


@dataclass(frozen=True)
class TaskOverview:
    task_id: int
    title: str
    notes: Optional[str]
    is_active: bool
    created_at: int
    archived_at: Optional[int]
    rule: ScheduleRule
    current_streak: int
    best_streak: int
    last_completed_day: Optional[int]
    done_on_day: bool


class TaskRepository:
    """Queries over tasks, schedules, completions and stats.

    The repository never commits; it works inside the session (and therefore
    the transaction) handed to it by the caller.
    """

    def __init__(self, session: Session):
        self.session = session

    # ----- tasks -----
    def get_task(self, task_id: int) -> Optional[Task]:
        return self.session.get(Task, task_id)

    def all_tasks(self) -> List[Task]:
        return list(self.session.exec(select(Task)))

    def add_task(self, title: str, *, notes: Optional[str] = None) -> Task:
        task = Task(title=title, notes=notes)
        self.session.add(task)
        self.session.flush()
        self.session.add(TaskStats(task_id=task.id))
        return task

    def detach(self, task: Task) -> Task:
        """Flush ``task`` and hand it out independent of the session."""
        self.session.flush()
        self.session.expunge(task)
        return task

    def delete_task(self, task: Task) -> None:
        task_id = task.id
        for model in (TaskCompletion, TaskSchedule):
            for row in list(self.session.exec(select(model).where(model.task_id == task_id))):
                self.session.delete(row)
        stats = self.session.get(TaskStats, task_id)
        if stats is not None:
            self.session.delete(stats)
        self.session.delete(task)

    # ----- schedules -----
    def _active_schedule(self, task_id: int) -> Optional[TaskSchedule]:
        stmt = select(TaskSchedule).where(
            TaskSchedule.task_id == task_id,
            TaskSchedule.effective_to == None,  # noqa: E711
        )
        return self.session.exec(stmt).first()

    def active_rule(self, task_id: int) -> Optional[ScheduleRule]:
        row = self._active_schedule(task_id)
        return row.to_rule() if row else None

    def open_rule(self, task_id: int, effective_from: int, recurrence: Recurrence) -> ScheduleRule:
        row = TaskSchedule.open(task_id, effective_from, recurrence)
        self.session.add(row)
        self.session.flush()
        return row.to_rule()

    def close_active_rule(self, task_id: int, effective_to: int) -> Optional[ScheduleRule]:
        row = self._active_schedule(task_id)
        if row is None:
            return None
        row.effective_to = effective_to
        self.session.add(row)
        # Flush before a replacement is opened so the single-active index holds.
        self.session.flush()
        return row.to_rule()

    def schedule_history(self, task_id: int) -> List[ScheduleRule]:
        stmt = (
            select(TaskSchedule)
            .where(TaskSchedule.task_id == task_id)
            .order_by(TaskSchedule.effective_from.asc(), TaskSchedule.id.asc())
        )
        return [row.to_rule() for row in self.session.exec(stmt)]

    def rule_on(self, task_id: int, day: int) -> Optional[ScheduleRule]:
        for rule in reversed(self.schedule_history(task_id)):
            if rule.covers(day):
                return rule
        return None

    def _overlapping(self, start: int, end: int):
        return and_(
            TaskSchedule.effective_from <= end,
            or_(
                TaskSchedule.effective_to == None,  # noqa: E711
                TaskSchedule.effective_to >= start,
            ),
        )

    def rules_overlapping(self, start: int, end: int) -> List[ScheduleRule]:
        stmt = select(TaskSchedule).where(self._overlapping(start, end))
        return [row.to_rule() for row in self.session.exec(stmt)]

    def rules_overlapping_with_titles(self, start: int, end: int) -> List[Tuple[ScheduleRule, str]]:
        stmt = (
            select(TaskSchedule, Task)
            .join(Task, Task.id == TaskSchedule.task_id)
            .where(self._overlapping(start, end))
        )
        return [(schedule.to_rule(), task.title) for schedule, task in self.session.exec(stmt)]

    # ----- completions -----
    def get_completion(self, task_id: int, day: int) -> Optional[TaskCompletion]:
        return self.session.get(TaskCompletion, (task_id, day))

    def insert_completion(self, task_id: int, day: int) -> TaskCompletion:
        completion = TaskCompletion(task_id=task_id, day=day, status=STATUS_DONE)
        self.session.add(completion)
        return completion

    def delete_completion(self, completion: TaskCompletion) -> None:
        self.session.delete(completion)

    def completed_days(self, task_id: int) -> Set[int]:
        stmt = select(TaskCompletion.day).where(TaskCompletion.task_id == task_id)
        return set(self.session.exec(stmt))

    def completed_pairs(self, start: int, end: int) -> Set[Tuple[int, int]]:
        stmt = select(TaskCompletion.task_id, TaskCompletion.day).where(
            TaskCompletion.day >= start,
            TaskCompletion.day <= end,
        )
        return {(task_id, day) for task_id, day in self.session.exec(stmt)}

    # ----- stats -----
    def get_stats(self, task_id: int) -> Optional[TaskStats]:
        return self.session.get(TaskStats, task_id)

    def write_stats(self, task_id: int, stats: StreakStats) -> TaskStats:
        row = self.session.get(TaskStats, task_id)
        if row is None:
            row = TaskStats(task_id=task_id)
        row.current_streak = stats.current_streak
        row.best_streak = stats.best_streak
        row.last_completed_day = stats.last_completed_day
        row.updated_at = epoch_seconds()
        self.session.add(row)
        return row

    def reset_stats(self, task_id: int) -> TaskStats:
        row = self.session.get(TaskStats, task_id)
        if row is None:
            row = TaskStats(task_id=task_id)
        row.current_streak = 0
        row.last_completed_day = None
        row.updated_at = epoch_seconds()
        self.session.add(row)
        return row

    # ----- listing -----
    def list_overviews(self, day: int) -> List[TaskOverview]:
        stmt = (
            select(Task, TaskSchedule, TaskStats, TaskCompletion)
            .join(TaskSchedule, TaskSchedule.task_id == Task.id)
            .join(TaskStats, TaskStats.task_id == Task.id, isouter=True)
            .join(
                TaskCompletion,
                and_(TaskCompletion.task_id == Task.id, TaskCompletion.day == day),
                isouter=True,
            )
            .where(
                Task.archived_at == None,  # noqa: E711
                TaskSchedule.effective_to == None,  # noqa: E711
            )
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        result: List[TaskOverview] = []
        for task, schedule, stats, completion in self.session.exec(stmt):
            result.append(
                TaskOverview(
                    task_id=task.id,
                    title=task.title,
                    notes=task.notes,
                    is_active=task.is_active,
                    created_at=task.created_at,
                    archived_at=task.archived_at,
                    rule=schedule.to_rule(),
                    current_streak=stats.current_streak if stats else 0,
                    best_streak=stats.best_streak if stats else 0,
                    last_completed_day=stats.last_completed_day if stats else None,
                    done_on_day=completion is not None,
                )
            )
        return result


__all__ = ["StorageError", "TaskOverview", "TaskRepository"]
