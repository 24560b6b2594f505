# habit_streaks/services/tasks.py
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from typing import Callable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.month_view import MonthViewDay, build_month_view, grid_bounds
from core.recurrence import Recurrence, ScheduleRule
from core.settings import LOGGING, TASKS
from core.streaks import compute_stats, is_week_perfect, weekly_streak
from models.task import Task
from services.task_repository import StorageError, TaskOverview, TaskRepository
from storage.db import get_session
from utils.datetime_utils import epoch_seconds, today_index

# One lock for every service instance in the process.
_WRITE_LOCK = threading.RLock()


def _ensure_logger() -> logging.Logger:
    logger = logging.getLogger("habit_streaks.tasks")
    if not logger.handlers:
        LOGGING.path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOGGING.path,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(LOGGING.level)
    return logger


def _clean_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Title must not be empty")
    if len(cleaned) > TASKS.max_title_length:
        raise ValueError(f"Title must be at most {TASKS.max_title_length} characters")
    return cleaned


class TaskService:
    """Caller-facing operations over recurring tasks.

    Every operation runs under one lock and inside one session, so a
    completion write is never visible without its streak recompute and a
    schedule edit never without its stats reset.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        today: Callable[[], int] = today_index,
    ) -> None:
        self._session_factory = session_factory
        self._today = today
        self._lock = _WRITE_LOCK
        self.logger = _ensure_logger()

    @contextmanager
    def _unit_of_work(self) -> Iterator[TaskRepository]:
        with self._lock:
            with self._session_factory() as session:
                try:
                    yield TaskRepository(session)
                    session.commit()
                except SQLAlchemyError as exc:
                    session.rollback()
                    self.logger.error("Storage failure: %s", exc)
                    raise StorageError(str(exc)) from exc

    def _recompute_stats(self, repo: TaskRepository, task_id: int, today: int) -> None:
        rule = repo.active_rule(task_id)
        if rule is None:
            return
        previous = repo.get_stats(task_id)
        stats = compute_stats(
            rule,
            repo.completed_days(task_id),
            today,
            previous_best=previous.best_streak if previous else 0,
        )
        repo.write_stats(task_id, stats)
        self.logger.debug(
            "Task %s streak %s (best %s)", task_id, stats.current_streak, stats.best_streak
        )

    # ---------- CRUD ----------
    def create_task(self, title: str, recurrence: Recurrence, *, notes: Optional[str] = None) -> Task:
        cleaned_title = _clean_title(title)
        today = self._today()
        with self._unit_of_work() as repo:
            task = repo.add_task(cleaned_title, notes=notes or None)
            repo.open_rule(task.id, today, recurrence)
            self.logger.info("Task %s created (%s)", task.id, recurrence.kind)
            return repo.detach(task)

    def edit_task(self, task_id: int, new_title: str, new_recurrence: Recurrence) -> Optional[Task]:
        cleaned_title = _clean_title(new_title)
        today = self._today()
        with self._unit_of_work() as repo:
            task = repo.get_task(task_id)
            if not task:
                return None
            task.title = cleaned_title
            repo.session.add(task)

            current = repo.active_rule(task_id)
            if current is not None and current.recurrence != new_recurrence:
                repo.close_active_rule(task_id, today - 1)
                repo.open_rule(task_id, today, new_recurrence)
                repo.reset_stats(task_id)
                self.logger.info("Task %s schedule replaced from day %s", task_id, today)

            return repo.detach(task)

    def archive_task(self, task_id: int) -> None:
        with self._unit_of_work() as repo:
            task = repo.get_task(task_id)
            if task and task.archived_at is None:
                task.archived_at = epoch_seconds()
                task.is_active = False
                repo.session.add(task)
                self.logger.info("Task %s archived", task_id)

    def delete_task(self, task_id: int) -> None:
        with self._unit_of_work() as repo:
            task = repo.get_task(task_id)
            if task:
                repo.delete_task(task)
                self.logger.info("Task %s deleted", task_id)

    def delete_all_tasks(self) -> None:
        with self._unit_of_work() as repo:
            tasks = repo.all_tasks()
            for task in tasks:
                repo.delete_task(task)
            self.logger.info("Deleted all tasks (%s)", len(tasks))

    # ---------- completions ----------
    def toggle_completion(self, task_id: int, day: int) -> Optional[bool]:
        """Flip the completion of ``task_id`` on ``day`` and return the new state."""

        today = self._today()
        with self._unit_of_work() as repo:
            if not repo.get_task(task_id):
                return None
            completion = repo.get_completion(task_id, day)
            if completion is not None:
                repo.delete_completion(completion)
                done = False
            else:
                repo.insert_completion(task_id, day)
                done = True
            repo.session.flush()
            self._recompute_stats(repo, task_id, today)
            self.logger.debug("Task %s day %s -> %s", task_id, day, "done" if done else "open")
            return done

    def recalculate_streaks(self) -> int:
        """Recompute cached stats of every task against the current day."""

        today = self._today()
        with self._unit_of_work() as repo:
            tasks = repo.all_tasks()
            for task in tasks:
                self._recompute_stats(repo, task.id, today)
            return len(tasks)

    # ---------- reads ----------
    def list_tasks(self, as_of_day: Optional[int] = None) -> List[TaskOverview]:
        day = self._today() if as_of_day is None else as_of_day
        with self._unit_of_work() as repo:
            return repo.list_overviews(day)

    def schedule_history(self, task_id: int) -> List[ScheduleRule]:
        with self._unit_of_work() as repo:
            return repo.schedule_history(task_id)

    def rule_on(self, task_id: int, day: int) -> Optional[ScheduleRule]:
        """Return the schedule version that governed ``task_id`` on ``day``."""
        with self._unit_of_work() as repo:
            return repo.rule_on(task_id, day)

    def build_month_view(self, year: int, month: int) -> List[MonthViewDay]:
        start, end = grid_bounds(year, month)
        with self._unit_of_work() as repo:
            rules = repo.rules_overlapping_with_titles(start, end)
            completions = repo.completed_pairs(start, end)
        return build_month_view(year, month, rules, completions)

    def _week_is_perfect(self, repo: TaskRepository, monday: int) -> bool:
        sunday = monday + 6
        return is_week_perfect(
            repo.rules_overlapping(monday, sunday),
            repo.completed_pairs(monday, sunday),
            monday,
        )

    def is_week_perfect(self, monday: int) -> bool:
        with self._unit_of_work() as repo:
            return self._week_is_perfect(repo, monday)

    def get_weekly_streak(self) -> int:
        today = self._today()
        with self._unit_of_work() as repo:
            return weekly_streak(lambda monday: self._week_is_perfect(repo, monday), today)


__all__ = ["StorageError", "TaskService"]
