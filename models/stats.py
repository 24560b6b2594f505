# habit_streaks/models/stats.py
from __future__ import annotations

from typing import Optional

from sqlmodel import Field, SQLModel

from utils.datetime_utils import epoch_seconds


class TaskStats(SQLModel, table=True):
    """Cached streak figures, recomputed whenever completions change."""

    __tablename__ = "task_stats"

    task_id: int = Field(primary_key=True, foreign_key="task.id")
    current_streak: int = 0
    best_streak: int = 0
    last_completed_day: Optional[int] = None
    updated_at: int = Field(default_factory=epoch_seconds)


__all__ = ["TaskStats"]
