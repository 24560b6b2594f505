# habit_streaks/models/completion.py
from __future__ import annotations

from typing import Optional

from sqlmodel import Field, SQLModel

from utils.datetime_utils import epoch_seconds

# Only STATUS_DONE is ever written. Status 2 exists in the schema but has no
# agreed meaning yet.
STATUS_DONE = 1
STATUS_RESERVED = 2


class TaskCompletion(SQLModel, table=True):
    __tablename__ = "task_completion"

    task_id: int = Field(primary_key=True, foreign_key="task.id")
    day: int = Field(primary_key=True, index=True)
    status: int = Field(default=STATUS_DONE)
    done_at: Optional[int] = Field(default_factory=epoch_seconds)


__all__ = ["STATUS_DONE", "STATUS_RESERVED", "TaskCompletion"]
