# habit_streaks/models/task.py
from typing import Optional

from sqlmodel import SQLModel, Field

from utils.datetime_utils import epoch_seconds


class Task(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    notes: Optional[str] = None
    is_active: bool = True
    created_at: int = Field(default_factory=epoch_seconds, index=True)   # epoch seconds
    archived_at: Optional[int] = None
