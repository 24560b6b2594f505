"""ORM models exposed by the HabitStreaks application."""
from .task import Task
from .schedule import TaskSchedule
from .completion import STATUS_DONE, TaskCompletion
from .stats import TaskStats

__all__ = ["STATUS_DONE", "Task", "TaskCompletion", "TaskSchedule", "TaskStats"]
