"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


DATA_DIR_ENV = "HABIT_STREAKS_DATA_DIR"


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return the data directory for ``app_name``.

    ``HABIT_STREAKS_DATA_DIR`` wins when set; otherwise an OS-specific user
    data directory is used.
    """

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    override = environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "HabitStreaks"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "habits.db"


@dataclass(frozen=True)
class LoggingSettings:
    path: Path = LOG_DIR / "tasks.log"
    level: int = logging.INFO
    max_bytes: int = 1_000_000
    backup_count: int = 3


LOGGING = LoggingSettings()


@dataclass(frozen=True)
class StreakSettings:
    # Per-task streak scans never look further back than this many days.
    max_scan_days: int = 1000
    # Roughly five years of weeks.
    max_weekly_weeks: int = 260
    # Month view is a fixed four-week grid.
    month_grid_days: int = 28


STREAKS = StreakSettings()


@dataclass(frozen=True)
class TaskSettings:
    max_title_length: int = 120


TASKS = TaskSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DATA_DIR_ENV",
    "DB_PATH",
    "LOG_DIR",
    "LOGGING",
    "STREAKS",
    "TASKS",
    "get_default_data_dir",
]
