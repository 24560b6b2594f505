import os
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings create their directories at import time; keep them out of $HOME.
os.environ.setdefault("HABIT_STREAKS_DATA_DIR", tempfile.mkdtemp(prefix="habit-streaks-"))

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlmodel import Session, create_engine  # noqa: E402

from services.tasks import TaskService  # noqa: E402
from storage.db import init_db  # noqa: E402
from utils.datetime_utils import day_index  # noqa: E402

# 2024-01-01 is a Monday.
MONDAY = day_index(date(2024, 1, 1))


class FakeClock:
    def __init__(self, day: int):
        self.day = day

    def __call__(self) -> int:
        return self.day

    def advance(self, days: int = 1) -> None:
        self.day += days


@pytest.fixture()
def session_factory():
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)

    def factory():
        return Session(engine)

    return factory


@pytest.fixture()
def clock():
    return FakeClock(MONDAY)


@pytest.fixture()
def service(session_factory, clock):
    return TaskService(session_factory=session_factory, today=clock)
