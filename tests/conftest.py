from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

from goal_engine.clock import FixedClock
from goal_engine.store.api import GoalStore
from goal_engine.store.key_value import MemoryStorage
from goal_engine.store.kv_store import KeyValueGoalStore
from goal_engine.store.sqlite_store import SqliteGoalStore

FIXED_NOW = datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


@dataclass
class ManualTask:
    due_ms: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Scheduler whose time only moves when a test calls ``advance``."""

    now_ms: int = 0
    tasks: list[ManualTask] = field(default_factory=list)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(due_ms=self.now_ms + delay_ms, callback=callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [t for t in self.tasks if not t.cancelled and not t.fired]

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [t for t in self.pending if t.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due_ms)
            self.now_ms = task.due_ms
            task.fired = True
            task.callback()
        self.now_ms = target


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(FIXED_NOW)


@pytest.fixture(params=["sqlite", "keyvalue"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[GoalStore]:
    """Each backend, so behavioural tests run against both."""
    if request.param == "sqlite":
        s: GoalStore = SqliteGoalStore(db_path=tmp_path / "goals.db")
    else:
        s = KeyValueGoalStore(storage=MemoryStorage(), clock=FixedClock(FIXED_NOW))
    yield s
    s.close()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Iterator[SqliteGoalStore]:
    s = SqliteGoalStore(db_path=tmp_path / "goals.db")
    yield s
    s.close()
