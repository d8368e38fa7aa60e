from __future__ import annotations

import io
from datetime import datetime, timedelta

import pytest
from rich.console import Console

from spinlog.animations import create_animation
from spinlog.config import LogManagerConfig
from spinlog.manager import TaskLogManager
from spinlog.models import TaskEntry, TaskStatus

ERASE_LINE = "\x1b[1A\x1b[2K"


class FakeClock:
    """Manually advanced replacement for ``datetime.now``."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def _terminal_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # rich skips cursor control codes on dumb terminals
    monkeypatch.setenv("TERM", "xterm-256color")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    return Console(file=output, force_terminal=True, color_system=None, width=120)


@pytest.fixture
def manager(console: Console, clock: FakeClock) -> TaskLogManager:
    return TaskLogManager(console=console, clock=clock)


@pytest.fixture
def keep_forever_manager(console: Console, clock: FakeClock) -> TaskLogManager:
    return TaskLogManager(LogManagerConfig(retention_time_ms=0), console=console, clock=clock)


def make_entry(
    task_id: str,
    start_time: datetime,
    *,
    message: str | None = None,
    level: int = 0,
    status: TaskStatus = TaskStatus.RUNNING,
    end_time: datetime | None = None,
) -> TaskEntry:
    return TaskEntry(
        id=task_id,
        message=message or task_id,
        animation=create_animation("sequential_dots", "cyan"),
        level=level,
        status=status,
        start_time=start_time,
        end_time=end_time,
    )
