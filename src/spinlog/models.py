from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from spinlog.animations import Animation


class TaskStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class TaskEntry:
    id: str
    message: str
    animation: Animation
    level: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    details: list[str] = field(default_factory=list)
    showing_details: bool = False
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    children: Collection[str] = field(default_factory=list)
    """Ordered child ids; a TaskLogger passes a live view of its child map."""
    parent_id: str | None = None

    @property
    def is_running(self) -> bool:
        return self.status == TaskStatus.RUNNING

