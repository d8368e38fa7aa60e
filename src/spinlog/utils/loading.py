from __future__ import annotations

from collections.abc import Awaitable
from typing import TypeVar

from spinlog.animations import AnimationType
from spinlog.loggers import TaskLogger
from spinlog.manager import TaskLogManager

T = TypeVar("T")


async def with_loading(
    awaitable: Awaitable[T],
    manager: TaskLogManager,
    message: str = "Loading",
    animation: AnimationType | str = AnimationType.SEQUENTIAL_DOTS,
) -> T:
    """Show an animated line while `awaitable` runs; re-raise whatever it raises."""
    task = TaskLogger(manager, message, animation=animation).start()
    try:
        result = await awaitable
    except BaseException:
        task.stop("Failed!")
        raise
    task.stop("Complete!")
    return result


class TaskLogGroup:
    """A parent line with named sub-tasks that are completed one by one."""

    def __init__(self, manager: TaskLogManager, message: str):
        self._root = TaskLogger(manager, message)
        self._tasks: dict[str, TaskLogger] = {}

    @property
    def root(self) -> TaskLogger:
        return self._root

    def add_task(
        self,
        key: str,
        message: str,
        animation: AnimationType | str = AnimationType.SEQUENTIAL_DOTS,
    ) -> TaskLogGroup:
        self._tasks[key] = self._root.add_subtask(message).with_animation(animation).build()
        return self

    def get(self, key: str) -> TaskLogger | None:
        return self._tasks.get(key)

    def start(self) -> TaskLogGroup:
        self._root.start().expand()
        return self

    def complete_task(self, key: str, message: str | None = None) -> TaskLogGroup:
        if task := self._tasks.get(key):
            task.stop(message or "Done")
        return self

    def stop(self, message: str | None = None) -> TaskLogGroup:
        self._root.stop(message)
        return self
