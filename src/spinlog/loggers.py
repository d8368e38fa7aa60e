from __future__ import annotations

import uuid

from spinlog.animations import Animation, AnimationType, create_animation
from spinlog.manager import TaskLogManager
from spinlog.models import TaskEntry
from spinlog.utils.logging import logger

DEFAULT_COLOR = "cyan"
DEFAULT_SUBTASK_COLOR = "yellow"


def new_task_id() -> str:
    return f"task_{uuid.uuid4().hex[:12]}"


class TaskLogger:
    """
    One task line, optionally the root of a tree of sub-tasks.

    The ordered child map held here is the only record of the tree. Store
    entries read their ``children`` straight from it, so branches added while
    the task is on screen show up without restarting the parent.
    """

    def __init__(
        self,
        manager: TaskLogManager,
        message: str,
        *,
        animation: AnimationType | str = AnimationType.SEQUENTIAL_DOTS,
        color: str = DEFAULT_COLOR,
        level: int = 0,
        task_id: str | None = None,
        parent_id: str | None = None,
    ):
        if level < 0:
            raise ValueError("level must be non-negative")
        self._manager = manager
        self._id = task_id or new_task_id()
        self._message = message
        self._animation: Animation = create_animation(animation, color)
        self._level = level
        self._parent_id = parent_id if level > 0 else None
        self._children: dict[str, TaskLogger] = {}
        self._child_counter = 0
        self._running = False
        self._expanded = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def message(self) -> str:
        return self._message

    @property
    def level(self) -> int:
        return self._level

    @property
    def parent_id(self) -> str | None:
        return self._parent_id

    @property
    def animation(self) -> Animation:
        return self._animation

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_expanded(self) -> bool:
        return self._expanded

    @property
    def children(self) -> dict[str, TaskLogger]:
        return dict(self._children)

    def start(self) -> TaskLogger:
        if self._running:
            return self
        self._running = True
        self._animation.reset()
        self._manager.register(
            TaskEntry(
                id=self._id,
                message=self._message,
                animation=self._animation,
                level=self._level,
                start_time=self._manager.now,
                children=self._children.keys(),
                parent_id=self._parent_id,
            )
        )
        return self

    def stop(self, final_message: str | None = None) -> TaskLogger:
        if not self._running:
            return self
        self._running = False
        for child in list(self._children.values()):
            child.stop()
        self._manager.unregister(self._id, final_message)
        return self

    def add_detail(self, message: str) -> TaskLogger:
        self._manager.add_detail(self._id, message)
        return self

    def show_details(self) -> TaskLogger:
        self._manager.show_details(self._id)
        return self

    def hide_details(self) -> TaskLogger:
        self._manager.hide_details(self._id)
        return self

    def toggle_details(self) -> TaskLogger:
        self._manager.toggle_details(self._id)
        return self

    def add_subtask(self, message: str) -> SubTaskBuilder:
        return SubTaskBuilder(self, message)

    def expand(self) -> TaskLogger:
        self._expanded = True
        for child in list(self._children.values()):
            if not child.is_running:
                child.start()
        self._sync_children()
        return self

    def collapse(self) -> TaskLogger:
        self._expanded = False
        for child in list(self._children.values()):
            child.stop()
        return self

    def toggle(self) -> TaskLogger:
        return self.collapse() if self._expanded else self.expand()

    def _create_subtask(
        self,
        message: str,
        animation: AnimationType | str,
        color: str,
    ) -> TaskLogger:
        child_id = f"{self._id}_child_{self._child_counter}"
        self._child_counter += 1
        child = TaskLogger(
            self._manager,
            message,
            animation=animation,
            color=color,
            level=self._level + 1,
            task_id=child_id,
            parent_id=self._id,
        )
        self._children[child_id] = child
        logger.debug(
            "Added subtask {child_id} under {task_id}", child_id=child_id, task_id=self._id
        )
        self._sync_children()
        return child

    def _sync_children(self) -> None:
        # The stored entry may have been handed another list through TaskLogManager.update.
        if self._running:
            self._manager.update(self._id, children=self._children.keys())

    def __repr__(self) -> str:
        return (
            f"TaskLogger(id={self._id!r}, message={self._message!r}, "
            f"running={self._running}, children={len(self._children)})"
        )


class SubTaskBuilder:
    """Configure a sub-task before attaching it to its parent."""

    def __init__(self, parent: TaskLogger, message: str):
        self._parent = parent
        self._message = message
        self._animation: AnimationType | str = AnimationType.SEQUENTIAL_DOTS
        self._color = DEFAULT_SUBTASK_COLOR

    def with_animation(self, animation: AnimationType | str) -> SubTaskBuilder:
        self._animation = animation
        return self

    def with_color(self, color: str) -> SubTaskBuilder:
        self._color = color
        return self

    def build(self) -> TaskLogger:
        return self._parent._create_subtask(self._message, self._animation, self._color)
