from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

from rich.console import Console

from spinlog.config import Config, DisplayConfig, LogManagerConfig, load_config
from spinlog.models import TaskEntry, TaskStatus
from spinlog.render import RenderLoop, TaskLineBuilder, TerminalRegion
from spinlog.utils.logging import logger

Clock = Callable[[], datetime]

_UPDATABLE_FIELDS = frozenset({"message", "showing_details", "children"})


class TaskLogManager:
    """
    In-memory store of task entries and the terminal region that shows them.

    The render loop runs only while the store holds entries: it starts on the
    first registration and stops, clearing the region, once the last entry is
    removed. Finished entries leave after the retention window or when a count
    cap evicts them, whichever happens first.

    Rendering and retention timers need a running asyncio loop. Entries
    registered or finished without one are stored but not drawn; the loop is
    picked up by the next register or unregister made from inside a running
    loop.

    Mutators never raise for unknown ids, so a progress display can't abort the
    program it decorates.
    """

    def __init__(
        self,
        config: LogManagerConfig | None = None,
        *,
        display: DisplayConfig | None = None,
        console: Console | None = None,
        clock: Clock = datetime.now,
    ):
        self._config = config or LogManagerConfig()
        self._display = display or DisplayConfig()
        self._clock = clock
        self._entries: dict[str, TaskEntry] = {}
        self._removal_timers: dict[str, asyncio.TimerHandle] = {}
        self._builder = TaskLineBuilder(self._display)
        self._region = TerminalRegion(console or Console())
        self._render_loop = RenderLoop(self.render_once, lambda: self._config.refresh_interval)
        self._rendering = False

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        *,
        console: Console | None = None,
        clock: Clock = datetime.now,
    ) -> TaskLogManager:
        """Build a manager from a `Config`, reading the user config file when none is given."""
        config = config or load_config()
        return cls(config.manager, display=config.display, console=console, clock=clock)

    # ---- configuration ----

    @property
    def config(self) -> LogManagerConfig:
        return self._config

    @property
    def display(self) -> DisplayConfig:
        return self._display

    def configure(self, **options: Any) -> LogManagerConfig:
        """
        Update caps, retention or refresh rate.

        Only later decisions see the new values; removals already scheduled keep
        the delay they were scheduled with.
        """
        unknown = set(options) - set(LogManagerConfig.model_fields)
        if unknown:
            logger.warning("Ignoring unknown manager options: {options}", options=sorted(unknown))
        merged = self._config.model_dump() | {
            k: v for k, v in options.items() if k not in unknown
        }
        self._config = LogManagerConfig.model_validate(merged)
        logger.debug("Manager configured: {config}", config=self._config)
        return self._config

    # ---- queries ----

    def get(self, task_id: str) -> TaskEntry | None:
        return self._entries.get(task_id)

    def entries(self) -> list[TaskEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._entries

    @property
    def is_rendering(self) -> bool:
        return self._render_loop.is_running

    @property
    def now(self) -> datetime:
        return self._clock()

    # ---- mutators ----

    def register(self, entry: TaskEntry) -> None:
        # A restarted task reuses its id, so drop the removal from its previous stop.
        self._cancel_removal(entry.id)
        self._entries[entry.id] = entry
        logger.debug(
            "Registered task {task_id} level={level}", task_id=entry.id, level=entry.level
        )
        self._render_loop.start()
        self._evict()

    def update(self, task_id: str, **changes: Any) -> None:
        entry = self._entries.get(task_id)
        if entry is None:
            return
        for name, value in changes.items():
            if name not in _UPDATABLE_FIELDS:
                logger.warning(
                    "Field {name} cannot be updated on {task_id}", name=name, task_id=task_id
                )
                continue
            setattr(entry, name, value)

    def unregister(self, task_id: str, final_message: str | None = None) -> None:
        entry = self._entries.get(task_id)
        if entry is None or not entry.is_running:
            return
        if final_message is not None and "fail" in final_message.lower():
            entry.status = TaskStatus.FAILED
        else:
            entry.status = TaskStatus.COMPLETED
        entry.end_time = self._clock()
        if final_message:
            entry.message = final_message
        logger.debug("Task {task_id} -> {status}", task_id=task_id, status=entry.status.value)
        self._render_loop.start()
        self._schedule_removal(task_id)

    def add_detail(self, task_id: str, detail: str) -> None:
        entry = self._entries.get(task_id)
        if entry is None or not entry.is_running:
            return
        entry.details.append(f"{self._clock():%H:%M:%S} - {detail}")

    def show_details(self, task_id: str) -> None:
        if entry := self._entries.get(task_id):
            entry.showing_details = True

    def hide_details(self, task_id: str) -> None:
        if entry := self._entries.get(task_id):
            entry.showing_details = False

    def toggle_details(self, task_id: str) -> None:
        if entry := self._entries.get(task_id):
            entry.showing_details = not entry.showing_details

    def remove(self, task_id: str) -> None:
        """Drop an entry. Absent ids are ignored, so racing removal paths are safe."""
        self._cancel_removal(task_id)
        if self._entries.pop(task_id, None) is None:
            return
        logger.debug("Removed task {task_id}", task_id=task_id)
        self._stop_if_empty()

    # ---- rendering ----

    def render_once(self) -> None:
        """Advance running animations and redraw the region once."""
        for entry in self._entries.values():
            if entry.is_running:
                entry.animation.tick()
        if self._rendering or not self._entries:
            return
        self._rendering = True
        try:
            lines = self._builder.build(self._entries, self._clock())
            trailer = self._display.trailer if self._display.show_trailer else None
            self._region.redraw(lines, trailer)
        finally:
            self._rendering = False

    async def shutdown(self) -> None:
        """Stop rendering, cancel pending removals and clear the region."""
        for handle in self._removal_timers.values():
            handle.cancel()
        self._removal_timers.clear()
        await self._render_loop.aclose()
        self._region.clear()

    # ---- internals ----

    def _evict(self) -> None:
        active: list[TaskEntry] = []
        completed: list[TaskEntry] = []
        for entry in self._entries.values():
            (active if entry.is_running else completed).append(entry)

        evicted: list[str] = []
        excess = len(active) - self._config.max_active_logs
        if excess > 0:
            active.sort(key=lambda e: e.start_time)
            evicted.extend(e.id for e in active[:excess])
        excess = len(completed) - self._config.max_completed_logs
        if excess > 0:
            completed.sort(key=lambda e: e.end_time or e.start_time)
            evicted.extend(e.id for e in completed[:excess])

        if not evicted:
            return
        for task_id in evicted:
            # Evicted running tasks skip their stop path; their loggers notice nothing.
            self._cancel_removal(task_id)
            del self._entries[task_id]
        logger.debug("Evicted tasks: {ids}", ids=evicted)
        self._stop_if_empty()

    def _schedule_removal(self, task_id: str) -> None:
        if self._config.keeps_finished_forever:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, task {task_id} is retained", task_id=task_id)
            return
        self._cancel_removal(task_id)
        delay = self._config.retention_time_ms / 1000
        self._removal_timers[task_id] = loop.call_later(delay, self._expire, task_id)

    def _expire(self, task_id: str) -> None:
        self._removal_timers.pop(task_id, None)
        self.remove(task_id)

    def _cancel_removal(self, task_id: str) -> None:
        if handle := self._removal_timers.pop(task_id, None):
            handle.cancel()

    def _stop_if_empty(self) -> None:
        if self._entries:
            return
        self._render_loop.stop()
        self._region.clear()
