from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Mapping
from datetime import datetime

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

from spinlog.config import DisplayConfig
from spinlog.models import TaskEntry, TaskStatus
from spinlog.utils.logging import logger

MUTED_STYLE = "bright_black"
STATUS_STYLES = {
    TaskStatus.RUNNING: "white",
    TaskStatus.COMPLETED: "green",
    TaskStatus.FAILED: "red",
}
STATUS_ICONS = {
    TaskStatus.RUNNING: "",
    TaskStatus.COMPLETED: "✓",
    TaskStatus.FAILED: "✗",
}
EXPANDED_ICON = "▼"
COLLAPSED_ICON = "▶"
NO_DETAILS_ICON = "○"


def format_elapsed(entry: TaskEntry, now: datetime) -> str:
    end = entry.end_time or now
    delta = max(0, int((end - entry.start_time).total_seconds()))
    if delta < 60:
        return f"{delta}s"
    minutes, seconds = divmod(delta, 60)
    if minutes < 60:
        return f"{minutes}m {seconds:02d}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h"


class TaskLineBuilder:
    """Turn the entry store into the full list of display lines."""

    def __init__(self, display: DisplayConfig):
        self._display = display

    def build(self, entries: Mapping[str, TaskEntry], now: datetime) -> list[Text]:
        lines: list[Text] = []
        roots = sorted(
            (entry for entry in entries.values() if entry.level == 0),
            key=lambda e: e.start_time,
        )
        for entry in roots:
            self._build_entry(entry, entries, now, lines)
        return lines

    def _build_entry(
        self,
        entry: TaskEntry,
        entries: Mapping[str, TaskEntry],
        now: datetime,
        lines: list[Text],
    ) -> None:
        lines.append(self.render_entry(entry, now))
        if entry.showing_details and entry.details:
            detail_indent = self._indent(entry.level + 1)
            for detail in entry.details:
                first, *rest = detail.splitlines() or [""]
                lines.append(Text(f"{detail_indent}• {first}", style=MUTED_STYLE))
                lines.extend(Text(f"{detail_indent}  {part}", style=MUTED_STYLE) for part in rest)
        for child_id in list(entry.children):
            child = entries.get(child_id)
            if child is not None:
                self._build_entry(child, entries, now, lines)

    def render_entry(self, entry: TaskEntry, now: datetime) -> Text:
        if entry.is_running:
            frame = entry.animation.current_frame()
            style = entry.animation.current_color()
        else:
            frame = ""
            style = STATUS_STYLES[entry.status]

        if not entry.details:
            expand_icon = NO_DETAILS_ICON
        elif entry.showing_details:
            expand_icon = EXPANDED_ICON
        else:
            expand_icon = COLLAPSED_ICON

        message = " ".join(entry.message.splitlines())
        body = message + (f" {frame}" if frame else "")
        text = Text(self._indent(entry.level))
        text.append(f"{expand_icon} [{body}] ", style=style)
        icon = STATUS_ICONS[entry.status]
        if icon:
            text.append(icon, style=STATUS_STYLES[entry.status])
        text.append(" ")
        text.append(f"({format_elapsed(entry, now)})", style=MUTED_STYLE)
        return text

    def _indent(self, level: int) -> str:
        return " " * (self._display.indent_width * level)


class TerminalRegion:
    """Redraw a block of lines in place at the bottom of the terminal."""

    ERASE_PREVIOUS_LINE = Control((ControlType.CURSOR_UP, 1), (ControlType.ERASE_IN_LINE, 2))

    def __init__(self, console: Console):
        self._console = console
        self._line_count = 0

    @property
    def line_count(self) -> int:
        return self._line_count

    def redraw(self, lines: list[Text], trailer: str | None = None) -> None:
        self._erase()
        if trailer is not None:
            lines = [*lines, Text(trailer, style=MUTED_STYLE)]
        written = 0
        for line in lines:
            for row in line.split("\n", allow_blank=True):
                self._write(row)
                written += 1
        self._line_count = written

    def _write(self, line: Text) -> None:
        # One physical row per line, otherwise the next erase would miss wrapped rows.
        self._console.print(line, no_wrap=True, overflow="ellipsis", highlight=False)

    def clear(self) -> None:
        self._erase()

    def _erase(self) -> None:
        if self._line_count > 0:
            self._console.control(*([self.ERASE_PREVIOUS_LINE] * self._line_count))
        self._line_count = 0


class RenderLoop:
    """Fixed-period asyncio task calling `on_tick` until stopped."""

    def __init__(self, on_tick: Callable[[], None], period: Callable[[], float]):
        self._on_tick = on_tick
        self._period = period
        self._task: asyncio.Task[None] | None = None
        self._cancelled: set[asyncio.Task[None]] = set()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start the loop on the running event loop. Returns False when there is none."""
        if self.is_running:
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, rendering is disabled")
            return False
        self._task = loop.create_task(self._loop())
        logger.debug("Render loop started")
        return True

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
            self._cancelled.add(task)
            task.add_done_callback(self._cancelled.discard)
        logger.debug("Render loop stopped")

    async def aclose(self) -> None:
        self.stop()
        pending = list(self._cancelled)
        self._cancelled.clear()
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _loop(self) -> None:
        current = asyncio.current_task()
        while self._task is current:
            try:
                self._on_tick()
            except Exception:
                logger.exception("Render pass failed:")
            await asyncio.sleep(self._period())
