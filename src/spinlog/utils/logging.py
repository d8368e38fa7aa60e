from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from loguru import logger

# The render loop owns the terminal region, so library logs stay silent until a sink is chosen.
logger.disable("spinlog")

DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"


def enable_logging(
    sink: str | Path | TextIO = sys.stderr,
    *,
    level: str = "DEBUG",
) -> int:
    """
    Route spinlog logs to a sink.

    Args:
        sink: A file path or a text stream. Avoid stdout while tasks are rendering.
        level: Minimum level to record.

    Returns:
        The loguru handler id, usable with ``logger.remove``.
    """
    logger.enable("spinlog")
    return logger.add(
        sink,
        level=level,
        format=DEFAULT_FORMAT,
        filter="spinlog",
    )


def disable_logging() -> None:
    logger.disable("spinlog")


__all__ = ["logger", "enable_logging", "disable_logging"]
