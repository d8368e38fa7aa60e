"""Animated, hierarchical, self-pruning task logs for the terminal."""

from __future__ import annotations

from importlib import metadata

from spinlog.animations import Animation, AnimationType, create_animation
from spinlog.config import Config, DisplayConfig, LogManagerConfig, load_config
from spinlog.loggers import SubTaskBuilder, TaskLogger
from spinlog.manager import TaskLogManager
from spinlog.models import TaskEntry, TaskStatus
from spinlog.utils.loading import TaskLogGroup, with_loading

try:  # pragma: no cover - fallback when package metadata is unavailable
    __version__ = metadata.version("spinlog")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "Animation",
    "AnimationType",
    "Config",
    "DisplayConfig",
    "LogManagerConfig",
    "SubTaskBuilder",
    "TaskEntry",
    "TaskLogGroup",
    "TaskLogManager",
    "TaskLogger",
    "TaskStatus",
    "__version__",
    "create_animation",
    "load_config",
    "with_loading",
]
