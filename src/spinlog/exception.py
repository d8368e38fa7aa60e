from __future__ import annotations


class SpinlogException(Exception):
    """Base exception class for spinlog."""

    pass


class ConfigError(SpinlogException):
    """Configuration error."""

    pass
