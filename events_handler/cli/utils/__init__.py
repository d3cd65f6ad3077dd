"""CLI utilities for running async operations and formatting output."""

from events_handler.cli.utils.async_runner import coro
from events_handler.cli.utils.formatters import error, info, section, success, warning

__all__ = [
    "coro",
    "error",
    "info",
    "section",
    "success",
    "warning",
]
