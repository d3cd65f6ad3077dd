"""Context management for structured logging.

Provides automatic context injection into log records using contextvars.
Every asyncio task runs with its own copy of the context, so the event
reference bound by one in-flight event never shows up in another event's logs.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for the current async task.

    Args:
        **kwargs: Key-value pairs to add to logging context,
            e.g. event_reference, scenario, channel.

    Example:
        ```python
        set_log_context(event_reference="https://openzaak.example/zaken/1")
        logger.info("Processing event")  # Includes event_reference
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current async task."""
    _log_context.set({})


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Temporarily extend the logging context, restoring it on exit.

    Example:
        ```python
        with log_context(channel="email"):
            logger.info("Dispatching")  # Includes channel
        logger.info("Done")  # channel no longer present
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    token = _log_context.set(current)
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that injects the contextvars log context into LogRecords.

    Attached to the root QueueHandler so every propagated record is enriched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record.

        Args:
            record: The log record to enhance with context.

        Returns:
            True (always allow the record to be logged).
        """
        for key, value in _log_context.get().items():
            # Don't overwrite existing attributes
            if not hasattr(record, key):
                setattr(record, key, value)

        return True

