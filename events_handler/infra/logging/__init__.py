"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (event reference, scenario, channel)
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from events_handler.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(event_reference="https://openzaak.example/zaken/1")
    logger.info("Processing event")  # Automatically includes event_reference
"""

from events_handler.infra.logging.config import configure_logging, setup_logging, shutdown
from events_handler.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from events_handler.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
