"""CLI command modules."""

from events_handler.cli.commands import config, events, server

__all__ = [
    "config",
    "events",
    "server",
]
