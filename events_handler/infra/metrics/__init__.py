"""Metrics infrastructure."""

from events_handler.infra.metrics.prometheus import REGISTRY

__all__ = ["REGISTRY"]
