"""In-process caching."""
from __future__ import annotations

from events_handler.infra.cache.memory import SingleFlightCache

__all__ = ["SingleFlightCache"]
