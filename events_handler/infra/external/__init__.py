"""External service clients.

All upstream clients inherit from BaseHTTPClient and provide typed interfaces.
"""

from events_handler.infra.external.base_client import BaseHTTPClient, bearer_headers

__all__ = [
    "BaseHTTPClient",
    "bearer_headers",
]
