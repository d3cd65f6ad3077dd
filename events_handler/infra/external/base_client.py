"""Base HTTP client for upstream registries.

Provides a base class for upstream service clients with:
- Connection pooling
- Bounded per-request timeouts
- Request/response logging and latency metrics
- Mapping of transport and HTTP failures onto the pipeline error taxonomy

No retries happen here. A retried GET is harmless, but retry policy belongs
to whoever delivered the event, so every failure surfaces immediately.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from events_handler.core.exceptions import (
    DataNotFound,
    MalformedResponse,
    UpstreamUnavailable,
)
from events_handler.infra.metrics.prometheus import upstream_request_duration_seconds

logger = logging.getLogger(__name__)


class BaseHTTPClient:
    """Base HTTP client for upstream API integrations.

    Example:
        ```python
        class CaseRegistryClient(BaseHTTPClient):
            def __init__(self, base_url: str):
                super().__init__(service="openzaak", base_url=base_url, timeout=10.0)

            async def get_case(self, case_ref: str) -> dict:
                return await self.get_json(case_ref)
        ```
    """

    def __init__(
        self,
        service: str,
        base_url: str = "",
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            service: Upstream service name used in logs, metrics and errors.
            base_url: Base URL for relative paths; absolute URLs are used as-is.
            timeout: Request timeout in seconds.
            headers: Default headers to include in all requests.
            transport: Optional transport (tests use httpx.MockTransport).
        """
        self.service = service
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}

        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json", **self.default_headers},
            limits=httpx.Limits(
                max_keepalive_connections=20,
                max_connections=100,
            ),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self.client.aclose()

    async def __aenter__(self) -> BaseHTTPClient:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close client."""
        await self.close()

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET a JSON document.

        Raises:
            UpstreamUnavailable: Timeout, network error, 5xx, 429 or refused credentials.
            DataNotFound: 404/410.
            MalformedResponse: Body is not JSON.
        """
        return await self._request_json("GET", url, params=params)

    async def post_json(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            Same as get_json().
        """
        return await self._request_json("POST", url, json=json, headers=headers)

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self.send(method, url, **kwargs)
        self.raise_for_status(response)
        return self.decode_json(response)

    def decode_json(self, response: httpx.Response) -> Any:
        """Decode a JSON body, mapping garbage onto MalformedResponse."""
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(
                f"{self.service} returned a non-JSON body",
                instance=str(response.request.url),
                extra={"service": self.service, "status_code": response.status_code},
            ) from e

    async def send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, translating transport failures into UpstreamUnavailable."""
        start = time.perf_counter()
        outcome = "error"
        try:
            # httpx bounds each phase; this bounds the whole exchange
            async with asyncio.timeout(self.timeout):
                response = await self.client.request(method, url, **kwargs)
            outcome = str(response.status_code)
        except (httpx.TimeoutException, TimeoutError) as e:
            outcome = "timeout"
            logger.warning(
                f"{method} {url} timed out",
                extra={"service": self.service, "timeout_seconds": self.timeout},
            )
            raise UpstreamUnavailable(
                f"{self.service} did not answer within {self.timeout}s",
                instance=url,
                extra={"service": self.service},
            ) from e
        except httpx.TransportError as e:
            logger.warning(
                f"{method} {url} failed: {e}",
                extra={"service": self.service, "error": str(e)},
            )
            raise UpstreamUnavailable(
                f"{self.service} is unreachable: {e}",
                instance=url,
                extra={"service": self.service},
            ) from e
        finally:
            upstream_request_duration_seconds.labels(
                service=self.service, outcome=outcome
            ).observe(time.perf_counter() - start)

        logger.debug(
            f"{method} response from {url}",
            extra={
                "service": self.service,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return response

    def raise_for_status(self, response: httpx.Response) -> None:
        """Map a non-2xx response onto the error taxonomy."""
        if response.is_success:
            return

        status_code = response.status_code
        url = str(response.request.url)
        extra = {
            "service": self.service,
            "status_code": status_code,
            "body": response.text[:500],
        }

        if status_code in (404, 410):
            raise DataNotFound(f"{self.service} has no resource at {url}", instance=url, extra=extra)
        if status_code >= 500 or status_code == 429:
            raise UpstreamUnavailable(
                f"{self.service} answered HTTP {status_code}", instance=url, extra=extra
            )
        if status_code in (401, 403):
            raise UpstreamUnavailable(
                f"{self.service} refused the configured credentials (HTTP {status_code})",
                instance=url,
                extra=extra,
            )
        raise MalformedResponse(
            f"{self.service} rejected the request with HTTP {status_code}",
            instance=url,
            extra=extra,
        )


def bearer_headers(token: str | None) -> dict[str, str]:
    """Authorization header for token-protected registries (empty when no token)."""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}
