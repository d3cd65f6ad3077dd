"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - events_received_total - events by subject and action
    - event_outcomes_total - terminal outcomes by status and reason
    - notifications_dispatched_total - provider requests by channel and result
    - completion_reports_total - contact-moment registrations by result
    - cache_lookups_total - CaseType cache hits, misses and joined loads
    - upstream_request_duration_seconds - upstream latency by service and outcome
    - application_info - version, service and environment labels
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from events_handler.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose the service's metrics in Prometheus text format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
