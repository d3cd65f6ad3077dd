"""Prometheus metrics for the notification pipeline."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry keeps the exposition limited to this service's metrics
REGISTRY = CollectorRegistry()

# Covers upstream latencies from 10ms to 30s
UPSTREAM_LATENCY_BUCKETS = (
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)

application_info = Gauge(
    "application_info",
    "Application information",
    ["version", "service", "environment"],
    registry=REGISTRY,
)

# Pipeline metrics
events_received_total = Counter(
    "events_received_total",
    "Webhook events received by the pipeline",
    ["subject", "action"],
    registry=REGISTRY,
)

event_outcomes_total = Counter(
    "event_outcomes_total",
    "Terminal outcomes of processed events",
    ["status", "reason"],
    registry=REGISTRY,
)

notifications_dispatched_total = Counter(
    "notifications_dispatched_total",
    "Delivery attempts made against the notification provider",
    ["channel", "result"],
    registry=REGISTRY,
)

completion_reports_total = Counter(
    "completion_reports_total",
    "Completion reports sent back to the originating system",
    ["result"],
    registry=REGISTRY,
)

# Cache metrics
cache_lookups_total = Counter(
    "cache_lookups_total",
    "In-process cache lookups by result (hit, miss, joined)",
    ["cache", "result"],
    registry=REGISTRY,
)

# Upstream metrics
upstream_request_duration_seconds = Histogram(
    "upstream_request_duration_seconds",
    "Duration of requests to upstream services",
    ["service", "outcome"],
    buckets=UPSTREAM_LATENCY_BUCKETS,
    registry=REGISTRY,
)
