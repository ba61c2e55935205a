"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Booking metrics
booking_attempts = Counter(
    'seat_booking_attempts_total',
    'Total seat booking attempts',
    ['status']  # success, conflict, error, precondition
)

booking_latency = Histogram(
    'seat_booking_latency_seconds',
    'Latency of a single remote book call',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Cancellation metrics
cancellation_attempts = Counter(
    'seat_cancellation_attempts_total',
    'Total ticket cancellation attempts',
    ['status']  # success, rejected, error, precondition
)

# Layout / reconciliation metrics
layout_loads = Counter(
    'layout_loads_total',
    'Layout snapshot loads',
    ['source']  # live, fallback, mock
)

owned_seats_pruned = Counter(
    'owned_seats_pruned_total',
    'Owned seats dropped by reconciliation because the snapshot no longer shows them booked'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, error, precondition"""
    booking_attempts.labels(status=status).inc()


def record_cancellation_attempt(status: str):
    """Record cancellation attempt. Status: success, rejected, error, precondition"""
    cancellation_attempts.labels(status=status).inc()


def record_layout_load(source: str):
    layout_loads.labels(source=source).inc()


def record_pruned_seats(count: int):
    if count:
        owned_seats_pruned.inc(count)
