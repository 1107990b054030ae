"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Reservation metrics
reservation_attempts = Counter(
    'reservation_attempts_total',
    'Total reservation create attempts',
    ['outcome']  # success, conflict, not_found, invalid
)

reservation_cancellations = Counter(
    'reservation_cancellations_total',
    'Reservations cancelled by users or admins'
)

# Sweep metrics
sweep_runs = Counter(
    'reservation_sweep_runs_total',
    'Expiry sweep invocations',
    ['trigger']  # read, cron, interval
)

sweep_completed = Counter(
    'reservation_sweep_completed_total',
    'Reservations moved to COMPLETED by the expiry sweep'
)

# HTTP metrics
request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
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


def record_reservation_attempt(outcome: str):
    """Record reservation attempt. Outcome: success, conflict, not_found, invalid"""
    reservation_attempts.labels(outcome=outcome).inc()


def record_sweep(trigger: str, completed: int):
    """Record one sweep run and the rows it completed."""
    sweep_runs.labels(trigger=trigger).inc()
    if completed:
        sweep_completed.inc(completed)
