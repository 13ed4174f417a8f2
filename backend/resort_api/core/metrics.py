"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'resort_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, rejected, error
)

booking_latency = Histogram(
    'resort_booking_latency_seconds',
    'Booking transaction latency',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Payment metrics
payment_initiations = Counter(
    'resort_payment_initiations_total',
    'PayU payment payloads requested',
    ['result']  # signed, invalid, misconfigured
)

# Cache metrics
cache_operations = Counter(
    'resort_cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss/error
)

# Rate limiting
rate_limited_requests = Counter(
    'resort_rate_limited_requests_total',
    'Requests rejected by the rate limiter'
)

redis_errors = Counter(
    'resort_redis_errors_total',
    'Redis command failures (cache and rate limiter)'
)


def metrics_endpoint() -> Response:
    """Render the default registry in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, rejected, error"""
    booking_attempts.labels(status=status).inc()


def record_payment_initiation(result: str):
    payment_initiations.labels(result=result).inc()


def record_cache_operation(operation: str, result: str):
    cache_operations.labels(operation=operation, result=result).inc()
