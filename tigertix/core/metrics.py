"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

booking_attempts = Counter(
    "tigertix_booking_attempts_total",
    "Booking confirmation attempts",
    ["outcome"],  # confirmed, InvalidArgument, NotFound, InsufficientInventory, StorageFailure
)

booking_latency = Histogram(
    "tigertix_booking_latency_seconds",
    "Time spent inside confirm_booking, lock wait included",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

tickets_sold = Counter(
    "tigertix_tickets_sold_total",
    "Tickets sold through confirmed bookings",
)

cache_operations = Counter(
    "tigertix_cache_operations_total",
    "Event listing cache operations",
    ["operation", "result"],  # get/set/invalidate, hit/miss/ok/error
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_booking_attempt(outcome: str, quantity: int = 0) -> None:
    booking_attempts.labels(outcome=outcome).inc()
    if outcome == "confirmed" and quantity > 0:
        tickets_sold.inc(quantity)


def record_cache_operation(operation: str, result: str) -> None:
    cache_operations.labels(operation=operation, result=result).inc()
