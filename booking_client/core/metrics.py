"""
Metrics instrumentation for the optimistic booking protocol.
Prometheus-compatible; render_metrics() returns the exposition payload.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST

# Operation metrics
booking_operations = Counter(
    'booking_operations_total',
    'Booking state operations by outcome',
    ['operation', 'result']  # refresh/register/cancel, success/duplicate/not_found/failed
)

booking_rollbacks = Counter(
    'booking_rollbacks_total',
    'Optimistic mutations reverted after a failed remote call',
    ['operation']  # register, cancel
)

remote_call_latency = Histogram(
    'booking_remote_call_latency_seconds',
    'Latency of calls to the remote booking service',
    ['operation'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# State metrics
bookings_tracked = Gauge(
    'bookings_tracked',
    'Number of booking records in the local collection'
)


def render_metrics() -> tuple[bytes, str]:
    """
    Prometheus exposition payload and its content type.

    Usage:
        body, content_type = render_metrics()
    """
    return generate_latest(), CONTENT_TYPE_LATEST

# Convenience functions for instrumentation
def record_operation(operation: str, result: str):
    """Record an operation outcome. Result: success, duplicate, not_found, failed"""
    booking_operations.labels(operation=operation, result=result).inc()

def record_rollback(operation: str):
    """Record a reverted optimistic mutation."""
    booking_rollbacks.labels(operation=operation).inc()

def observe_remote_call(operation: str, seconds: float):
    remote_call_latency.labels(operation=operation).observe(seconds)

def set_tracked_bookings(count: int):
    bookings_tracked.set(count)
