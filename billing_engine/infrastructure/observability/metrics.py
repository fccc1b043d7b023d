"""Prometheus metrics for invoice calculations, schedule generation, and request latency"""

from prometheus_client import Counter, Histogram

# Pricing metrics
invoice_calculation_counter = Counter(
    "billing_invoice_calculations_total",
    "Total invoice calculations performed",
    ["currency"],
)

# Schedule metrics
schedule_counter = Counter(
    "billing_schedules_generated_total",
    "Schedules generated",
    ["kind"],  # payment | recurring
)

schedule_entries_counter = Counter(
    "billing_schedule_entries_total",
    "Schedule entries materialized",
    ["kind"],
)

idempotent_replay_counter = Counter(
    "billing_idempotent_replays_total",
    "Schedule requests answered from the idempotency store",
    ["kind"],
)

# Errors
billing_error_counter = Counter(
    "billing_errors_total",
    "Rejected billing requests by error code",
    ["code"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_invoice(currency: str | None) -> None:
    """Record a completed invoice calculation"""
    invoice_calculation_counter.labels(currency=currency or "none").inc()


def record_schedule(kind: str, entry_count: int, replayed: bool = False) -> None:
    """Record a generated (or replayed) schedule and its size"""
    if replayed:
        idempotent_replay_counter.labels(kind=kind).inc()
        return
    schedule_counter.labels(kind=kind).inc()
    schedule_entries_counter.labels(kind=kind).inc(entry_count)


def record_billing_error(code: str) -> None:
    billing_error_counter.labels(code=code).inc()
