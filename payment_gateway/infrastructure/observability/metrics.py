"""Prometheus metrics for payment outcomes, debit volume and store health"""

from decimal import Decimal
from typing import Optional

from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "payment_requests_total",
    "Single payment requests by outcome",
    ["outcome", "error_code"],  # success | failed; ER002, ER025, ER12, 401, ...
)

payment_amount_histogram = Histogram(
    "payment_amount",
    "Amount of successful debits",
    buckets=[1_000, 10_000, 50_000, 100_000, 200_000, 500_000, 1_000_000, 10_000_000],
)

# Store metrics
store_write_failures_counter = Counter(
    "store_write_failures_total",
    "Failed durable store writes",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(error_code: Optional[str], amount: Optional[Decimal] = None) -> None:
    """Record a payment outcome; amount is observed only for successful debits"""
    if error_code is None:
        payment_counter.labels(outcome="success", error_code="none").inc()
        if amount is not None:
            payment_amount_histogram.observe(float(amount))
    else:
        payment_counter.labels(outcome="failed", error_code=error_code).inc()
