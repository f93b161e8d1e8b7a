"""Prometheus metrics for payment activity, store health and request latency"""

from prometheus_client import Counter, Histogram, Gauge

# Payment metrics
payment_toggle_counter = Counter(
    "wifi_billing_payment_toggle_total",
    "Payment status changes",
    ["action"],  # payment_marked | payment_unmarked
)

duplicate_payment_counter = Counter(
    "wifi_billing_duplicate_payments_total",
    "Extra payment rows found for an already-paid customer period",
)

paid_percentage_gauge = Gauge(
    "wifi_billing_paid_percentage",
    "Paid percentage of the last reconciled view, per billing-cycle bucket",
    ["payment_day"],
)

# Store metrics
store_failures_counter = Counter(
    "wifi_billing_store_failures_total",
    "Failed data store operations",
    ["operation"],
)

# Reload webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Reload webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_toggle(action: str) -> None:
    payment_toggle_counter.labels(action=action).inc()


def record_bucket_summary(payment_day: int, percentage: int) -> None:
    paid_percentage_gauge.labels(payment_day=str(payment_day)).set(percentage)
