"""Prometheus metrics for monitoring scans, flagged accounts, and upstream health"""

from prometheus_client import Counter, Histogram, Gauge

from closure_watch.domain.models import ScanResult

# Scan metrics
scan_counter = Counter(
    "closure_watch_scan_total",
    "Total account scans run",
    ["outcome"],  # success | failure
)

flagged_accounts_gauge = Gauge(
    "closure_watch_flagged_accounts",
    "Accounts flagged in the most recent scan",
)

candidate_accounts_gauge = Gauge(
    "closure_watch_negative_accounts",
    "Negative-balance accounts evaluated in the most recent scan",
)

account_failure_counter = Counter(
    "closure_watch_account_failures_total",
    "Candidate accounts dropped due to per-account errors",
)

# Ledger API metrics
ledger_request_failures_counter = Counter(
    "ledger_request_failures_total",
    "Failed ledger API calls",
    ["operation"],
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Alert webhook response time",
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


def record_scan(result: ScanResult) -> None:
    """Record metrics for a completed scan"""
    scan_counter.labels(outcome="success").inc()
    flagged_accounts_gauge.set(result.count)
    candidate_accounts_gauge.set(result.candidates_evaluated)
    account_failure_counter.inc(len(result.failed_account_ids))


def record_scan_failure() -> None:
    scan_counter.labels(outcome="failure").inc()
