"""Prometheus metrics for the account ledger service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- ledger_transaction_total: Transactions by type and outcome
- ledger_reversal_total: Reversals by outcome
- ledger_bulk_rows_total: Bulk upload rows by outcome

Technical Metrics (for Engineering/SRE):
- ledger_transaction_latency_seconds: Apply latency
- ledger_partial_apply_failures_total: Writes needing reconciliation
- ledger_store_failures_total: Datastore failures by operation
- ledger_cache_requests_total: Cache lookups by result
- ledger_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

transaction_total = Counter(
    "ledger_transaction_total",
    "Total number of transaction apply attempts",
    ["type", "outcome"],  # outcome: applied or a lower-cased error code
)

reversal_total = Counter(
    "ledger_reversal_total",
    "Total number of reversal attempts",
    ["outcome"],
)

bulk_rows_total = Counter(
    "ledger_bulk_rows_total",
    "Bulk upload rows by outcome",
    ["outcome"],  # inserted, skipped, failed
)

bulk_upload_total = Counter(
    "ledger_bulk_upload_total",
    "Total number of processed bulk uploads",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

transaction_latency = Histogram(
    "ledger_transaction_latency_seconds",
    "Transaction apply latency in seconds",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

partial_apply_failures = Counter(
    "ledger_partial_apply_failures_total",
    "Writes whose outcome is unknown and need manual reconciliation",
)

store_failures = Counter(
    "ledger_store_failures_total",
    "Total number of datastore failures",
    ["operation"],
)

cache_requests = Counter(
    "ledger_cache_requests_total",
    "Cache lookups by key type and result",
    ["key_type", "result"],  # hit, miss, error
)

cache_invalidations = Counter(
    "ledger_cache_invalidations_total",
    "Cache keys invalidated after writes",
    ["key_type"],
)

http_requests_total = Counter(
    "ledger_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "ledger_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_transaction(txn_type: str, outcome: str) -> None:
    """Record a transaction apply attempt."""
    transaction_total.labels(type=txn_type, outcome=outcome.lower()).inc()


def record_reversal(outcome: str) -> None:
    """Record a reversal attempt."""
    reversal_total.labels(outcome=outcome.lower()).inc()


def record_bulk_upload(inserted: int, skipped: int, failed: int) -> None:
    """Record the row outcomes of a processed bulk upload."""
    bulk_upload_total.inc()
    bulk_rows_total.labels(outcome="inserted").inc(inserted)
    bulk_rows_total.labels(outcome="skipped").inc(skipped)
    bulk_rows_total.labels(outcome="failed").inc(failed)


def record_partial_apply_failure() -> None:
    """Record a write that needs reconciliation."""
    partial_apply_failures.inc()


def record_store_failure(operation: str) -> None:
    """Record a datastore failure."""
    store_failures.labels(operation=operation).inc()


def record_cache_lookup(key: str, result: str) -> None:
    """Record a cache lookup; the key type is the prefix before ':'."""
    cache_requests.labels(key_type=_key_type(key), result=result).inc()


def record_cache_invalidation(key: str) -> None:
    """Record a cache key invalidation."""
    cache_invalidations.labels(key_type=_key_type(key)).inc()


def _key_type(key: str) -> str:
    return key.split(":", 1)[0]


@contextmanager
def track_transaction_latency() -> Generator[None, None, None]:
    """Context manager to track transaction apply latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        transaction_latency.observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
