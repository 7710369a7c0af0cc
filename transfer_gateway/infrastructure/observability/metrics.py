"""Prometheus metrics for transfer outcomes, contention and reconciliation"""

from prometheus_client import Counter, Histogram

from transfer_gateway.domain.exceptions import TransferError

# Transfer metrics
transfer_counter = Counter(
    "ledger_transfer_total",
    "Total transfers attempted",
    ["outcome"],  # completed | invalid_amount | unknown_category | account_not_found | ...
)

transfer_duration_histogram = Histogram(
    "ledger_transfer_duration_seconds",
    "Time spent inside the transfer engine",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

version_conflict_counter = Counter(
    "ledger_version_conflicts_total",
    "Optimistic version conflicts seen while saving balances",
)

# Committed balance changes with no transaction record
transfer_unrecorded_counter = Counter(
    "ledger_transfer_unrecorded_total",
    "Transfers whose balances committed but whose record append failed",
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Reconciliation webhook response time",
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

_OUTCOMES = {
    "InvalidAmountError": "invalid_amount",
    "UnknownCategoryError": "unknown_category",
    "AccountNotFoundError": "account_not_found",
    "InsufficientFundsError": "insufficient_funds",
    "ConcurrentModificationError": "concurrent_modification",
    "TransactionNotRecordedError": "unrecorded",
    "StorageFailureError": "storage_failure",
}


def record_transfer(error: TransferError | None = None) -> None:
    """Record a transfer outcome; None means the transfer completed"""
    if error is None:
        outcome = "completed"
    else:
        outcome = _OUTCOMES.get(type(error).__name__, "failed")
    transfer_counter.labels(outcome=outcome).inc()

    if outcome == "unrecorded":
        transfer_unrecorded_counter.inc()


def observe_transfer_step(step: str, **fields) -> None:
    """Engine trace hook that feeds contention metrics"""
    if step == "version_conflict":
        version_conflict_counter.inc()
