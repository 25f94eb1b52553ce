"""Prometheus metrics for sales volume, credit collection and document persistence"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Sales metrics
sales_counter = Counter(
    "pos_sales_total",
    "Total sales processed",
    ["payment_method"],  # cash | card | bank_transfer | cheque | credit
)

sale_amount_histogram = Histogram(
    "pos_sale_amount",
    "Grand total of processed sales",
    buckets=[100, 500, 1_000, 5_000, 10_000, 50_000, 100_000],
)

# Credit metrics
installment_counter = Counter(
    "pos_installments_total",
    "Installments applied against credit bills",
    ["method"],
)

cheque_status_counter = Counter(
    "pos_cheque_status_changes_total",
    "Cheque status updates",
    ["status"],  # Pending | Claimed | Released | Bounced
)

rejected_operations_counter = Counter(
    "pos_rejected_operations_total",
    "Operations refused by validation or ledger rules",
    ["operation", "reason"],
)

# Storage metrics
persistence_failure_counter = Counter(
    "pos_persistence_failures_total",
    "Failed document writes",
)

document_save_histogram = Histogram(
    "pos_document_save_seconds",
    "Time spent writing the ledger document",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0],
)


def record_sale(payment_method: str, grand_total: Decimal) -> None:
    """Record sale metrics for volume by payment method and ticket size"""
    sales_counter.labels(payment_method=payment_method).inc()
    sale_amount_histogram.observe(float(grand_total))


def record_rejection(operation: str, reason: str) -> None:
    rejected_operations_counter.labels(operation=operation, reason=reason).inc()
