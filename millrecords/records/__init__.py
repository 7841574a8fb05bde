"""Mini README: Transaction records for the milling business.

This package groups the record model, the pure computation and validation
rules, the filtering and dashboard aggregation helpers, and the working set
that keeps records in sync with storage. Everything except the working set
is free of I/O so it can be reused by the web interface, the CLI and tests.
"""

from .analytics import FilterCriteria, aggregate_stats, filter_transactions, sum_total_amount
from .book import EditingSession, SessionState, TransactionBook
from .errors import (
    FieldViolation,
    MillRecordsError,
    NotFoundError,
    StoreError,
    UnknownCropError,
    ValidationError,
)
from .models import (
    CropType,
    DailyRevenue,
    DashboardStats,
    Transaction,
    TransactionData,
    TransactionDraft,
)
from .receipt import Receipt, build_receipt, render_receipt_text
from .rules import (
    DEFAULT_RATES,
    Totals,
    apply_full_payment,
    compute_totals,
    default_rate_for,
    validate_transaction_input,
)

__all__ = [
    "CropType",
    "DEFAULT_RATES",
    "DailyRevenue",
    "DashboardStats",
    "EditingSession",
    "FieldViolation",
    "FilterCriteria",
    "MillRecordsError",
    "NotFoundError",
    "Receipt",
    "SessionState",
    "StoreError",
    "Totals",
    "Transaction",
    "TransactionBook",
    "TransactionData",
    "TransactionDraft",
    "UnknownCropError",
    "ValidationError",
    "aggregate_stats",
    "apply_full_payment",
    "build_receipt",
    "compute_totals",
    "default_rate_for",
    "filter_transactions",
    "render_receipt_text",
    "sum_total_amount",
]
