"""Mini README: Filtering and aggregation over the in-memory working set.

Structure:
    * FilterCriteria - optional search, crop and date-range constraints.
    * filter_transactions - order-preserving projection matching all criteria.
    * sum_total_amount - total billed across a (filtered) list.
    * aggregate_stats - dashboard cards, crop split and seven-day revenue.

Every function is pure. They take whatever sequence the working set
delivers, never re-sort it, and can be re-run on every keystroke of the
records search box.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from .models import CropType, DailyRevenue, DashboardStats, Transaction

ALL_CROPS = "all"
REVENUE_WINDOW_DAYS = 7


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Constraints applied by the records search panel.

    Empty strings behave like omitted values, matching the blank inputs of
    the search form. ``crop_type`` accepts the sentinel ``"all"``.
    """

    search_text: Optional[str] = None
    crop_type: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def is_empty(self) -> bool:
        return not (
            self.search_text
            or (self.crop_type and self.crop_type != ALL_CROPS)
            or self.date_from
            or self.date_to
        )


def _matches_search(transaction: Transaction, search_text: str) -> bool:
    # Names match case-insensitively, contacts literally.
    return (
        search_text.lower() in transaction.customer_name.lower()
        or search_text in transaction.contact
    )


def _matches_crop(transaction: Transaction, crop_type: str) -> bool:
    crop_value = crop_type.value if isinstance(crop_type, CropType) else crop_type
    return transaction.crop_type.value == crop_value


def filter_transactions(
    records: Iterable[Transaction], criteria: Optional[FilterCriteria] = None
) -> List[Transaction]:
    """Return the records matching every supplied criterion, in input order."""

    if criteria is None or criteria.is_empty():
        return list(records)

    matched: List[Transaction] = []
    for transaction in records:
        if criteria.search_text and not _matches_search(transaction, criteria.search_text):
            continue
        if (
            criteria.crop_type
            and criteria.crop_type != ALL_CROPS
            and not _matches_crop(transaction, criteria.crop_type)
        ):
            continue
        # Fixed-width ISO dates compare correctly as strings.
        if criteria.date_from and transaction.date < criteria.date_from:
            continue
        if criteria.date_to and transaction.date > criteria.date_to:
            continue
        matched.append(transaction)
    return matched


def sum_total_amount(records: Iterable[Transaction]) -> float:
    """Total billed amount for the records, as shown under the records table."""

    return sum((transaction.total_amount for transaction in records), 0.0)


def last_days(today: date, count: int = REVENUE_WINDOW_DAYS) -> List[date]:
    """Return ``count`` consecutive days ending with ``today``, oldest first."""

    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def aggregate_stats(
    records: Sequence[Transaction], *, today: Optional[date] = None
) -> DashboardStats:
    """Aggregate the dashboard figures for ``records``.

    Revenue counts cash received (``amount_paid``), not the billed total.
    Customers are distinct by exact name, so spelling variants count twice.
    Crops without records are left out of ``quantity_by_crop``.
    """

    today = today or date.today()

    total_revenue = 0.0
    total_quantity = 0.0
    total_balance = 0.0
    customers = set()
    quantity_by_crop: Dict[str, float] = {}
    revenue_by_day: Dict[str, float] = {}

    for transaction in records:
        total_revenue += transaction.amount_paid
        total_quantity += transaction.quantity
        total_balance += transaction.balance
        customers.add(transaction.customer_name)
        crop = transaction.crop_type.value
        quantity_by_crop[crop] = quantity_by_crop.get(crop, 0.0) + transaction.quantity
        revenue_by_day[transaction.date] = (
            revenue_by_day.get(transaction.date, 0.0) + transaction.amount_paid
        )

    daily_revenue = [
        DailyRevenue.for_day(day, revenue_by_day.get(day.isoformat(), 0.0))
        for day in last_days(today)
    ]

    return DashboardStats(
        transaction_count=len(records),
        total_revenue=total_revenue,
        total_quantity_kg=total_quantity,
        total_outstanding_balance=total_balance,
        unique_customer_count=len(customers),
        quantity_by_crop=quantity_by_crop,
        daily_revenue_last_7_days=daily_revenue,
    )
