"""Mini README: Receipt view model for printed customer receipts.

Structure:
    * Receipt - the values printed on a receipt, already formatted.
    * build_receipt - derive a receipt from a stored transaction.
    * render_receipt_text - fixed-width plain-text layout for terminals.

The HTML receipt page renders the same ``Receipt`` through a Jinja2
template, so both outputs always show identical figures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from ..utils.formatting import format_currency, format_number
from .models import Transaction

RECEIPT_WIDTH = 40


@dataclass(frozen=True, slots=True)
class Receipt:
    business_name: str
    receipt_number: str
    date: str
    customer_name: str
    contact: str
    crop_type: str
    quantity: str
    rate_per_kg: str
    total_amount: str
    amount_paid: str
    balance: str
    settled: bool
    generated_at: str

    def header_lines(self) -> List[Tuple[str, str]]:
        return [
            ("Receipt #", self.receipt_number),
            ("Date", self.date),
            ("Customer", self.customer_name),
            ("Contact", self.contact),
        ]

    def item_lines(self) -> List[Tuple[str, str]]:
        return [
            ("Crop Type", self.crop_type),
            ("Quantity", self.quantity),
            ("Rate per Kg", self.rate_per_kg),
        ]

    def payment_lines(self) -> List[Tuple[str, str]]:
        return [
            ("Total Amount", self.total_amount),
            ("Amount Paid", self.amount_paid),
            ("Balance", self.balance),
        ]


def build_receipt(
    transaction: Transaction,
    *,
    business_name: str,
    currency: str = "UGX",
    generated_at: Optional[datetime] = None,
) -> Receipt:
    """Format the receipt values for ``transaction``."""

    generated_at = generated_at or datetime.now()
    return Receipt(
        business_name=business_name,
        receipt_number=transaction.transaction_id,
        date=transaction.date,
        customer_name=transaction.customer_name,
        contact=transaction.contact,
        crop_type=transaction.crop_type.value,
        quantity=f"{format_number(transaction.quantity)} kg",
        rate_per_kg=format_currency(transaction.charge_per_kg, currency),
        total_amount=format_currency(transaction.total_amount, currency),
        amount_paid=format_currency(transaction.amount_paid, currency),
        balance=format_currency(transaction.balance, currency),
        settled=transaction.balance == 0,
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
    )


def _line(label: str, value: str) -> str:
    left = f"{label}:"
    padding = max(1, RECEIPT_WIDTH - len(left) - len(value))
    return f"{left}{' ' * padding}{value}"


def render_receipt_text(receipt: Receipt) -> str:
    """Lay the receipt out as fixed-width text ending with a newline."""

    separator = "-" * RECEIPT_WIDTH
    lines = [
        receipt.business_name.center(RECEIPT_WIDTH).rstrip(),
        "Transaction Receipt".center(RECEIPT_WIDTH).rstrip(),
        separator,
    ]
    for section in (receipt.header_lines(), receipt.item_lines(), receipt.payment_lines()):
        lines.extend(_line(label, value) for label, value in section)
        lines.append(separator)
    lines.append("Thank you for your business!".center(RECEIPT_WIDTH).rstrip())
    lines.append(f"Generated on {receipt.generated_at}".center(RECEIPT_WIDTH).rstrip())
    return "\n".join(lines) + "\n"
