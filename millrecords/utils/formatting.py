"""Mini README: Fixed number formatting shared by exports, receipts and pages.

Amounts are shown with thousands separators and two decimals, the way the
mill's staff read them on receipts. Raw numbers written to CSV keep their
full precision but drop a meaningless trailing ``.0``.
"""

from __future__ import annotations


def format_number(value: float) -> str:
    """Render ``value`` compactly: ``10.0`` becomes ``10``, ``2.5`` stays ``2.5``."""

    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def format_amount(value: float) -> str:
    """Render a monetary amount as ``1,234.50``."""

    return f"{float(value):,.2f}"


def format_currency(value: float, currency: str = "UGX") -> str:
    """Prefix a formatted amount with the currency label."""

    return f"{currency} {format_amount(value)}"
