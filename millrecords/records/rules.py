"""Mini README: Pure computation and validation rules for transactions.

Structure:
    * DEFAULT_RATES - per-kilogram charge for each crop.
    * Totals - computed total amount and balance.
    * compute_totals - derive totals after range checking the inputs.
    * default_rate_for - crop to default rate lookup.
    * validate_transaction_input - collect every violation of a draft.
    * apply_full_payment - fill the amount paid with the computed total.

Nothing in this module performs I/O. Validation never short-circuits: every
violated constraint is reported, ordered by field declaration, so forms can
highlight all problems at once.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Dict, List, Optional

from ..logging_utils import get_logger
from .errors import FieldViolation, UnknownCropError, ValidationError
from .models import CropType, TransactionData, TransactionDraft, derive_balance, derive_total

LOGGER = get_logger(__name__)

MIN_QUANTITY_KG = 0.1
MIN_CHARGE_PER_KG = 0.01
MIN_AMOUNT_PAID = 0.0

DEFAULT_RATES: Dict[CropType, float] = {
    CropType.MILLET: 300.0,
    CropType.MAIZE: 400.0,
    CropType.CASSAVA: 150.0,
}

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_FIELD_ORDER = (
    "customer_name",
    "contact",
    "date",
    "crop_type",
    "quantity",
    "charge_per_kg",
    "amount_paid",
)


@dataclass(frozen=True, slots=True)
class Totals:
    """Derived monetary values for a transaction."""

    total_amount: float
    balance: float


def default_rate_for(crop_type: object) -> float:
    """Return the default per-kilogram charge for ``crop_type``."""

    return DEFAULT_RATES[CropType.from_str(crop_type)]


def _range_violations(
    quantity: Optional[float], charge_per_kg: Optional[float], amount_paid: Optional[float]
) -> List[FieldViolation]:
    # NaN and infinities fail every range check.
    violations: List[FieldViolation] = []
    if quantity is not None and not (math.isfinite(quantity) and quantity >= MIN_QUANTITY_KG):
        violations.append(FieldViolation("quantity", "Quantity must be at least 0.1 kg"))
    if charge_per_kg is not None and not (
        math.isfinite(charge_per_kg) and charge_per_kg >= MIN_CHARGE_PER_KG
    ):
        violations.append(FieldViolation("charge_per_kg", "Charge per kg must be at least 0.01"))
    if amount_paid is not None and not (
        math.isfinite(amount_paid) and amount_paid >= MIN_AMOUNT_PAID
    ):
        violations.append(FieldViolation("amount_paid", "Amount paid cannot be negative"))
    return violations


def compute_totals(quantity: float, charge_per_kg: float, amount_paid: float) -> Totals:
    """Compute ``quantity * charge_per_kg`` and the clamped outstanding balance."""

    violations = _range_violations(quantity, charge_per_kg, amount_paid)
    if violations:
        raise ValidationError(violations)
    total_amount = derive_total(quantity, charge_per_kg)
    return Totals(total_amount=total_amount, balance=derive_balance(total_amount, amount_paid))


def _coerce_number(value: object) -> Optional[float]:
    """Parse numeric form input, returning ``None`` when it is not a number."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_date(value: object) -> Optional[str]:
    """Return the ISO ``YYYY-MM-DD`` string for ``value`` or ``None`` if invalid."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not _ISO_DATE.match(text):
        return None
    try:
        date.fromisoformat(text)
    except ValueError:
        return None
    return text


def _is_blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def validate_transaction_input(draft: TransactionDraft) -> TransactionData:
    """Validate a draft and return the transaction fields with totals derivable.

    Raises ``ValidationError`` listing every violated constraint in field
    order: customer name, contact, date, crop type, quantity, charge per kg
    and amount paid. A missing charge per kg takes the crop default; an
    explicitly supplied charge is kept as long as it meets the minimum.
    """

    violations: List[FieldViolation] = []

    if _is_blank(draft.customer_name):
        violations.append(FieldViolation("customer_name", "Customer name is required"))
    if _is_blank(draft.contact):
        violations.append(FieldViolation("contact", "Contact is required"))

    iso_date: Optional[str] = None
    if _is_blank(draft.date):
        violations.append(FieldViolation("date", "Date is required"))
    else:
        iso_date = _coerce_date(draft.date)
        if iso_date is None:
            violations.append(FieldViolation("date", "Date must use the YYYY-MM-DD format"))

    crop: Optional[CropType] = None
    if _is_blank(draft.crop_type):
        violations.append(FieldViolation("crop_type", "Please select a crop type"))
    else:
        try:
            crop = CropType.from_str(draft.crop_type)
        except UnknownCropError:
            violations.append(
                FieldViolation("crop_type", "Crop type must be one of Millet, Maize or Cassava")
            )

    quantity = _coerce_number(draft.quantity)
    if quantity is None:
        violations.append(FieldViolation("quantity", "Quantity must be a number"))

    charge_per_kg: Optional[float]
    if _is_blank(draft.charge_per_kg):
        charge_per_kg = default_rate_for(crop) if crop is not None else None
    else:
        charge_per_kg = _coerce_number(draft.charge_per_kg)
        if charge_per_kg is None:
            violations.append(FieldViolation("charge_per_kg", "Charge per kg must be a number"))

    amount_paid = _coerce_number(draft.amount_paid) if not _is_blank(draft.amount_paid) else 0.0
    if amount_paid is None:
        violations.append(FieldViolation("amount_paid", "Amount paid must be a number"))

    violations.extend(_range_violations(quantity, charge_per_kg, amount_paid))
    violations.sort(key=lambda violation: _FIELD_ORDER.index(violation.field))

    if violations:
        LOGGER.debug("Rejected transaction draft: %s", [v.field for v in violations])
        raise ValidationError(violations)

    return TransactionData(
        customer_name=str(draft.customer_name),
        contact=str(draft.contact),
        date=iso_date,
        crop_type=crop,
        quantity=quantity,
        charge_per_kg=charge_per_kg,
        amount_paid=amount_paid,
    )


def apply_full_payment(draft: TransactionDraft) -> TransactionDraft:
    """Return a copy of ``draft`` whose amount paid equals the computed total."""

    quantity = _coerce_number(draft.quantity) or 0.0
    charge = _coerce_number(draft.charge_per_kg)
    if charge is None and not _is_blank(draft.crop_type):
        charge = default_rate_for(draft.crop_type)
    return replace(draft, charge_per_kg=charge, amount_paid=derive_total(quantity, charge or 0.0))
