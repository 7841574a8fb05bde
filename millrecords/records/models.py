"""Mini README: Data model for milling transactions and dashboard values.

Structure:
    * CropType - enum of the crops handled by the mill.
    * TransactionDraft - raw, unvalidated form input.
    * TransactionData - validated transaction fields without an identifier.
    * Transaction - persisted record carrying the gateway-assigned id.
    * DailyRevenue / DashboardStats - aggregate values for the dashboard.

``total_amount`` and ``balance`` are derived on read from the source fields,
so a record can never disagree with its own quantity, rate and payment.
Serialisers still write the derived values out for readers of the export
and the JSON store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import UnknownCropError


class CropType(str, Enum):
    """Enumerate the crops the mill processes."""

    MILLET = "Millet"
    MAIZE = "Maize"
    CASSAVA = "Cassava"

    @classmethod
    def from_str(cls, value: object) -> "CropType":
        """Coerce a stored or submitted value into a crop type."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError as error:
            raise UnknownCropError(value) from error


def derive_total(quantity: float, charge_per_kg: float) -> float:
    return quantity * charge_per_kg


def derive_balance(total_amount: float, amount_paid: float) -> float:
    # Overpayment is clamped, the excess is not tracked.
    return max(0.0, total_amount - amount_paid)


@dataclass(slots=True)
class TransactionDraft:
    """Unvalidated transaction input as typed into the form."""

    customer_name: str = ""
    contact: str = ""
    date: object = ""
    crop_type: object = None
    quantity: object = None
    charge_per_kg: object = None
    amount_paid: object = 0.0

    @classmethod
    def from_transaction(cls, transaction: "Transaction") -> "TransactionDraft":
        """Start an edit from an existing record."""

        return cls(
            customer_name=transaction.customer_name,
            contact=transaction.contact,
            date=transaction.date,
            crop_type=transaction.crop_type,
            quantity=transaction.quantity,
            charge_per_kg=transaction.charge_per_kg,
            amount_paid=transaction.amount_paid,
        )


@dataclass(frozen=True, slots=True)
class TransactionData:
    """Validated transaction fields, ready to hand to a gateway."""

    customer_name: str
    contact: str
    date: str
    crop_type: CropType
    quantity: float
    charge_per_kg: float
    amount_paid: float

    @property
    def total_amount(self) -> float:
        return derive_total(self.quantity, self.charge_per_kg)

    @property
    def balance(self) -> float:
        return derive_balance(self.total_amount, self.amount_paid)

    def as_dict(self) -> Dict[str, object]:
        """Export the fields with serialisable values."""

        return {
            "customer_name": self.customer_name,
            "contact": self.contact,
            "date": self.date,
            "crop_type": self.crop_type.value,
            "quantity": self.quantity,
            "charge_per_kg": self.charge_per_kg,
            "total_amount": self.total_amount,
            "amount_paid": self.amount_paid,
            "balance": self.balance,
        }


@dataclass(frozen=True, slots=True)
class Transaction:
    """Represent a persisted milling transaction."""

    transaction_id: str
    customer_name: str
    contact: str
    date: str
    crop_type: CropType
    quantity: float
    charge_per_kg: float
    amount_paid: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_data(
        cls,
        transaction_id: str,
        data: TransactionData,
        *,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Transaction":
        """Attach an identifier and timestamps to validated fields."""

        return cls(
            transaction_id=transaction_id,
            customer_name=data.customer_name,
            contact=data.contact,
            date=data.date,
            crop_type=data.crop_type,
            quantity=data.quantity,
            charge_per_kg=data.charge_per_kg,
            amount_paid=data.amount_paid,
            created_at=created_at,
            updated_at=updated_at,
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        """Rebuild a record from its ``as_dict`` form; derived values are ignored."""

        return cls(
            transaction_id=str(payload["id"]),
            customer_name=str(payload["customer_name"]),
            contact=str(payload["contact"]),
            date=str(payload["date"]),
            crop_type=CropType.from_str(payload["crop_type"]),
            quantity=float(payload["quantity"]),
            charge_per_kg=float(payload["charge_per_kg"]),
            amount_paid=float(payload["amount_paid"]),
            created_at=_parse_timestamp(payload.get("created_at")),
            updated_at=_parse_timestamp(payload.get("updated_at")),
        )

    @property
    def total_amount(self) -> float:
        return derive_total(self.quantity, self.charge_per_kg)

    @property
    def balance(self) -> float:
        return derive_balance(self.total_amount, self.amount_paid)

    def data(self) -> TransactionData:
        """Return the editable fields without identity or timestamps."""

        return TransactionData(
            customer_name=self.customer_name,
            contact=self.contact,
            date=self.date,
            crop_type=self.crop_type,
            quantity=self.quantity,
            charge_per_kg=self.charge_per_kg,
            amount_paid=self.amount_paid,
        )

    def as_dict(self) -> Dict[str, object]:
        """Export the transaction with serialisable values."""

        payload: Dict[str, object] = {"id": self.transaction_id}
        payload.update(self.data().as_dict())
        payload["created_at"] = self.created_at.isoformat() if self.created_at else None
        payload["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return payload


def _parse_timestamp(value: object) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True, slots=True)
class DailyRevenue:
    """Cash received on one calendar day."""

    day: str
    label: str
    revenue: float

    @classmethod
    def for_day(cls, day: date, revenue: float) -> "DailyRevenue":
        return cls(day=day.isoformat(), label=day.strftime("%a"), revenue=revenue)

    def as_dict(self) -> Dict[str, object]:
        return {"day": self.day, "label": self.label, "revenue": self.revenue}


@dataclass(slots=True)
class DashboardStats:
    """Aggregate figures shown on the dashboard cards and charts."""

    transaction_count: int
    total_revenue: float
    total_quantity_kg: float
    total_outstanding_balance: float
    unique_customer_count: int
    quantity_by_crop: Dict[str, float] = field(default_factory=dict)
    daily_revenue_last_7_days: List[DailyRevenue] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        """Export the statistics for JSON responses."""

        return {
            "transaction_count": self.transaction_count,
            "total_revenue": self.total_revenue,
            "total_quantity_kg": self.total_quantity_kg,
            "total_outstanding_balance": self.total_outstanding_balance,
            "unique_customer_count": self.unique_customer_count,
            "quantity_by_crop": dict(self.quantity_by_crop),
            "daily_revenue_last_7_days": [
                entry.as_dict() for entry in self.daily_revenue_last_7_days
            ],
        }
