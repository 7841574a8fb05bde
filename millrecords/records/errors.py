"""Mini README: Error taxonomy shared by the record rules, book and gateways.

Structure:
    * MillRecordsError - base class for every domain failure.
    * FieldViolation - a single field-level validation message.
    * ValidationError - one or more violations, raised before persistence.
    * UnknownCropError - crop value outside the supported set.
    * StoreError - gateway create/update/list failure.
    * NotFoundError - update/delete/lookup referencing a missing record.

None of these errors are retried automatically. Callers surface them to the
user and re-invoke the operation explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List


class MillRecordsError(Exception):
    """Base class for Mill Records failures."""


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A failed constraint on a named transaction field."""

    field: str
    message: str

    def as_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationError(MillRecordsError, ValueError):
    """Raised when transaction input breaks one or more field constraints."""

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations: List[FieldViolation] = list(violations)
        summary = "; ".join(f"{item.field}: {item.message}" for item in self.violations)
        super().__init__(summary or "Transaction input is invalid")

    @property
    def fields(self) -> List[str]:
        """Names of the offending fields in declaration order."""

        return [violation.field for violation in self.violations]


class UnknownCropError(MillRecordsError, ValueError):
    """Raised when a crop type is not one of the milled crops."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unsupported crop type: {value!r}")


class StoreError(MillRecordsError):
    """Raised when the persistence gateway rejects or fails an operation."""


class NotFoundError(MillRecordsError):
    """Raised when a transaction id is not known to the store or working set."""

    def __init__(self, transaction_id: str) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")
