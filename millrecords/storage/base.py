"""Mini README: Abstract persistence gateway for transaction records.

Structure:
    * TransactionGateway - async CRUD interface implemented by storage backends.
    * new_transaction_id / utc_now - helpers shared by concrete backends.

The working set only talks to storage through this interface. Backends
assign identifiers and timestamps, return records newest-created first, and
signal failures with ``StoreError`` or ``NotFoundError``. No call is retried
on the caller's behalf.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional

from ..logging_utils import get_logger
from ..records.models import Transaction, TransactionData

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..configuration import MillRecordsSettings

LOGGER = get_logger(__name__)


def new_transaction_id() -> str:
    """Return a fresh opaque identifier."""

    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TransactionGateway(ABC):
    """Base interface for transaction storage backends."""

    backend_name: str = "generic"

    def __init__(self, location: Optional[str] = None) -> None:
        self.location = location
        LOGGER.debug("Initialising %s gateway with location '%s'", self.backend_name, location)

    @classmethod
    def from_settings(cls, settings: "MillRecordsSettings") -> "TransactionGateway":
        """Build the backend from application settings."""

        return cls(location=settings.resolved_store_location())

    @abstractmethod
    async def list_transactions(self) -> List[Transaction]:
        """Return every stored transaction, most recently created first."""

    @abstractmethod
    async def create(self, data: TransactionData) -> Transaction:
        """Persist new fields and return the record with its assigned id."""

    @abstractmethod
    async def update(self, transaction_id: str, data: TransactionData) -> Transaction:
        """Replace every field of an existing record except its id."""

    @abstractmethod
    async def delete(self, transaction_id: str) -> None:
        """Permanently remove a record."""

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for UI displays."""

        return {
            "backend": self.backend_name,
            "location": self.location or "not configured",
        }
