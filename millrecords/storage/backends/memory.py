"""Mini README: Process-local transaction store.

Structure:
    * InMemoryGateway - dictionary-backed gateway with optional demo data.

Useful for demos and tests; nothing survives a restart. Records keep the
order in which they were created so listings come back newest first even
when several share a timestamp.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from ...logging_utils import get_logger
from ...records.errors import NotFoundError, StoreError
from ...records.models import CropType, Transaction, TransactionData
from ...records.rules import DEFAULT_RATES
from ..base import TransactionGateway, new_transaction_id, utc_now
from ..registry import REGISTRY

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ...configuration import MillRecordsSettings

LOGGER = get_logger(__name__)


class InMemoryGateway(TransactionGateway):
    """Keep transactions in a dictionary keyed by id."""

    backend_name = "memory"

    def __init__(
        self,
        location: Optional[str] = None,
        *,
        transactions: Optional[Iterable[Transaction]] = None,
        seed_demo: bool = False,
    ) -> None:
        super().__init__(location)
        self._records: Dict[str, Tuple[int, Transaction]] = {}
        self._sequence = 0
        if transactions is not None:
            for transaction in transactions:
                self._register(transaction)
        elif seed_demo:
            self._seed_demo_transactions()
        LOGGER.debug("In-memory gateway initialised with %s transactions", len(self._records))

    @classmethod
    def from_settings(cls, settings: "MillRecordsSettings") -> "InMemoryGateway":
        return cls(seed_demo=settings.seed_demo_data)

    def _seed_demo_transactions(self) -> None:
        """Populate the store with demo data spread over the last week."""

        today = date.today()
        demo = [
            ("Jane Nakato", "0772123456", 6, CropType.MAIZE, 25.0, 10000.0),
            ("Okello Peter", "0701987654", 4, CropType.MILLET, 12.5, 3750.0),
            ("Sarah Achieng", "0758111222", 2, CropType.CASSAVA, 40.0, 4000.0),
            ("Jane Nakato", "0772123456", 1, CropType.MILLET, 8.0, 2400.0),
            ("Musa Kato", "0789333444", 0, CropType.MAIZE, 15.0, 5000.0),
        ]
        for name, contact, days_ago, crop, quantity, paid in demo:
            data = TransactionData(
                customer_name=name,
                contact=contact,
                date=(today - timedelta(days=days_ago)).isoformat(),
                crop_type=crop,
                quantity=quantity,
                charge_per_kg=DEFAULT_RATES[crop],
                amount_paid=paid,
            )
            self._insert(data)

    def _register(self, transaction: Transaction) -> None:
        """Store a transaction ensuring identifiers remain unique."""

        if transaction.transaction_id in self._records:
            raise StoreError(f"Transaction {transaction.transaction_id} already exists.")
        self._sequence += 1
        self._records[transaction.transaction_id] = (self._sequence, transaction)

    def _insert(self, data: TransactionData) -> Transaction:
        now = utc_now()
        transaction = Transaction.from_data(
            new_transaction_id(), data, created_at=now, updated_at=now
        )
        self._register(transaction)
        return transaction

    def _sort_key(self, entry: Tuple[int, Transaction]) -> Tuple[str, int]:
        sequence, transaction = entry
        created = transaction.created_at.isoformat() if transaction.created_at else ""
        return (created, sequence)

    async def list_transactions(self) -> List[Transaction]:
        ordered = sorted(self._records.values(), key=self._sort_key, reverse=True)
        return [transaction for _, transaction in ordered]

    async def create(self, data: TransactionData) -> Transaction:
        transaction = self._insert(data)
        LOGGER.info("Stored transaction %s for %s", transaction.transaction_id, data.customer_name)
        return transaction

    async def update(self, transaction_id: str, data: TransactionData) -> Transaction:
        if transaction_id not in self._records:
            raise NotFoundError(transaction_id)
        sequence, existing = self._records[transaction_id]
        updated = Transaction.from_data(
            transaction_id, data, created_at=existing.created_at, updated_at=utc_now()
        )
        self._records[transaction_id] = (sequence, updated)
        LOGGER.info("Updated transaction %s", transaction_id)
        return updated

    async def delete(self, transaction_id: str) -> None:
        if transaction_id not in self._records:
            raise NotFoundError(transaction_id)
        del self._records[transaction_id]
        LOGGER.info("Deleted transaction %s", transaction_id)


REGISTRY.register(InMemoryGateway)
