"""Mini README: JSON document store for a single mill's records.

Structure:
    * JsonFileGateway - gateway persisting every record in one JSON file.

The document has the shape ``{"transactions": [...]}`` with each entry in
``Transaction.as_dict`` form. Writes go to a temporary sibling file which
then replaces the original, so a crash never leaves a half-written store.
File work runs in a worker thread to keep the event loop free, and an
``asyncio.Lock`` serialises read-modify-write cycles within the process.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from ...logging_utils import get_logger
from ...records.errors import NotFoundError, StoreError
from ...records.models import Transaction, TransactionData
from ..base import TransactionGateway, new_transaction_id, utc_now
from ..registry import REGISTRY

LOGGER = get_logger(__name__)


def _created_key(transaction: Transaction) -> str:
    return transaction.created_at.isoformat() if transaction.created_at else ""


class JsonFileGateway(TransactionGateway):
    """Persist transactions to a JSON document on disk."""

    backend_name = "json"

    def __init__(self, location: Optional[str] = None) -> None:
        super().__init__(location or "transactions.json")
        self.path = Path(self.location).expanduser()
        self._lock = asyncio.Lock()

    def _read(self) -> List[Transaction]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
            return [Transaction.from_dict(entry) for entry in document.get("transactions", [])]
        except (OSError, ValueError, KeyError, TypeError) as error:
            raise StoreError(f"Could not read transaction store {self.path}: {error}") from error

    def _write(self, transactions: List[Transaction]) -> None:
        document = {"transactions": [transaction.as_dict() for transaction in transactions]}
        temporary = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temporary.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
            os.replace(temporary, self.path)
        except OSError as error:
            raise StoreError(f"Could not write transaction store {self.path}: {error}") from error

    @staticmethod
    def _index(transactions: List[Transaction]) -> Dict[str, int]:
        return {transaction.transaction_id: position for position, transaction in enumerate(transactions)}

    async def list_transactions(self) -> List[Transaction]:
        transactions = await asyncio.to_thread(self._read)
        LOGGER.debug("Loaded %s transactions from %s", len(transactions), self.path)
        return sorted(transactions, key=_created_key, reverse=True)

    async def create(self, data: TransactionData) -> Transaction:
        async with self._lock:
            transactions = await asyncio.to_thread(self._read)
            now = utc_now()
            transaction = Transaction.from_data(
                new_transaction_id(), data, created_at=now, updated_at=now
            )
            await asyncio.to_thread(self._write, [transaction, *transactions])
        LOGGER.info("Stored transaction %s in %s", transaction.transaction_id, self.path)
        return transaction

    async def update(self, transaction_id: str, data: TransactionData) -> Transaction:
        async with self._lock:
            transactions = await asyncio.to_thread(self._read)
            position = self._index(transactions).get(transaction_id)
            if position is None:
                raise NotFoundError(transaction_id)
            updated = Transaction.from_data(
                transaction_id,
                data,
                created_at=transactions[position].created_at,
                updated_at=utc_now(),
            )
            transactions[position] = updated
            await asyncio.to_thread(self._write, transactions)
        LOGGER.info("Updated transaction %s in %s", transaction_id, self.path)
        return updated

    async def delete(self, transaction_id: str) -> None:
        async with self._lock:
            transactions = await asyncio.to_thread(self._read)
            position = self._index(transactions).get(transaction_id)
            if position is None:
                raise NotFoundError(transaction_id)
            del transactions[position]
            await asyncio.to_thread(self._write, transactions)
        LOGGER.info("Deleted transaction %s from %s", transaction_id, self.path)


REGISTRY.register(JsonFileGateway)
