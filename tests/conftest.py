"""Mini README: Shared fixtures for the Mill Records test-suite.

Structure:
    * make_transaction - factory fixture for stored transactions.
    * failing_gateway - in-memory gateway whose writes can be switched to fail.
    * clear_settings_cache - resets ``get_settings`` around tests that set env vars.
"""

from __future__ import annotations

from typing import List, Optional

import pytest

from millrecords.configuration import get_settings
from millrecords.records import CropType, StoreError, Transaction, TransactionData
from millrecords.storage.backends import InMemoryGateway


def _make_transaction(
    transaction_id: str = "txn_0001",
    *,
    customer_name: str = "A",
    contact: str = "1",
    date_value: str = "2024-01-01",
    crop_type: CropType = CropType.MAIZE,
    quantity: float = 10.0,
    charge_per_kg: float = 400.0,
    amount_paid: float = 3000.0,
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        customer_name=customer_name,
        contact=contact,
        date=date_value,
        crop_type=crop_type,
        quantity=quantity,
        charge_per_kg=charge_per_kg,
        amount_paid=amount_paid,
    )


@pytest.fixture
def make_transaction():
    return _make_transaction


@pytest.fixture
def sample_data() -> TransactionData:
    return TransactionData(
        customer_name="Jane",
        contact="0772000111",
        date="2024-03-01",
        crop_type=CropType.MILLET,
        quantity=5.0,
        charge_per_kg=300.0,
        amount_paid=1000.0,
    )


class FailingGateway(InMemoryGateway):
    """In-memory gateway that raises ``StoreError`` on writes while ``failing``."""

    backend_name = "failing"

    def __init__(self, transactions: Optional[List[Transaction]] = None) -> None:
        super().__init__(transactions=transactions or [])
        self.failing = True

    async def create(self, data: TransactionData) -> Transaction:
        if self.failing:
            raise StoreError("connection refused")
        return await super().create(data)

    async def update(self, transaction_id: str, data: TransactionData) -> Transaction:
        if self.failing:
            raise StoreError("connection refused")
        return await super().update(transaction_id, data)

    async def delete(self, transaction_id: str) -> None:
        if self.failing:
            raise StoreError("connection refused")
        await super().delete(transaction_id)


@pytest.fixture
def failing_gateway() -> FailingGateway:
    return FailingGateway()


@pytest.fixture
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
