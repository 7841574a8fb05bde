"""Mini README: Working set of transactions synchronised with a gateway.

Structure:
    * TransactionBook - ordered arena of records keyed by id.
    * SessionState - lifecycle states of a create/edit form.
    * EditingSession - validates a draft and submits it through the book.

The book only changes after the gateway confirms an operation. A failed
create, update or delete leaves the working set exactly as it was and the
error propagates to the caller, who decides whether to try again.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from ..logging_utils import get_logger
from .errors import NotFoundError, StoreError, ValidationError
from .models import Transaction, TransactionData, TransactionDraft
from .rules import validate_transaction_input

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..storage.base import TransactionGateway

LOGGER = get_logger(__name__)


class TransactionBook:
    """Manage the in-memory collection of transactions shown to staff."""

    def __init__(self, gateway: "TransactionGateway") -> None:
        self.gateway = gateway
        self._records: Dict[str, Transaction] = {}
        self._order: List[str] = []
        self._loaded = False

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._records

    def _replace_all(self, transactions: List[Transaction]) -> None:
        self._records = {transaction.transaction_id: transaction for transaction in transactions}
        self._order = [transaction.transaction_id for transaction in transactions]

    async def refresh(self) -> List[Transaction]:
        """Reload the working set from the gateway."""

        try:
            transactions = await self.gateway.list_transactions()
        except StoreError:
            LOGGER.warning(
                "Refresh from %s failed; keeping %s cached records",
                self.gateway.backend_name,
                len(self),
            )
            raise
        self._replace_all(transactions)
        self._loaded = True
        LOGGER.debug("Working set refreshed with %s transactions", len(self))
        return self.list_transactions()

    async def ensure_loaded(self) -> None:
        """Load the working set on first use."""

        if not self._loaded:
            await self.refresh()

    def list_transactions(self) -> List[Transaction]:
        """Return records in the order delivered by the gateway."""

        return [self._records[transaction_id] for transaction_id in self._order]

    def get(self, transaction_id: str) -> Transaction:
        """Retrieve a transaction, raising informative errors when missing."""

        if transaction_id not in self._records:
            raise NotFoundError(transaction_id)
        return self._records[transaction_id]

    async def add(self, data: TransactionData) -> Transaction:
        """Create a record and put it at the top of the working set."""

        try:
            transaction = await self.gateway.create(data)
        except StoreError as error:
            LOGGER.warning("Gateway rejected new transaction for %s: %s", data.customer_name, error)
            raise
        self._records[transaction.transaction_id] = transaction
        self._order.insert(0, transaction.transaction_id)
        return transaction

    async def update(self, transaction_id: str, data: TransactionData) -> Transaction:
        """Replace a record's fields, keeping its position in the working set."""

        try:
            transaction = await self.gateway.update(transaction_id, data)
        except (StoreError, NotFoundError) as error:
            LOGGER.warning("Gateway rejected update of %s: %s", transaction_id, error)
            raise
        if transaction_id not in self._records:
            self._order.insert(0, transaction_id)
        self._records[transaction_id] = transaction
        return transaction

    async def delete(self, transaction_id: str) -> None:
        """Remove a record from the store and then from the working set."""

        try:
            await self.gateway.delete(transaction_id)
        except (StoreError, NotFoundError) as error:
            LOGGER.warning("Gateway rejected delete of %s: %s", transaction_id, error)
            raise
        self._records.pop(transaction_id, None)
        if transaction_id in self._order:
            self._order.remove(transaction_id)


class SessionState(str, Enum):
    """States of a transaction form between typing and saving."""

    DRAFT = "draft"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    SUBMITTED = "submitted"


class EditingSession:
    """Drive one create or edit form through validation and submission.

    ``validate`` moves the session to VALID or INVALID. ``submit`` is only
    allowed from VALID; it reaches SUBMITTED when the gateway accepts the
    record and falls back to VALID, with the draft untouched, when the
    gateway fails.
    """

    def __init__(
        self,
        book: TransactionBook,
        draft: TransactionDraft,
        *,
        transaction_id: Optional[str] = None,
    ) -> None:
        self.book = book
        self.draft = draft
        self.transaction_id = transaction_id
        self.state = SessionState.DRAFT
        self.data: Optional[TransactionData] = None
        self.error: Optional[ValidationError] = None
        self.result: Optional[Transaction] = None

    @classmethod
    def for_existing(cls, book: TransactionBook, transaction_id: str) -> "EditingSession":
        """Open an edit session pre-filled from a record in the working set."""

        transaction = book.get(transaction_id)
        return cls(book, TransactionDraft.from_transaction(transaction), transaction_id=transaction_id)

    @property
    def is_edit(self) -> bool:
        return self.transaction_id is not None

    def revise(self, draft: TransactionDraft) -> None:
        """Replace the draft after the user changes the form."""

        if self.state is SessionState.SUBMITTED:
            raise RuntimeError("Submitted sessions cannot be revised")
        self.draft = draft
        self.state = SessionState.DRAFT
        self.data = None
        self.error = None

    def validate(self) -> SessionState:
        """Run the transaction rules against the current draft."""

        self.state = SessionState.VALIDATING
        try:
            self.data = validate_transaction_input(self.draft)
        except ValidationError as error:
            self.data = None
            self.error = error
            self.state = SessionState.INVALID
        else:
            self.error = None
            self.state = SessionState.VALID
        return self.state

    async def submit(self) -> Transaction:
        """Persist the validated draft through the book."""

        if self.state is SessionState.DRAFT:
            self.validate()
        if self.state is SessionState.INVALID and self.error is not None:
            raise self.error
        if self.state is not SessionState.VALID or self.data is None:
            raise RuntimeError(f"Cannot submit a session in state {self.state.value}")

        try:
            if self.transaction_id is None:
                transaction = await self.book.add(self.data)
            else:
                transaction = await self.book.update(self.transaction_id, self.data)
        except (StoreError, NotFoundError):
            self.state = SessionState.VALID
            raise
        self.result = transaction
        self.state = SessionState.SUBMITTED
        LOGGER.info(
            "%s transaction %s",
            "Updated" if self.is_edit else "Recorded",
            transaction.transaction_id,
        )
        return transaction
