"""Transaction domain service."""

import dataclasses
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from finnexus.database.base import Database, UPDATABLE_FIELDS
from finnexus.domain.aggregation import HUNDRED, ZERO, filter_transactions
from finnexus.domain.entities import (
    LoadResult,
    Transaction as TransactionEntity,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from finnexus.domain.errors import (
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
    partial_requires_pending,
    transaction_not_found,
)
from finnexus.utils.amount_parser import RATE_PLACES, round_to_places

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("amount", "commission_amount", "pending_amount")


def derive_commission_amount(amount: Decimal, commission_rate: Decimal) -> Decimal:
    """Commission owed on an amount at a percentage rate, in cents."""
    return round_to_places(amount * commission_rate / HUNDRED)


def round_stored_values(fields: dict[str, Any]) -> dict[str, Any]:
    """Round money to cents and rates to the stored scale.

    Both stores then hold exactly the values that were validated.
    """
    rounded = dict(fields)
    for name in MONEY_FIELDS:
        if rounded.get(name) is not None:
            rounded[name] = round_to_places(rounded[name])
    if rounded.get("commission_rate") is not None:
        rounded["commission_rate"] = round_to_places(rounded["commission_rate"], RATE_PLACES)
    return rounded


def validate_transaction(txn: TransactionEntity) -> None:
    """Check the invariants every stored transaction must satisfy.

    Raises:
        ValidationError: If any field is out of range, or the PARTIAL status
            and the pending amount disagree
    """
    if not txn.description or not txn.description.strip():
        raise ValidationError("Description is required")
    if txn.amount < ZERO:
        raise ValidationError("Amount must not be negative")

    if txn.commission_rate is not None and not ZERO <= txn.commission_rate <= HUNDRED:
        raise ValidationError("Commission rate must be between 0 and 100")
    if txn.commission_amount is not None and txn.commission_amount < ZERO:
        raise ValidationError("Commission amount must not be negative")

    if txn.pending_amount is not None:
        if txn.pending_amount < ZERO:
            raise ValidationError("Pending amount must not be negative")
        if txn.pending_amount > txn.amount:
            raise ValidationError("Pending amount cannot exceed the transaction amount")

    has_pending = txn.pending_amount is not None and txn.pending_amount > ZERO
    if txn.status == TransactionStatus.PARTIAL and not has_pending:
        raise ValidationError(partial_requires_pending(txn.id or None))
    if has_pending and txn.status != TransactionStatus.PARTIAL:
        raise ValidationError("A pending amount is only allowed on partial transactions")


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        date: date,
        description: str,
        amount: Decimal,
        type: TransactionType,
        category: TransactionCategory,
        status: TransactionStatus = TransactionStatus.COMPLETED,
        notes: Optional[str] = None,
        employee_name: Optional[str] = None,
        commission_rate: Optional[Decimal] = None,
        commission_amount: Optional[Decimal] = None,
        commission_payment_date: Optional[date] = None,
        pending_amount: Optional[Decimal] = None,
    ) -> TransactionEntity:
        """Create a transaction.

        Money is rounded to cents before validation. When only a commission
        rate is given, the commission amount is derived from it.

        Args:
            date: Transaction date
            description: Free-text label
            amount: Nonnegative amount
            type: Income or expense
            category: Bookkeeping category
            status: Settlement status
            notes: Optional notes
            employee_name: Optional commissioned employee
            commission_rate: Optional commission percentage
            commission_amount: Optional explicit commission amount
            commission_payment_date: Optional commission disbursement date
            pending_amount: Amount not yet collected (partial transactions)

        Returns:
            The stored transaction

        Raises:
            ValidationError: If the transaction violates an invariant
            ConfigurationError, StoreError: If the store fails
        """
        values = round_stored_values(
            {
                "amount": amount,
                "commission_rate": commission_rate,
                "commission_amount": commission_amount,
                "pending_amount": pending_amount,
            }
        )
        if values["commission_amount"] is None and values["commission_rate"] is not None:
            values["commission_amount"] = derive_commission_amount(
                values["amount"], values["commission_rate"]
            )

        draft = TransactionEntity(
            id="",
            date=date,
            description=description.strip() if description else description,
            type=type,
            category=category,
            status=status,
            notes=notes,
            employee_name=employee_name,
            commission_payment_date=commission_payment_date,
            **values,
        )
        validate_transaction(draft)

        fields = {f.name: getattr(draft, f.name) for f in dataclasses.fields(draft)}
        del fields["id"], fields["created_at"]
        return self.db.create_transaction(**fields)

    def load_transactions(self) -> LoadResult:
        """Read all transactions for display.

        Store failures degrade to an empty result carrying the error message.
        """
        try:
            transactions = self.db.list_transactions()
        except (ConfigurationError, StoreError) as e:
            logger.warning("Could not load transactions: %s", e)
            return LoadResult(items=(), error=str(e))
        return LoadResult(items=tuple(transactions))

    def list_transactions(
        self,
        type: Optional[TransactionType] = None,
        status: Optional[TransactionStatus] = None,
        search: Optional[str] = None,
    ) -> LoadResult:
        """List transactions for display, with optional filters."""
        result = self.load_transactions()
        if not result.ok:
            return result
        filtered = filter_transactions(result.items, type=type, status=status, search=search)
        return LoadResult(items=tuple(filtered))

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: str) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(self, transaction_id: str, **fields: Any) -> TransactionEntity:
        """Update transaction fields.

        Only the given fields change; passing None clears an optional field.
        Unless a commission amount is passed explicitly, a new commission
        rate or a new amount on a transaction with a rate recomputes the
        commission amount.

        Args:
            transaction_id: Transaction ID to update
            **fields: Field values keyed by field name

        Returns:
            The transaction as it looks after the update

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If a field is unknown or the result is invalid
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if not fields:
            raise ValidationError("No fields to update")

        # Verify transaction exists
        txn = self.require_transaction(transaction_id)

        fields = round_stored_values(fields)
        rate = fields.get("commission_rate", txn.commission_rate)
        rederive = "commission_rate" in fields or "amount" in fields
        if rederive and rate is not None and "commission_amount" not in fields:
            amount = fields.get("amount", txn.amount)
            fields["commission_amount"] = derive_commission_amount(amount, rate)
        if "description" in fields and fields["description"]:
            fields["description"] = fields["description"].strip()

        updated = dataclasses.replace(txn, **fields)
        validate_transaction(updated)

        self.db.update_transaction(transaction_id, fields)
        return updated

    def set_status(self, transaction_id: str, status: TransactionStatus) -> None:
        """Change the status of a transaction.

        Leaving PARTIAL clears the pending amount; entering PARTIAL requires
        a positive pending amount to already be recorded.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If the transaction cannot be partial
        """
        txn = self.require_transaction(transaction_id)

        if status == TransactionStatus.PARTIAL:
            if txn.pending_amount is None or txn.pending_amount <= ZERO:
                raise ValidationError(partial_requires_pending(transaction_id))
            self.db.set_transaction_status(transaction_id, status)
            return

        if txn.pending_amount is not None:
            self.db.update_transaction(transaction_id, {"status": status, "pending_amount": None})
        else:
            self.db.set_transaction_status(transaction_id, status)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.db.delete_transaction(transaction_id)

    def clear_transactions(self) -> None:
        """Delete every transaction."""
        self.db.clear_transactions()
