"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from finnexus.domain.entities import (
    TaxSetting,
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)

# Fields that may be changed after a transaction is created
UPDATABLE_FIELDS = frozenset(
    {
        "date",
        "description",
        "amount",
        "type",
        "category",
        "status",
        "notes",
        "employee_name",
        "commission_rate",
        "commission_amount",
        "commission_payment_date",
        "pending_amount",
    }
)


class Database(ABC):
    """Abstract storage interface for finnexus.

    Implementations are selected once at startup and injected into services.
    Reads and writes raise ConfigurationError when the backend is not
    configured and StoreError when the backend fails.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions, newest first."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def create_transaction(
        self,
        date: date,
        description: str,
        amount: Decimal,
        type: TransactionType,
        category: TransactionCategory,
        status: TransactionStatus,
        notes: Optional[str] = None,
        employee_name: Optional[str] = None,
        commission_rate: Optional[Decimal] = None,
        commission_amount: Optional[Decimal] = None,
        commission_payment_date: Optional[date] = None,
        pending_amount: Optional[Decimal] = None,
    ) -> Transaction:
        """Create a transaction with a fresh ID. Returns the stored transaction."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: str, fields: dict[str, Any]) -> None:
        """Update the given fields of a transaction.

        A None value clears an optional field.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    def set_transaction_status(self, transaction_id: str, status: TransactionStatus) -> None:
        """Update transaction status."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def clear_transactions(self) -> None:
        """Delete every transaction."""
        pass

    # Tax setting operations
    @abstractmethod
    def list_tax_settings(self) -> list[TaxSetting]:
        """List tax settings in creation order."""
        pass

    @abstractmethod
    def create_tax_setting(self, name: str, percentage: Decimal) -> TaxSetting:
        """Create a tax setting. Returns the stored setting."""
        pass

    @abstractmethod
    def delete_tax_setting(self, tax_id: str) -> None:
        """Delete a tax setting."""
        pass
