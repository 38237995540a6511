"""Remote table-backed database implementation (Supabase)."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from finnexus.database.base import Database, UPDATABLE_FIELDS
from finnexus.database.mappers import (
    fields_to_row,
    row_to_tax_setting,
    row_to_transaction,
)
from finnexus.domain.entities import (
    TaxSetting,
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from finnexus.domain.errors import (
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
    remote_store_not_configured,
    tax_setting_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_TABLE = "transactions"
TAX_SETTINGS_TABLE = "tax_settings"
PAGE_SIZE = 1000


def create_supabase_client(url: str, key: str) -> Any:
    """Return a Supabase client, or None if credentials are missing."""
    if not url or not key:
        return None

    from supabase import create_client

    return create_client(url, key)


class SupabaseDatabase(Database):
    """Database backed by Supabase tables.

    A database created without a client stays usable as an object but every
    operation raises ConfigurationError, so read paths can degrade to empty
    data while write paths report the problem.
    """

    def __init__(self, client: Any = None):
        """Initialize Supabase database.

        Args:
            client: Supabase client (or compatible query builder), None when
                the remote store is not configured
        """
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _table(self, name: str) -> Any:
        if self.client is None:
            raise ConfigurationError(remote_store_not_configured())
        return self.client.table(name)

    def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        """Run a query and return its rows, wrapping backend failures."""
        try:
            response = query.execute()
        except Exception as exc:
            raise StoreError(f"Could not {action}: {exc}") from exc
        return list(response.data or [])

    def _fetch_all(self, table: str, order_col: str, desc: bool = False) -> list[dict[str, Any]]:
        """Fetch all rows from a table, paginating past the 1000-row limit.

        Rows are ordered by id after order_col so pages never overlap on ties.
        """
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            query = self._table(table).select("*").order(order_col, desc=desc)
            if order_col != "id":
                query = query.order("id")
            query = query.range(offset, offset + PAGE_SIZE - 1)
            batch = self._execute(query, f"list {table}")
            rows.extend(batch)
            if len(batch) < PAGE_SIZE:
                break
            offset += PAGE_SIZE
        return rows

    def connect(self) -> None:
        """Connect to the database."""
        # The HTTP client connects per request
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        # Tables are managed on the Supabase side
        pass

    # Transaction operations
    def list_transactions(self) -> list[Transaction]:
        """List all transactions, newest first."""
        rows = self._fetch_all(TRANSACTIONS_TABLE, "date", desc=True)
        return [row_to_transaction(row) for row in rows]

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        query = self._table(TRANSACTIONS_TABLE).select("*").eq("id", transaction_id).limit(1)
        rows = self._execute(query, f"read transaction {transaction_id}")
        if not rows:
            return None
        return row_to_transaction(rows[0])

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
        row = fields_to_row(
            {
                "id": str(uuid.uuid4()),
                "date": date,
                "description": description,
                "amount": amount,
                "type": type,
                "category": category,
                "status": status,
                "notes": notes,
                "employee_name": employee_name,
                "commission_rate": commission_rate,
                "commission_amount": commission_amount,
                "commission_payment_date": commission_payment_date,
                "pending_amount": pending_amount,
            }
        )
        rows = self._execute(
            self._table(TRANSACTIONS_TABLE).insert([row]), "create transaction"
        )
        logger.debug("Created remote transaction %s", row["id"])
        return row_to_transaction(rows[0] if rows else row)

    def update_transaction(self, transaction_id: str, fields: dict[str, Any]) -> None:
        """Update the given fields of a transaction."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        query = self._table(TRANSACTIONS_TABLE).update(fields_to_row(fields)).eq("id", transaction_id)
        rows = self._execute(query, f"update transaction {transaction_id}")
        if not rows:
            raise NotFoundError(transaction_not_found(transaction_id))

    def set_transaction_status(self, transaction_id: str, status: TransactionStatus) -> None:
        """Update transaction status."""
        query = (
            self._table(TRANSACTIONS_TABLE)
            .update({"status": status.value})
            .eq("id", transaction_id)
        )
        rows = self._execute(query, f"update status of transaction {transaction_id}")
        if not rows:
            raise NotFoundError(transaction_not_found(transaction_id))

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        query = self._table(TRANSACTIONS_TABLE).delete().eq("id", transaction_id)
        rows = self._execute(query, f"delete transaction {transaction_id}")
        if not rows:
            raise NotFoundError(transaction_not_found(transaction_id))

    def clear_transactions(self) -> None:
        """Delete every transaction."""
        # PostgREST refuses unfiltered deletes
        query = self._table(TRANSACTIONS_TABLE).delete().neq("id", "")
        self._execute(query, "clear transactions")

    # Tax setting operations
    def list_tax_settings(self) -> list[TaxSetting]:
        """List tax settings in creation order."""
        rows = self._fetch_all(TAX_SETTINGS_TABLE, "created_at")
        return [row_to_tax_setting(row) for row in rows]

    def create_tax_setting(self, name: str, percentage: Decimal) -> TaxSetting:
        """Create a tax setting. Returns the stored setting."""
        row = fields_to_row({"id": str(uuid.uuid4()), "name": name, "percentage": percentage})
        rows = self._execute(
            self._table(TAX_SETTINGS_TABLE).insert([row]), "create tax setting"
        )
        return row_to_tax_setting(rows[0] if rows else row)

    def delete_tax_setting(self, tax_id: str) -> None:
        """Delete a tax setting."""
        query = self._table(TAX_SETTINGS_TABLE).delete().eq("id", tax_id)
        rows = self._execute(query, f"delete tax setting {tax_id}")
        if not rows:
            raise NotFoundError(tax_setting_not_found(tax_id))
