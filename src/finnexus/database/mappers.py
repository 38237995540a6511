"""Mapper functions between domain entities and storage representations.

The local store works with SQLAlchemy models; the remote store exchanges
plain JSON rows whose dates are ISO strings and whose amounts are numbers.
Both are converted here so the domain layer only ever sees entities.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from finnexus.domain import entities as domain
from finnexus.database.models import (
    TaxSetting as ORMTaxSetting,
    Transaction as ORMTransaction,
)
from finnexus.utils.date_parser import parse_iso_date


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        type=domain.TransactionType(orm_transaction.type),
        category=domain.TransactionCategory(orm_transaction.category),
        status=domain.TransactionStatus(orm_transaction.status),
        notes=orm_transaction.notes,
        employee_name=orm_transaction.employee_name,
        commission_rate=orm_transaction.commission_rate,
        commission_amount=orm_transaction.commission_amount,
        commission_payment_date=orm_transaction.commission_payment_date,
        pending_amount=orm_transaction.pending_amount,
        created_at=orm_transaction.created_at,
    )


def tax_setting_to_domain(orm_setting: ORMTaxSetting) -> domain.TaxSetting:
    """Convert SQLAlchemy TaxSetting model to domain TaxSetting entity."""
    return domain.TaxSetting(
        id=orm_setting.id,
        name=orm_setting.name,
        percentage=orm_setting.percentage,
        created_at=orm_setting.created_at,
    )


def _decimal_or_none(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    # str() first so floats from JSON keep their printed value
    return Decimal(str(value))


def _date_or_none(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def _datetime_or_none(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def row_to_transaction(row: dict[str, Any]) -> domain.Transaction:
    """Convert a remote table row to a domain Transaction entity."""
    return domain.Transaction(
        id=str(row["id"]),
        date=parse_iso_date(row["date"]),
        description=row.get("description") or "",
        amount=Decimal(str(row["amount"])),
        type=domain.TransactionType(row["type"]),
        category=domain.TransactionCategory(row["category"]),
        status=domain.TransactionStatus(row["status"]),
        notes=row.get("notes"),
        employee_name=row.get("employee_name"),
        commission_rate=_decimal_or_none(row.get("commission_rate")),
        commission_amount=_decimal_or_none(row.get("commission_amount")),
        commission_payment_date=_date_or_none(row.get("commission_payment_date")),
        pending_amount=_decimal_or_none(row.get("pending_amount")),
        created_at=_datetime_or_none(row.get("created_at")),
    )


def row_to_tax_setting(row: dict[str, Any]) -> domain.TaxSetting:
    """Convert a remote table row to a domain TaxSetting entity."""
    return domain.TaxSetting(
        id=str(row["id"]),
        name=row["name"],
        percentage=Decimal(str(row["percentage"])),
        created_at=_datetime_or_none(row.get("created_at")),
    )


def value_to_row(value: Any) -> Any:
    """Convert a single domain value into its JSON row representation."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def fields_to_row(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert domain field values into a JSON row."""
    return {name: value_to_row(value) for name, value in fields.items()}
