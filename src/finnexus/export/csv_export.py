"""CSV export of transactions."""

import csv
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional, TextIO

from finnexus.domain.entities import Transaction
from finnexus.utils.amount_parser import format_decimal
from finnexus.utils.date_parser import format_local_date

CSV_HEADERS = [
    "ID",
    "Date",
    "Description",
    "Category",
    "Type",
    "Amount",
    "Status",
    "Employee",
    "Commission",
    "Commission Payment Date",
    "Pending Amount",
]
DEFAULT_DELIMITER = ";"


def _amount_cell(value: Optional[Decimal]) -> str:
    if value is None:
        return ""
    return format_decimal(value, thousands=False)


def transaction_to_row(txn: Transaction) -> list[str]:
    """Convert a transaction into CSV cells."""
    return [
        txn.id,
        format_local_date(txn.date),
        txn.description,
        txn.category.value,
        txn.type.value,
        _amount_cell(txn.amount),
        txn.status.value,
        txn.employee_name or "",
        _amount_cell(txn.commission_amount),
        format_local_date(txn.commission_payment_date) if txn.commission_payment_date else "",
        _amount_cell(txn.pending_amount),
    ]


def write_transactions_csv(
    transactions: Iterable[Transaction],
    stream: TextIO,
    delimiter: str = DEFAULT_DELIMITER,
) -> int:
    """Write transactions as CSV to an open text stream.

    Amounts use a decimal comma, so the default delimiter is a semicolon.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, delimiter=delimiter)
    writer.writerow(CSV_HEADERS)
    count = 0
    for txn in transactions:
        writer.writerow(transaction_to_row(txn))
        count += 1
    return count


def export_transactions_csv(
    transactions: Iterable[Transaction],
    output_path: Path,
    delimiter: str = DEFAULT_DELIMITER,
) -> int:
    """Write transactions to a CSV file. Returns number of rows written."""
    # utf-8-sig so spreadsheet tools detect the encoding
    with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
        return write_transactions_csv(transactions, f, delimiter=delimiter)
