"""Transaction management commands."""

from typing import Any

import click

from finnexus.cli.error_handling import echo_load_errors, handle_domain_error
from finnexus.cli.value_parsing import (
    CATEGORY_CHOICE,
    STATUS_CHOICE,
    TYPE_CHOICE,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_rate_or_exit,
)
from finnexus.domain.aggregation import calculate_summary
from finnexus.domain.entities import TransactionCategory, TransactionStatus, TransactionType
from finnexus.domain.errors import DomainError
from finnexus.domain.transaction import TransactionService
from finnexus.utils.amount_parser import format_currency
from finnexus.utils.date_parser import format_local_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only income or only expense")
@click.option("--status", type=STATUS_CHOICE, help="Only transactions with this status")
@click.option("--search", help="Case-insensitive match on description or category")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum rows to show")
@click.option("--verbose", "-v", is_flag=True, help="Show notes, commission and pending details")
@click.pass_context
def list_transactions(
    ctx,
    txn_type: str | None,
    status: str | None,
    search: str | None,
    limit: int,
    verbose: bool,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    result = service.list_transactions(
        type=TransactionType(txn_type.lower()) if txn_type else None,
        status=TransactionStatus(status.lower()) if status else None,
        search=search,
    )
    echo_load_errors([result.error] if result.error else [])

    transactions = list(result.items)
    if not transactions:
        click.echo("No transactions found.")
        return

    shown = transactions[:limit] if limit > 0 else transactions
    click.echo(f"\nFound {len(transactions)} transaction(s):")

    if verbose:
        click.echo("=" * 110)
        for txn in shown:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {format_local_date(txn.date)}")
            click.echo(f"  Description: {txn.description}")
            click.echo(f"  Type: {txn.type.value}")
            click.echo(f"  Category: {txn.category.value}")
            click.echo(f"  Amount: {format_currency(txn.amount)}")
            click.echo(f"  Status: {txn.status.value}")
            if txn.pending_amount is not None:
                click.echo(f"  Pending: {format_currency(txn.pending_amount)}")
            if txn.has_commission:
                click.echo(f"  Employee: {txn.employee_name or '-'}")
                click.echo(f"  Commission: {format_currency(txn.commission_amount)}")
                if txn.commission_payment_date:
                    click.echo(f"  Commission paid on: {format_local_date(txn.commission_payment_date)}")
            if txn.notes:
                click.echo(f"  Notes: {txn.notes}")
            click.echo("-" * 110)
    else:
        click.echo("-" * 110)
        click.echo(
            f"{'ID':<37} {'Date':<11} {'Type':<8} {'Amount':>16} {'Status':<10} {'Category':<14} {'Description'}"
        )
        click.echo("-" * 110)
        for txn in shown:
            click.echo(
                f"{txn.id:<37} {format_local_date(txn.date):<11} {txn.type.value:<8} "
                f"{format_currency(txn.amount):>16} {txn.status.value:<10} "
                f"{txn.category.value:<14} {txn.description[:30]}"
            )

    if len(shown) < len(transactions):
        click.echo(f"... {len(transactions) - len(shown)} more (use --limit)")

    # Same figures as the KPI cards
    totals = calculate_summary(transactions)
    click.echo("-" * 110)
    click.echo(
        f"TOTAL  Income: {format_currency(totals.total_income)} | Expenses: {format_currency(totals.operational_expense)} "
        f"| Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative)")
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Transaction amount")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Income or expense")
@click.option("--category", type=CATEGORY_CHOICE, help="Transaction category")
@click.option("--status", type=STATUS_CHOICE, help="Settlement status")
@click.option("--notes", help="Notes (empty string to clear)")
@click.option("--employee", help="Employee receiving a commission")
@click.option("--commission-rate", help="Commission rate in percent")
@click.option("--commission", help="Commission amount")
@click.option("--commission-date", help="Date the commission is paid out")
@click.option("--pending", help="Amount not yet received")
@click.option("--clear-commission", is_flag=True, help="Remove all commission fields")
@click.option("--clear-pending", is_flag=True, help="Remove the pending amount")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    date: str | None,
    description: str | None,
    amount: str | None,
    txn_type: str | None,
    category: str | None,
    status: str | None,
    notes: str | None,
    employee: str | None,
    commission_rate: str | None,
    commission: str | None,
    commission_date: str | None,
    pending: str | None,
    clear_commission: bool,
    clear_pending: bool,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        finnexus transaction update <id> --amount 1200
        finnexus transaction update <id> --status partial --pending 300
        finnexus transaction update <id> --status completed --clear-pending
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    commission_given = any(v is not None for v in (employee, commission_rate, commission, commission_date))
    if clear_commission and commission_given:
        click.echo("Error: --clear-commission cannot be combined with commission options", err=True)
        ctx.exit(1)
    if clear_pending and pending is not None:
        click.echo("Error: --clear-pending cannot be combined with --pending", err=True)
        ctx.exit(1)

    fields: dict[str, Any] = {}
    if date is not None:
        fields["date"] = parse_date_or_exit(ctx, date)
    if description is not None:
        fields["description"] = description
    if amount is not None:
        fields["amount"] = parse_amount_or_exit(ctx, amount)
    if txn_type is not None:
        fields["type"] = TransactionType(txn_type.lower())
    if category is not None:
        fields["category"] = TransactionCategory(category)
    if status is not None:
        fields["status"] = TransactionStatus(status.lower())
    if notes is not None:
        fields["notes"] = notes or None
    if employee is not None:
        fields["employee_name"] = employee or None
    if commission_rate is not None:
        fields["commission_rate"] = parse_rate_or_exit(ctx, commission_rate, "commission rate")
    if commission is not None:
        fields["commission_amount"] = parse_amount_or_exit(ctx, commission, "commission")
    if commission_date is not None:
        fields["commission_payment_date"] = parse_date_or_exit(ctx, commission_date, "commission date")
    if pending is not None:
        fields["pending_amount"] = parse_amount_or_exit(ctx, pending, "pending amount")

    if clear_commission:
        fields.update(
            employee_name=None,
            commission_rate=None,
            commission_amount=None,
            commission_payment_date=None,
        )
    if clear_pending:
        fields["pending_amount"] = None

    try:
        transaction_service.update_transaction(transaction_id, **fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("status")
@click.argument("transaction_id")
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def set_status(ctx, transaction_id: str, status: str) -> None:
    """Change the status of a transaction.

    Moving away from 'partial' clears the pending amount. Moving to
    'partial' requires a pending amount (see 'transaction update --pending').
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    try:
        transaction_service.set_status(transaction_id, TransactionStatus(status.lower()))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Transaction {transaction_id} is now {status.lower()}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        finnexus transaction delete <id>
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    try:
        txn = transaction_service.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    # Confirm deletion
    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id} ({txn.description})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("clear")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def clear_transactions(ctx, yes: bool) -> None:
    """Delete ALL transactions. This cannot be undone."""
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    if not yes and not click.confirm("This deletes every transaction. Continue?"):
        click.echo("Clear cancelled.")
        return

    try:
        transaction_service.clear_transactions()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo("All transactions deleted.")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
