"""Add transaction command."""

import click

from finnexus.cli.error_handling import handle_domain_error
from finnexus.cli.value_parsing import (
    CATEGORY_CHOICE,
    STATUS_CHOICE,
    TYPE_CHOICE,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_rate_or_exit,
)
from finnexus.domain.entities import TransactionCategory, TransactionStatus, TransactionType
from finnexus.domain.errors import DomainError
from finnexus.domain.transaction import TransactionService
from finnexus.utils.amount_parser import format_currency
from finnexus.utils.date_parser import format_local_date


@click.command("add")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today', 'yesterday')",
)
@click.option("--description", required=True, help="Transaction description")
@click.option("--amount", required=True, help="Transaction amount (e.g., 1500.00 or 1.500,00)")
@click.option("--type", "txn_type", type=TYPE_CHOICE, required=True, help="Income or expense")
@click.option(
    "--category",
    type=CATEGORY_CHOICE,
    default=TransactionCategory.OTHER.value,
    show_default=True,
    help="Transaction category",
)
@click.option(
    "--status",
    type=STATUS_CHOICE,
    default=TransactionStatus.COMPLETED.value,
    show_default=True,
    help="Settlement status",
)
@click.option("--notes", help="Notes")
@click.option("--employee", help="Employee receiving a commission")
@click.option("--commission-rate", help="Commission rate in percent (e.g., 10 or 12,5)")
@click.option("--commission", help="Commission amount (derived from --commission-rate if omitted)")
@click.option("--commission-date", help="Date the commission is paid out")
@click.option("--pending", help="Amount not yet received (partial transactions)")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    description: str,
    amount: str,
    txn_type: str,
    category: str,
    status: str,
    notes: str | None,
    employee: str | None,
    commission_rate: str | None,
    commission: str | None,
    commission_date: str | None,
    pending: str | None,
):
    """Add a transaction.

    Examples:
        finnexus add --type income --amount 1000 --description "Consulting" --category Services
        finnexus add --type income --amount 1000 --description "Deal" --employee Ana --commission-rate 10
        finnexus add --type income --amount 1000 --description "Invoice 42" --status partial --pending 400
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn_date = parse_date_or_exit(ctx, date)
    txn_amount = parse_amount_or_exit(ctx, amount)
    rate = parse_rate_or_exit(ctx, commission_rate, "commission rate") if commission_rate else None
    commission_amount = parse_amount_or_exit(ctx, commission, "commission") if commission else None
    payment_date = (
        parse_date_or_exit(ctx, commission_date, "commission date") if commission_date else None
    )
    pending_amount = parse_amount_or_exit(ctx, pending, "pending amount") if pending else None

    try:
        txn = transaction_service.create_transaction(
            date=txn_date,
            description=description,
            amount=txn_amount,
            type=TransactionType(txn_type.lower()),
            category=TransactionCategory(category),
            status=TransactionStatus(status.lower()),
            notes=notes,
            employee_name=employee,
            commission_rate=rate,
            commission_amount=commission_amount,
            commission_payment_date=payment_date,
            pending_amount=pending_amount,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Date: {format_local_date(txn.date)}")
    click.echo(f"  {txn.type.value.capitalize()}: {format_currency(txn.amount)}")
    click.echo(f"  Category: {txn.category.value}")
    click.echo(f"  Status: {txn.status.value}")
    if txn.pending_amount is not None:
        click.echo(f"  Pending: {format_currency(txn.pending_amount)}")
    if txn.has_commission:
        click.echo(f"  Commission: {format_currency(txn.commission_amount)} ({txn.employee_name or '-'})")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
