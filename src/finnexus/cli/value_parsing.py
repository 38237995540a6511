"""CLI helpers for parsing option values, exiting on bad input."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from finnexus.domain.entities import TransactionCategory, TransactionStatus, TransactionType
from finnexus.utils.amount_parser import parse_amount, parse_percentage
from finnexus.utils.date_parser import parse_date

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)
STATUS_CHOICE = click.Choice([s.value for s in TransactionStatus], case_sensitive=False)
CATEGORY_CHOICE = click.Choice([c.value for c in TransactionCategory], case_sensitive=False)


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)


def parse_rate_or_exit(ctx: click.Context, value: str, label: str = "rate") -> Decimal:
    """Parse a percentage option, or exit with a CLI error."""
    try:
        return parse_percentage(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)
