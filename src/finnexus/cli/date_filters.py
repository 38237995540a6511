"""CLI helpers for resolving the dashboard scope."""

from datetime import date

import click

from finnexus.domain.entities import ScopeMode
from finnexus.utils.date_parser import parse_date, parse_month


def resolve_cli_scope(
    ctx,
    *,
    month: str | None,
    day: str | None,
    today: date | None = None,
) -> tuple[date, ScopeMode]:
    """Resolve the reference date and scope mode from --month/--day."""
    if month and day:
        click.echo("Error: --month and --day cannot be combined.", err=True)
        ctx.exit(1)

    if day:
        try:
            return parse_date(day), ScopeMode.DAY
        except ValueError as e:
            click.echo(f"Error: Invalid day: {e}", err=True)
            ctx.exit(1)

    if month:
        try:
            return parse_month(month), ScopeMode.MONTH
        except ValueError as e:
            click.echo(f"Error: Invalid month: {e}", err=True)
            ctx.exit(1)

    return today or date.today(), ScopeMode.MONTH
