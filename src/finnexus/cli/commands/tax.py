"""Tax setting commands."""

import click

from finnexus.cli.error_handling import echo_load_errors, handle_domain_error
from finnexus.cli.value_parsing import parse_rate_or_exit
from finnexus.domain.aggregation import resolve_tax_rate
from finnexus.domain.errors import DomainError
from finnexus.domain.tax import TaxSettingService
from finnexus.utils.amount_parser import format_decimal, format_percent


@click.group()
def tax_group():
    """Manage tax rates used for the tax estimate."""
    pass


@tax_group.command("add")
@click.argument("name")
@click.argument("percentage")
@click.pass_context
def add_tax(ctx, name: str, percentage: str) -> None:
    """Add a named tax rate in percent.

    The effective rate is the sum of all configured rates.

    Examples:
        finnexus tax add ISS 5
        finnexus tax add PIS 0,65
    """
    db = ctx.obj["db"]
    service = TaxSettingService(db)

    rate = parse_rate_or_exit(ctx, percentage, "percentage")
    try:
        setting = service.add_tax_setting(name=name, percentage=rate)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created tax {setting.name} ({format_decimal(setting.percentage, places=2, thousands=False)}%)")
    click.echo(f"  ID: {setting.id}")


@tax_group.command("list")
@click.pass_context
def list_taxes(ctx) -> None:
    """List tax rates and the effective rate."""
    db = ctx.obj["db"]
    service = TaxSettingService(db)

    result = service.load_tax_settings()
    echo_load_errors([result.error] if result.error else [])

    if not result.items:
        click.echo("No tax rates configured.")
    else:
        click.echo(f"{'ID':<37} {'Name':<20} {'Rate':>8}")
        click.echo("-" * 67)
        for setting in result.items:
            rate = format_decimal(setting.percentage, places=2, thousands=False)
            click.echo(f"{setting.id:<37} {setting.name:<20} {rate + '%':>8}")
        click.echo("-" * 67)

    effective = resolve_tax_rate(result.items)
    suffix = "" if result.items else " (default)"
    click.echo(f"Effective rate: {format_percent(effective)}{suffix}")


@tax_group.command("delete")
@click.argument("tax_id")
@click.pass_context
def delete_tax(ctx, tax_id: str) -> None:
    """Delete a tax rate."""
    db = ctx.obj["db"]
    service = TaxSettingService(db)

    try:
        service.delete_tax_setting(tax_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted tax setting {tax_id}")


def register_commands(cli: click.Group) -> None:
    """Register tax commands with main CLI."""
    cli.add_command(tax_group, name="tax")
