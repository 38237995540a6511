"""Report and export commands."""

from pathlib import Path

import click

from finnexus.cli.error_handling import echo_load_errors
from finnexus.domain.summary import SummaryService
from finnexus.export.csv_export import export_transactions_csv
from finnexus.export.pdf_export import build_pdf_report
from finnexus.utils.amount_parser import format_currency, format_percent


@click.group()
def report_group():
    """All-time reports and exports."""
    pass


@report_group.command("summary")
@click.pass_context
def summary(ctx) -> None:
    """Show all-time figures and the expense breakdown by category."""
    db = ctx.obj["db"]
    service = SummaryService(db)

    overview = service.build_overview()
    echo_load_errors(overview.errors)
    figures = overview.summary

    click.echo("\nAll-time summary")
    click.echo("=" * 50)
    rows = [
        ("Total income", figures.total_income),
        ("Operating expense", figures.operational_expense),
        ("Commissions", figures.total_commissions),
        ("Gross result", figures.gross_profit),
        (f"Estimated tax ({format_percent(figures.tax_rate)})", figures.tax_liability_estimate),
        ("Net result", figures.net_profit),
        ("Pending invoices", figures.pending_invoices),
        ("Pending commissions", figures.pending_commissions),
    ]
    for label, value in rows:
        click.echo(f"{label:<28} {format_currency(value):>20}")

    click.echo("\nExpenses by category")
    click.echo("-" * 50)
    if not overview.expenses_by_category:
        click.echo("  (no completed expenses)")
    for item in overview.expenses_by_category:
        click.echo(f"{item.category.value:<28} {format_currency(item.total):>20}")
    click.echo(f"\nTransactions: {len(overview.transactions)}")


@report_group.command("csv")
@click.argument("output", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.pass_context
def export_csv(ctx, output: Path) -> None:
    """Export all transactions to a semicolon-separated CSV file."""
    db = ctx.obj["db"]
    service = SummaryService(db)

    overview = service.build_overview()
    echo_load_errors(overview.errors)

    try:
        count = export_transactions_csv(overview.transactions, output)
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported {count} transaction(s) to {output}")


@report_group.command("pdf")
@click.argument("output", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.pass_context
def export_pdf(ctx, output: Path) -> None:
    """Export the financial report as a PDF file."""
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]
    service = SummaryService(db)

    overview = service.build_overview()
    echo_load_errors(overview.errors)

    try:
        with open(output, "wb") as f:
            build_pdf_report(
                f,
                overview.summary,
                overview.transactions,
                expenses_by_category=overview.expenses_by_category,
                company_name=settings.app.company_name,
            )
    except OSError as e:
        click.echo(f"Error: Could not write {output}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Report written to {output}")


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
