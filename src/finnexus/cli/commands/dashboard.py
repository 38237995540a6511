"""Dashboard command."""

import click

from finnexus.cli.date_filters import resolve_cli_scope
from finnexus.cli.error_handling import echo_load_errors
from finnexus.cli.value_parsing import parse_date_or_exit
from finnexus.domain.entities import DashboardView, ScopeMode, TransactionType, TrendResult
from finnexus.domain.summary import SummaryService
from finnexus.utils.amount_parser import format_currency, format_percent
from finnexus.utils.date_parser import format_local_date


def _trend(trend: TrendResult, lower_is_better: bool = False) -> str:
    arrow = "▲" if trend.is_up else "▼"
    color = "green" if trend.is_favorable(lower_is_better=lower_is_better) else "red"
    return click.style(f"{arrow} {trend.label}", fg=color)


def _scope_title(view: DashboardView) -> str:
    if view.mode == ScopeMode.DAY:
        return f"Day {format_local_date(view.reference_date)}"
    return view.reference_date.strftime("%B %Y")


def _display_cards(view: DashboardView) -> None:
    current = view.current
    previous_label = "previous day" if view.mode == ScopeMode.DAY else "previous month"

    click.echo(f"{'Income':<24} {format_currency(current.total_income):>18}  {_trend(view.income_trend)}")
    click.echo(
        f"{'Expenses':<24} {format_currency(current.total_expense):>18}  "
        f"{_trend(view.expense_trend, lower_is_better=True)}"
    )
    click.echo(f"{'  Operating':<24} {format_currency(current.operational_expense):>18}")
    click.echo(f"{'  Commissions':<24} {format_currency(current.total_commissions):>18}")
    click.echo(f"{'Gross result':<24} {format_currency(current.gross_profit):>18}  {_trend(view.profit_trend)}")
    click.echo(
        f"{'Estimated tax (' + format_percent(current.tax_rate) + ')':<24} "
        f"{format_currency(current.tax_liability_estimate):>18}"
    )
    click.echo(f"{'Net result':<24} {format_currency(current.net_profit):>18}")
    click.echo(f"{'Pending invoices':<24} {format_currency(current.pending_invoices):>18}")
    click.echo(f"{'Pending commissions':<24} {format_currency(current.pending_commissions):>18}")
    click.echo(f"Trends compare against the {previous_label}.")


def _display_recent(view: DashboardView) -> None:
    click.echo("\nRecent transactions:")
    if not view.recent:
        click.echo("  (none)")
        return
    for txn in view.recent:
        sign = "+" if txn.type == TransactionType.INCOME else "-"
        click.echo(
            f"  {format_local_date(txn.date):<11} {sign}{format_currency(txn.amount):>16}  "
            f"{txn.status.value:<10} {txn.description[:40]}"
        )


def _display_chart(view: DashboardView) -> None:
    click.echo(f"\n{'Day':<5} {'Income':>16} {'Expense':>16} {'Balance':>16}")
    click.echo("-" * 56)
    for point in view.chart:
        marker = "*" if point.is_selected else " "
        click.echo(
            f"{point.day:<3}{marker}  {format_currency(point.income):>16} "
            f"{format_currency(point.expense):>16} {format_currency(point.balance):>16}"
        )
    click.echo("Chart counts completed transactions only.")


@click.command("dashboard")
@click.option("--month", help="Month to show (YYYY-MM); defaults to the current month")
@click.option("--day", help="Single day to show (YYYY-MM-DD, DD/MM/YYYY or relative)")
@click.option("--chart", is_flag=True, help="Show the per-day income/expense table")
@click.option("--today", "today_str", help="Date used to decide which commissions are still pending")
@click.pass_context
def dashboard(ctx, month: str | None, day: str | None, chart: bool, today_str: str | None):
    """Show KPI cards for a month or a day, with trends vs the previous period.

    Examples:
        finnexus dashboard
        finnexus dashboard --month 2024-03 --chart
        finnexus dashboard --day yesterday
    """
    db = ctx.obj["db"]
    service = SummaryService(db)

    today = parse_date_or_exit(ctx, today_str, "today date") if today_str else None
    reference_date, mode = resolve_cli_scope(ctx, month=month, day=day, today=today)

    view = service.build_dashboard(reference_date, mode=mode, today=today)
    echo_load_errors(view.errors)

    title = _scope_title(view)
    click.echo(f"\nDashboard - {title}")
    click.echo("=" * 70)
    _display_cards(view)
    click.echo(f"\nTransactions in period: {view.transaction_count}")
    _display_recent(view)

    if chart:
        _display_chart(view)


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
