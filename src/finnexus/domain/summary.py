"""Summary domain service.

Composes store reads with the aggregation engine into the views shown by the
dashboard, the reports and the exports.
"""

from datetime import date
from typing import Optional

from finnexus.database.base import Database
from finnexus.domain.aggregation import (
    build_chart_series,
    calculate_summary,
    calculate_trend,
    expense_by_category,
    filter_periods,
    recent_transactions,
    resolve_tax_rate,
    sort_by_date_desc,
)
from finnexus.domain.entities import (
    DashboardView,
    OverviewReport,
    ScopeMode,
)
from finnexus.domain.tax import TaxSettingService
from finnexus.domain.transaction import TransactionService

RECENT_LIMIT = 5


class SummaryService:
    """Service for building dashboard and report views."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)
        self.taxes = TaxSettingService(db)

    def build_dashboard(
        self,
        reference_date: date,
        mode: ScopeMode = ScopeMode.MONTH,
        today: Optional[date] = None,
        recent_limit: int = RECENT_LIMIT,
    ) -> DashboardView:
        """Build the dashboard view for a month or a single day.

        Args:
            reference_date: Date being viewed
            mode: MONTH or DAY scope
            today: Date used for pending commissions (defaults to today)
            recent_limit: Number of recent transactions to include

        Returns:
            DashboardView; store failures yield an empty view with errors set
        """
        loaded = self.transactions.load_transactions()
        taxes = self.taxes.load_tax_settings()
        tax_rate = resolve_tax_rate(taxes.items)

        periods = filter_periods(loaded.items, reference_date, mode)
        current = calculate_summary(periods.current, tax_rate=tax_rate, today=today)
        previous = calculate_summary(periods.previous, tax_rate=tax_rate, today=today)

        selected_day = reference_date.day if mode == ScopeMode.DAY else None
        chart = build_chart_series(periods.chart_context, reference_date, selected_day)

        return DashboardView(
            reference_date=reference_date,
            mode=mode,
            current=current,
            previous=previous,
            income_trend=calculate_trend(current.total_income, previous.total_income),
            expense_trend=calculate_trend(current.total_expense, previous.total_expense),
            profit_trend=calculate_trend(current.gross_profit, previous.gross_profit),
            chart=tuple(chart),
            recent=tuple(recent_transactions(periods.current, recent_limit)),
            transaction_count=len(periods.current),
            errors=_collect_errors(loaded.error, taxes.error),
        )

    def build_overview(self, today: Optional[date] = None) -> OverviewReport:
        """Build all-time figures for reports and exports.

        Args:
            today: Date used for pending commissions (defaults to today)

        Returns:
            OverviewReport with the summary, expense breakdown and transactions
        """
        loaded = self.transactions.load_transactions()
        taxes = self.taxes.load_tax_settings()
        tax_rate = resolve_tax_rate(taxes.items)

        return OverviewReport(
            summary=calculate_summary(loaded.items, tax_rate=tax_rate, today=today),
            expenses_by_category=tuple(expense_by_category(loaded.items)),
            transactions=tuple(sort_by_date_desc(loaded.items)),
            tax_settings=taxes.items,
            errors=_collect_errors(loaded.error, taxes.error),
        )


def _collect_errors(*errors: Optional[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(error for error in errors if error))
