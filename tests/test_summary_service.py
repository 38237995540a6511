"""Tests for SummaryService dashboard and overview views."""

from datetime import date
from decimal import Decimal

from finnexus.domain.entities import (
    ScopeMode,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from finnexus.domain.errors import StoreError
from finnexus.domain.summary import SummaryService

TODAY = date(2024, 3, 31)


def _add(service, amount, txn_type=TransactionType.INCOME, txn_date=date(2024, 3, 10), **extra):
    return service.transactions.create_transaction(
        date=txn_date,
        description=extra.pop("description", "Entry"),
        amount=Decimal(str(amount)),
        type=txn_type,
        category=extra.pop("category", TransactionCategory.SALES),
        **extra,
    )


class TestBuildDashboard:
    """Tests for SummaryService.build_dashboard."""

    def test_month_view_with_trends(self, summary_service):
        """Test current vs previous month figures and trends."""
        _add(summary_service, 1000)
        _add(summary_service, 300, TransactionType.EXPENSE, category=TransactionCategory.OFFICE)
        _add(summary_service, 500, status=TransactionStatus.PENDING)
        _add(summary_service, 800, txn_date=date(2024, 2, 20))

        view = summary_service.build_dashboard(date(2024, 3, 15), today=TODAY)

        assert view.mode == ScopeMode.MONTH
        assert view.current.total_income == Decimal("1000")
        assert view.current.total_expense == Decimal("300")
        assert view.current.tax_liability_estimate == Decimal("105")
        assert view.current.net_profit == Decimal("595")
        assert view.current.pending_invoices == Decimal("500")
        assert view.previous.total_income == Decimal("800")
        assert view.income_trend.label == "+25.0%"
        assert view.expense_trend.label == "+100%"
        assert view.transaction_count == 3
        assert len(view.chart) == 31
        assert view.errors == ()

    def test_configured_taxes_apply(self, summary_service):
        """Test that tax settings drive the estimate."""
        summary_service.taxes.add_tax_setting("ISS", Decimal("10"))
        summary_service.taxes.add_tax_setting("PIS", Decimal("2.5"))
        _add(summary_service, 1000)

        view = summary_service.build_dashboard(date(2024, 3, 15), today=TODAY)

        assert view.current.tax_rate == Decimal("0.125")
        assert view.current.tax_liability_estimate == Decimal("125")

    def test_day_view(self, summary_service):
        """Test DAY scope with the chart still covering the month."""
        _add(summary_service, 100, txn_date=date(2024, 3, 9))
        _add(summary_service, 200, txn_date=date(2024, 3, 10))

        view = summary_service.build_dashboard(date(2024, 3, 10), mode=ScopeMode.DAY, today=TODAY)

        assert view.current.total_income == Decimal("200")
        assert view.previous.total_income == Decimal("100")
        assert view.income_trend.label == "+100.0%"
        assert [p.day for p in view.chart if p.is_selected] == [10]
        assert view.chart[8].income == Decimal("100")

    def test_recent_transactions_limited(self, summary_service):
        """Test that recent transactions are the newest of the period."""
        for day in range(1, 8):
            _add(summary_service, day, txn_date=date(2024, 3, day), description=f"Day {day}")

        view = summary_service.build_dashboard(date(2024, 3, 1), today=TODAY)

        assert [t.description for t in view.recent] == ["Day 7", "Day 6", "Day 5", "Day 4", "Day 3"]

    def test_store_failure_gives_empty_view_with_error(self, temp_db, monkeypatch):
        """Test that read failures degrade instead of raising."""

        def fail():
            raise StoreError("database is locked")

        monkeypatch.setattr(temp_db, "list_transactions", fail)
        monkeypatch.setattr(temp_db, "list_tax_settings", fail)

        view = SummaryService(temp_db).build_dashboard(date(2024, 3, 15), today=TODAY)

        assert view.current.total_income == 0
        assert view.transaction_count == 0
        assert view.errors == ("database is locked",)


class TestBuildOverview:
    """Tests for SummaryService.build_overview."""

    def test_all_time_figures(self, summary_service):
        """Test that the overview spans every month."""
        _add(summary_service, 1000, txn_date=date(2023, 12, 1))
        _add(summary_service, 500, txn_date=date(2024, 3, 1))
        _add(
            summary_service,
            200,
            TransactionType.EXPENSE,
            txn_date=date(2024, 1, 5),
            category=TransactionCategory.PAYROLL,
        )

        overview = summary_service.build_overview(today=TODAY)

        assert overview.summary.total_income == Decimal("1500")
        assert overview.summary.gross_profit == Decimal("1300")
        assert [c.category for c in overview.expenses_by_category] == [TransactionCategory.PAYROLL]
        assert [t.date for t in overview.transactions] == [
            date(2024, 3, 1),
            date(2024, 1, 5),
            date(2023, 12, 1),
        ]
        assert overview.tax_settings == ()
