"""Financial aggregation engine.

Pure functions that turn a transaction collection into KPI figures. Every
surface (dashboard, reports, exports, advisor context) computes its numbers
through this module so the formulas exist in exactly one place.
"""

import calendar
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from finnexus.domain.entities import (
    CategoryTotal,
    ChartPoint,
    FinancialSummary,
    PeriodSets,
    ScopeMode,
    TaxSetting,
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
    TrendResult,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_TAX_RATE = Decimal("0.15")

# Statuses whose income and commissions count as realized
REALIZED_STATUSES = frozenset({TransactionStatus.COMPLETED, TransactionStatus.PARTIAL})


def resolve_tax_rate(tax_settings: Iterable[TaxSetting]) -> Decimal:
    """Return the effective tax rate as a fraction.

    Args:
        tax_settings: Configured tax settings

    Returns:
        Sum of each percentage / 100, or DEFAULT_TAX_RATE if none configured
    """
    settings = list(tax_settings)
    if not settings:
        return DEFAULT_TAX_RATE
    return sum((Decimal(s.percentage) / HUNDRED for s in settings), ZERO)


def is_same_month(value: date, reference: date) -> bool:
    return value.year == reference.year and value.month == reference.month


def is_same_day(value: date, reference: date) -> bool:
    return value == reference


def previous_reference_date(reference_date: date, mode: ScopeMode) -> date:
    """Shift the reference date back by one period."""
    if mode == ScopeMode.MONTH:
        return reference_date - relativedelta(months=1)
    return reference_date - timedelta(days=1)


def filter_periods(
    transactions: Iterable[Transaction], reference_date: date, mode: ScopeMode
) -> PeriodSets:
    """Split transactions into current, previous and chart-context sets.

    Args:
        transactions: Full transaction collection
        reference_date: Date the user is looking at
        mode: MONTH compares calendar months, DAY compares calendar days

    Returns:
        PeriodSets; chart_context is always the month of reference_date
    """
    matches = is_same_month if mode == ScopeMode.MONTH else is_same_day
    previous_date = previous_reference_date(reference_date, mode)

    current: list[Transaction] = []
    previous: list[Transaction] = []
    chart_context: list[Transaction] = []
    for txn in transactions:
        if matches(txn.date, reference_date):
            current.append(txn)
        if matches(txn.date, previous_date):
            previous.append(txn)
        if is_same_month(txn.date, reference_date):
            chart_context.append(txn)

    return PeriodSets(
        current=tuple(current),
        previous=tuple(previous),
        chart_context=tuple(chart_context),
    )


def prorated_commission(txn: Transaction) -> Decimal:
    """Commission counted for a transaction.

    A PARTIAL transaction only counts the share of its commission matching
    the share of the amount already collected.
    """
    if txn.commission_amount is None:
        return ZERO

    if (
        txn.status == TransactionStatus.PARTIAL
        and txn.pending_amount is not None
        and txn.amount > ZERO
        and ZERO < txn.pending_amount < txn.amount
    ):
        return txn.commission_amount * txn.received_amount / txn.amount

    return txn.commission_amount


def calculate_summary(
    transactions: Iterable[Transaction],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    today: Optional[date] = None,
) -> FinancialSummary:
    """Reduce a transaction subset into a FinancialSummary.

    Tax is estimated on gross profit (income minus operating expense minus
    commissions) and is zero when gross profit is not positive.

    Args:
        transactions: Transactions to aggregate
        tax_rate: Effective tax rate as a fraction (see resolve_tax_rate)
        today: Date used to decide whether a commission is still pending.
            Defaults to the local calendar date.

    Returns:
        FinancialSummary with all figures; zeros for an empty input
    """
    if today is None:
        today = date.today()

    income = ZERO
    operational_expense = ZERO
    commissions = ZERO
    pending_commissions = ZERO
    pending_invoices = ZERO

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            if txn.status in REALIZED_STATUSES:
                income += txn.amount
            elif txn.status == TransactionStatus.PENDING:
                pending_invoices += txn.amount
        elif txn.type == TransactionType.EXPENSE and txn.status == TransactionStatus.COMPLETED:
            operational_expense += txn.amount

        if txn.commission_amount is None:
            continue
        if txn.status in REALIZED_STATUSES:
            commissions += prorated_commission(txn)
        if txn.commission_payment_date is not None and txn.commission_payment_date > today:
            pending_commissions += txn.commission_amount

    gross_profit = income - operational_expense - commissions
    tax = gross_profit * tax_rate if gross_profit > ZERO else ZERO

    return FinancialSummary(
        total_income=income,
        total_expense=operational_expense + commissions,
        operational_expense=operational_expense,
        total_commissions=commissions,
        pending_commissions=pending_commissions,
        gross_profit=gross_profit,
        tax_rate=tax_rate,
        tax_liability_estimate=tax,
        net_profit=gross_profit - tax,
        pending_invoices=pending_invoices,
    )


def calculate_trend(current: Decimal, previous: Decimal) -> TrendResult:
    """Compare a figure against its previous-period value.

    The label is a signed percentage with one decimal place, "+100%" when
    growing from zero and "0%" when both are zero.
    """
    if previous == ZERO:
        label = "+100%" if current > ZERO else "0%"
    else:
        percent = (current - previous) / previous * HUNDRED
        label = f"{percent:+.1f}%"

    return TrendResult(
        label=label,
        is_up=current >= previous,
        current=current,
        previous=previous,
    )


def build_chart_series(
    transactions: Iterable[Transaction],
    reference_date: date,
    selected_day: Optional[int] = None,
) -> list[ChartPoint]:
    """Build one chart point per calendar day of the reference month.

    Only COMPLETED transactions are plotted, so PARTIAL income and
    commissions show up in the KPI summary but not in the chart.

    Args:
        transactions: Chart-context transactions
        reference_date: Any date within the month to plot
        selected_day: Day of month to flag as selected (DAY mode)

    Returns:
        Contiguous list of ChartPoint, days without activity are zero
    """
    income_by_day: dict[int, Decimal] = defaultdict(lambda: ZERO)
    expense_by_day: dict[int, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        if not is_same_month(txn.date, reference_date):
            continue
        if txn.status != TransactionStatus.COMPLETED:
            continue
        if txn.type == TransactionType.INCOME:
            income_by_day[txn.date.day] += txn.amount
        else:
            expense_by_day[txn.date.day] += txn.amount

    days_in_month = calendar.monthrange(reference_date.year, reference_date.month)[1]
    points = []
    for day in range(1, days_in_month + 1):
        income = income_by_day[day]
        expense = expense_by_day[day]
        points.append(
            ChartPoint(
                day=day,
                date=reference_date.replace(day=day),
                income=income,
                expense=expense,
                balance=income - expense,
                is_selected=selected_day == day,
            )
        )
    return points


def expense_by_category(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Total COMPLETED expenses per category, largest first."""
    totals: dict[TransactionCategory, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.type == TransactionType.EXPENSE and txn.status == TransactionStatus.COMPLETED:
            totals[txn.category] += txn.amount

    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0].value))
    return [CategoryTotal(category=category, total=total) for category, total in ordered]


def sort_by_date_desc(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return transactions newest first."""
    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


def recent_transactions(
    transactions: Iterable[Transaction], limit: int = 5
) -> list[Transaction]:
    """Return the most recent transactions."""
    return sort_by_date_desc(transactions)[:limit]


def filter_transactions(
    transactions: Sequence[Transaction],
    type: Optional[TransactionType] = None,
    status: Optional[TransactionStatus] = None,
    search: Optional[str] = None,
) -> list[Transaction]:
    """Filter transactions for listing.

    Args:
        transactions: Transactions to filter
        type: Only keep this transaction type
        status: Only keep this status
        search: Case-insensitive match on description or category

    Returns:
        Matching transactions, in input order
    """
    needle = search.strip().lower() if search else None
    result = []
    for txn in transactions:
        if type is not None and txn.type != type:
            continue
        if status is not None and txn.status != status:
            continue
        if needle and needle not in txn.description.lower() and needle not in txn.category.value.lower():
            continue
        result.append(txn)
    return result
