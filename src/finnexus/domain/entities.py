"""Domain model entities for finnexus.

These are pure data classes representing business concepts, independent of
the storage backend. Both the local SQLite store and the remote table store
map their rows onto these entities, so the aggregation engine never sees
backend-specific types.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""

    COMPLETED = "completed"
    PENDING = "pending"
    PARTIAL = "partial"
    FAILED = "failed"


class TransactionCategory(str, Enum):
    """Fixed set of bookkeeping categories."""

    SALES = "Sales"
    SERVICES = "Services"
    INVESTMENT = "Investments"
    OPERATIONS = "Operations"
    PAYROLL = "Payroll"
    MARKETING = "Marketing"
    TAXES = "Taxes"
    SOFTWARE = "Software/SaaS"
    OFFICE = "Office"
    TRAVEL = "Travel"
    OTHER = "Other"


class ScopeMode(str, Enum):
    """Window used when aggregating around a reference date."""

    MONTH = "month"
    DAY = "day"


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    Optional commission and pending fields are None when absent.
    """

    id: str
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category: TransactionCategory
    status: TransactionStatus
    notes: Optional[str] = None
    employee_name: Optional[str] = None
    commission_rate: Optional[Decimal] = None
    commission_amount: Optional[Decimal] = None
    commission_payment_date: Optional[date] = None
    pending_amount: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    @property
    def has_commission(self) -> bool:
        return self.commission_amount is not None

    @property
    def received_amount(self) -> Decimal:
        """Portion of the amount already collected."""
        if self.pending_amount is None:
            return self.amount
        return self.amount - self.pending_amount


@dataclass(frozen=True)
class TaxSetting:
    """Named tax rate, expressed as a percentage."""

    id: str
    name: str
    percentage: Decimal
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FinancialSummary:
    """KPI figures derived from a set of transactions."""

    total_income: Decimal
    total_expense: Decimal
    operational_expense: Decimal
    total_commissions: Decimal
    pending_commissions: Decimal
    gross_profit: Decimal
    tax_rate: Decimal
    tax_liability_estimate: Decimal
    net_profit: Decimal
    pending_invoices: Decimal


@dataclass(frozen=True)
class PeriodSets:
    """Transaction subsets around a reference date."""

    current: tuple[Transaction, ...]
    previous: tuple[Transaction, ...]
    chart_context: tuple[Transaction, ...]


@dataclass(frozen=True)
class TrendResult:
    """Period-over-period change of a single figure."""

    label: str
    is_up: bool
    current: Decimal
    previous: Decimal

    def is_favorable(self, lower_is_better: bool = False) -> bool:
        """Return whether the change goes in the desired direction.

        Args:
            lower_is_better: True for expense-like figures, where a decrease
                (or no change) is the improvement.
        """
        if lower_is_better:
            return self.current <= self.previous
        return self.is_up


@dataclass(frozen=True)
class ChartPoint:
    """Per-day income/expense point for the monthly chart."""

    day: int
    date: date
    income: Decimal
    expense: Decimal
    balance: Decimal
    is_selected: bool = False


@dataclass(frozen=True)
class CategoryTotal:
    """Total amount for one category."""

    category: TransactionCategory
    total: Decimal


@dataclass(frozen=True)
class LoadResult:
    """Items read from a store, plus a diagnostic message if the read failed."""

    items: tuple = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard screen shows for one scope."""

    reference_date: date
    mode: ScopeMode
    current: FinancialSummary
    previous: FinancialSummary
    income_trend: TrendResult
    expense_trend: TrendResult
    profit_trend: TrendResult
    chart: tuple[ChartPoint, ...]
    recent: tuple[Transaction, ...]
    transaction_count: int
    errors: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OverviewReport:
    """All-time figures used by reports and exports."""

    summary: FinancialSummary
    expenses_by_category: tuple[CategoryTotal, ...]
    transactions: tuple[Transaction, ...]
    tax_settings: tuple[TaxSetting, ...]
    errors: tuple[str, ...] = field(default_factory=tuple)
