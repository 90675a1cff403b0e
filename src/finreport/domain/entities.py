"""Domain model entities for finreport.

These are pure data classes describing the snapshot the engine reads
(transactions, categories) and the reporting artifacts it produces. They
carry no persistence concerns; the data provider builds them and the
presentation layer consumes them.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Mapping

ZERO = Decimal("0")


class TransactionKind(str, Enum):
    """Transaction variant. Authoritative for revenue/expense partitioning."""

    REVENUE = "revenue"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


class CategoryType(str, Enum):
    """Category type."""

    INCOME = "income"
    EXPENSE = "expense"


class LineRole(str, Enum):
    """Income statement line a category's expenses feed."""

    COST_OF_GOODS = "cost_of_goods"
    SALES_EXPENSE = "sales_expense"
    ADMIN_EXPENSE = "admin_expense"
    FINANCIAL_EXPENSE = "financial_expense"
    OTHER = "other"


class Severity(str, Enum):
    INFO = "info"
    OPPORTUNITY = "opportunity"
    WARNING = "warning"
    SUCCESS = "success"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Recurrence:
    """Recurrence descriptor. Informational only, never expanded."""

    is_recurrent: bool = False
    period: Optional[str] = None
    interval: Optional[int] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class Category:
    """Transaction category domain entity."""

    id: str
    name: str
    category_type: CategoryType
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Revenue or expense transaction domain entity."""

    id: str
    kind: TransactionKind
    description: str
    amount: Decimal
    due_date: date
    status: TransactionStatus
    category_id: str
    payment_method_id: str
    notes: Optional[str] = None
    settled_date: Optional[date] = None
    bank_account_id: Optional[str] = None
    tags: frozenset[str] = frozenset()
    recurrence: Recurrence = Recurrence()

    @property
    def is_revenue(self) -> bool:
        return self.kind is TransactionKind.REVENUE

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionKind.EXPENSE

    @property
    def is_recurrent(self) -> bool:
        return self.recurrence.is_recurrent


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range. A missing bound is open."""

    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, value: date) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True


@dataclass(frozen=True)
class AmountRange:
    """Inclusive amount range. A missing bound is open."""

    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None

    def contains(self, value: Decimal) -> bool:
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class FilterCriteria:
    """Conjunctive transaction filter.

    Every field defaults to "no constraint". Empty sets are treated the same
    as missing ones.
    """

    date_range: Optional[DateRange] = None
    category_ids: frozenset[str] = frozenset()
    bank_account_ids: frozenset[str] = frozenset()
    payment_method_ids: frozenset[str] = frozenset()
    statuses: frozenset[TransactionStatus] = frozenset()
    amount_range: Optional[AmountRange] = None
    search_term: Optional[str] = None
    tags: frozenset[str] = frozenset()
    is_recurrent: Optional[bool] = None
    kinds: frozenset[TransactionKind] = frozenset()


@dataclass(frozen=True)
class Totals:
    """Revenue, expense and net sums."""

    revenue: Decimal = ZERO
    expenses: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class CategoryBreakdownRow:
    category_id: str
    name: str
    amount: Decimal
    percentage_of_total: Decimal


@dataclass(frozen=True)
class MonthlyTrendPoint:
    month_key: str
    revenue: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class AggregateResult:
    """Period statistics for a filtered transaction set."""

    totals: Totals
    status_totals: Mapping[TransactionStatus, Totals]
    category_breakdown: tuple[CategoryBreakdownRow, ...]
    breakdown_kind: TransactionKind
    monthly_trend: tuple[MonthlyTrendPoint, ...]
    transaction_count: Mapping[TransactionKind, int]

    @property
    def confirmed_totals(self) -> Totals:
        return self.status_totals[TransactionStatus.CONFIRMED]

    @property
    def pending_totals(self) -> Totals:
        return self.status_totals[TransactionStatus.PENDING]

    @property
    def overdue_totals(self) -> Totals:
        return self.status_totals[TransactionStatus.OVERDUE]


@dataclass(frozen=True)
class StatementLine:
    """Single income statement line.

    ``level`` is 0 for waterfall lines and 1 for the operating expense
    sub-lines nested under their total.
    """

    key: str
    label: str
    amount: Decimal
    is_subtotal: bool = False
    level: int = 0


@dataclass(frozen=True)
class Margins:
    gross: Decimal = ZERO
    operating: Decimal = ZERO
    net: Decimal = ZERO


@dataclass(frozen=True)
class Reconciliation:
    """Expense amounts that did or did not reach a statement line."""

    total_expenses: Decimal
    classified_expenses: Decimal
    unclassified_expenses: Decimal
    unclassified_count: int


@dataclass(frozen=True)
class StatementResult:
    """Waterfall income statement (DRE)."""

    lines: tuple[StatementLine, ...]
    margins: Margins
    reconciliation: Reconciliation
    deduction_rate: Decimal
    tax_rate: Decimal

    def line(self, key: str) -> StatementLine:
        for line in self.lines:
            if line.key == key:
                return line
        raise KeyError(key)

    def amount(self, key: str) -> Decimal:
        return self.line(key).amount


@dataclass(frozen=True)
class FinancialKPIs:
    """Headline indicators for a period."""

    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    profit_margin: Decimal
    burn_rate: Decimal
    runway_months: Optional[Decimal]
    revenue_change_pct: Decimal
    expense_change_pct: Decimal
    profit_change_pct: Decimal
    recent_profit_trend: tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class InsightInputs:
    """Values the insight rules are evaluated against."""

    net_margin: Decimal
    revenue_change_pct: Decimal
    runway_months: Optional[Decimal] = None
    recent_profit_trend: tuple[Decimal, ...] = ()


@dataclass(frozen=True)
class Insight:
    id: str
    severity: Severity
    title: str
    description: str
    impact: Impact
    actionable: bool = False
    recommendation: Optional[str] = None


@dataclass(frozen=True)
class FinancialSnapshot:
    """In-memory snapshot handed over by the data provider."""

    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()

    def category_index(self) -> dict[str, Category]:
        return {category.id: category for category in self.categories}


@dataclass(frozen=True)
class FinancialReport:
    """All reporting artifacts for one set of filter criteria."""

    criteria: FilterCriteria
    aggregate: AggregateResult
    statement: StatementResult
    kpis: FinancialKPIs
    insights: tuple[Insight, ...] = field(default_factory=tuple)
