"""Report orchestration domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import Optional

from finreport.config import EngineConfig
from finreport.domain.aggregation import aggregate
from finreport.domain.entities import (
    AggregateResult,
    DateRange,
    FilterCriteria,
    FinancialKPIs,
    FinancialReport,
    FinancialSnapshot,
    Insight,
    StatementResult,
    Transaction,
    TransactionKind,
)
from finreport.domain.filtering import filter_transactions
from finreport.domain.insights import generate_insights
from finreport.domain.kpis import (
    calculate_kpis,
    insight_inputs,
    previous_period,
    same_period_last_year,
)
from finreport.domain.statement import compute_statement
from finreport.domain.validation import validate_transactions
from finreport.logging_setup import get_logger

logger = get_logger(__name__)

COMPARE_PREVIOUS_PERIOD = "previous_period"
COMPARE_LAST_YEAR = "same_period_last_year"
COMPARE_NONE = "none"
COMPARISON_MODES = (COMPARE_PREVIOUS_PERIOD, COMPARE_LAST_YEAR, COMPARE_NONE)


class ReportService:
    """Service composing filter, aggregation, statement, KPIs and insights."""

    def __init__(self, snapshot: FinancialSnapshot, config: EngineConfig):
        """Initialize report service.

        Args:
            snapshot: Transactions and categories supplied by the data provider
            config: Engine configuration

        Raises:
            InvalidTransactionError: In strict mode, if a snapshot
                transaction violates the input contract
        """
        self.snapshot = snapshot
        self.config = config
        if config.strict:
            validate_transactions(snapshot.transactions)

    def filter(self, criteria: FilterCriteria) -> list[Transaction]:
        """Return snapshot transactions matching criteria."""
        return filter_transactions(self.snapshot.transactions, criteria)

    def summarize(
        self,
        criteria: FilterCriteria,
        breakdown_kind: TransactionKind = TransactionKind.REVENUE,
        dense: bool = False,
    ) -> AggregateResult:
        """Aggregate the filtered snapshot.

        With ``dense`` and a bounded date range, the trend covers every month
        of the range; with ``dense`` alone it covers first to last observed
        month.
        """
        dense_range = None
        date_range = criteria.date_range
        if dense and date_range is not None and date_range.start and date_range.end:
            dense_range = date_range
        return aggregate(
            self.filter(criteria),
            self.snapshot.categories,
            breakdown_kind=breakdown_kind,
            dense=dense,
            dense_range=dense_range,
        )

    def statement(
        self,
        criteria: FilterCriteria,
        non_operating_revenue: Decimal = Decimal("0"),
        non_operating_expense: Decimal = Decimal("0"),
    ) -> StatementResult:
        """Compute the income statement with the configured rates and map."""
        return compute_statement(
            self.filter(criteria),
            self.config.classification,
            tax_rate=self.config.tax_rate,
            deduction_rate=self.config.deduction_rate,
            non_operating_revenue=non_operating_revenue,
            non_operating_expense=non_operating_expense,
        )

    def comparison_criteria(
        self, criteria: FilterCriteria, comparison: str = COMPARE_PREVIOUS_PERIOD
    ) -> Optional[FilterCriteria]:
        """Return criteria for the comparison period, or None if there is none.

        Raises:
            ValueError: If comparison is not one of COMPARISON_MODES
        """
        if comparison not in COMPARISON_MODES:
            raise ValueError(
                f"Unknown comparison '{comparison}'. "
                f"Supported: {', '.join(COMPARISON_MODES)}"
            )
        date_range = criteria.date_range
        if (
            comparison == COMPARE_NONE
            or date_range is None
            or date_range.start is None
            or date_range.end is None
        ):
            return None

        if comparison == COMPARE_LAST_YEAR:
            shifted: DateRange = same_period_last_year(date_range)
        else:
            shifted = previous_period(date_range)

        return replace(criteria, date_range=shifted)

    def kpis(
        self,
        criteria: FilterCriteria,
        available_funds: Optional[Decimal] = None,
        comparison: str = COMPARE_PREVIOUS_PERIOD,
    ) -> FinancialKPIs:
        """Calculate KPIs, comparing against the requested period."""
        previous_criteria = self.comparison_criteria(criteria, comparison)
        previous = (
            self.filter(previous_criteria) if previous_criteria is not None else None
        )
        return calculate_kpis(
            self.filter(criteria), previous=previous, available_funds=available_funds
        )

    def insights(
        self,
        criteria: FilterCriteria,
        available_funds: Optional[Decimal] = None,
        comparison: str = COMPARE_PREVIOUS_PERIOD,
        sort: bool = False,
    ) -> list[Insight]:
        """Generate insights from the KPIs of the filtered period."""
        kpis = self.kpis(criteria, available_funds=available_funds, comparison=comparison)
        return generate_insights(insight_inputs(kpis), sort=sort)

    def build_report(
        self,
        criteria: FilterCriteria,
        available_funds: Optional[Decimal] = None,
        comparison: str = COMPARE_PREVIOUS_PERIOD,
        dense: bool = False,
    ) -> FinancialReport:
        """Build every reporting artifact for the criteria."""
        kpis = self.kpis(criteria, available_funds=available_funds, comparison=comparison)
        report = FinancialReport(
            criteria=criteria,
            aggregate=self.summarize(criteria, dense=dense),
            statement=self.statement(criteria),
            kpis=kpis,
            insights=tuple(generate_insights(insight_inputs(kpis))),
        )
        logger.info(
            "Built report: revenue=%s expenses=%s insights=%d",
            report.aggregate.totals.revenue,
            report.aggregate.totals.expenses,
            len(report.insights),
        )
        return report
