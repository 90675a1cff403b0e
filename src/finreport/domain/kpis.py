"""Headline KPI calculation and comparison periods."""

from datetime import timedelta
from decimal import Decimal
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from finreport.domain.aggregation import compute_totals, monthly_trend, percentage_of
from finreport.domain.entities import (
    ZERO,
    DateRange,
    FinancialKPIs,
    InsightInputs,
    Transaction,
)


def previous_period(date_range: DateRange) -> DateRange:
    """Return the range of equal length that ends the day before ``start``.

    Raises:
        ValueError: If either bound is open
    """
    if date_range.start is None or date_range.end is None:
        raise ValueError("Comparison periods require both start and end dates")
    length = date_range.end - date_range.start
    end = date_range.start - timedelta(days=1)
    return DateRange(start=end - length, end=end)


def same_period_last_year(date_range: DateRange) -> DateRange:
    """Return the range shifted back one calendar year.

    Raises:
        ValueError: If either bound is open
    """
    if date_range.start is None or date_range.end is None:
        raise ValueError("Comparison periods require both start and end dates")
    return DateRange(
        start=date_range.start - relativedelta(years=1),
        end=date_range.end - relativedelta(years=1),
    )


def change_pct(current: Decimal, previous: Decimal) -> Decimal:
    """Percentage change from previous to current; 0 when previous is zero."""
    if previous == 0:
        return ZERO
    return (current - previous) / abs(previous) * Decimal("100")


def burn_rate(transactions: Sequence[Transaction]) -> Decimal:
    """Average expense per calendar month that has expense activity."""
    monthly = [point.expenses for point in monthly_trend(transactions) if point.expenses]
    if not monthly:
        return ZERO
    return sum(monthly, ZERO) / len(monthly)


def calculate_kpis(
    current: Sequence[Transaction],
    previous: Optional[Sequence[Transaction]] = None,
    available_funds: Optional[Decimal] = None,
) -> FinancialKPIs:
    """Calculate KPIs for a filtered period.

    Args:
        current: Transactions of the period under analysis
        previous: Transactions of the comparison period; change
            percentages are 0 without it
        available_funds: Cash available to the business. Runway is only
            computed when this is supplied; it is never derived from revenue.

    Returns:
        FinancialKPIs
    """
    totals = compute_totals(current)
    previous_totals = compute_totals(previous) if previous is not None else None

    burn = burn_rate(current)
    runway: Optional[Decimal] = None
    if available_funds is not None and burn > 0:
        runway = available_funds / burn

    if previous_totals is None:
        revenue_change = expense_change = profit_change = ZERO
    else:
        revenue_change = change_pct(totals.revenue, previous_totals.revenue)
        expense_change = change_pct(totals.expenses, previous_totals.expenses)
        profit_change = change_pct(totals.net, previous_totals.net)

    return FinancialKPIs(
        total_revenue=totals.revenue,
        total_expenses=totals.expenses,
        net_income=totals.net,
        profit_margin=percentage_of(totals.net, totals.revenue),
        burn_rate=burn,
        runway_months=runway,
        revenue_change_pct=revenue_change,
        expense_change_pct=expense_change,
        profit_change_pct=profit_change,
        recent_profit_trend=tuple(point.net for point in monthly_trend(current)),
    )


def insight_inputs(kpis: FinancialKPIs) -> InsightInputs:
    """Project KPIs onto the values the insight rules read."""
    return InsightInputs(
        net_margin=kpis.profit_margin,
        revenue_change_pct=kpis.revenue_change_pct,
        runway_months=kpis.runway_months,
        recent_profit_trend=kpis.recent_profit_trend,
    )
