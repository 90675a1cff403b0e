"""Rule-based financial insights.

Each rule is a pure predicate plus a builder and is evaluated on its own;
rules are not mutually exclusive. Thresholds:

- low profit margin: ``net_margin < 10``
- revenue growth: ``revenue_change_pct > 10``
- low runway: ``runway_months < 6`` (skipped when runway is unknown)
- profit trend: over the last 3 points (at least 2) of the recent profit
  trend, ``last - first > 0``
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Sequence

from finreport.domain.entities import Impact, Insight, InsightInputs, Severity

LOW_MARGIN_THRESHOLD = Decimal("10")
REVENUE_GROWTH_THRESHOLD = Decimal("10")
LOW_RUNWAY_MONTHS = Decimal("6")
PROFIT_TREND_WINDOW = 3

_IMPACT_RANK = {Impact.HIGH: 0, Impact.MEDIUM: 1, Impact.LOW: 2}
_SEVERITY_RANK = {
    Severity.WARNING: 0,
    Severity.OPPORTUNITY: 1,
    Severity.SUCCESS: 2,
    Severity.INFO: 3,
}


@dataclass(frozen=True)
class InsightRule:
    """A single insight rule: ``applies`` decides, ``build`` renders."""

    id: str
    applies: Callable[[InsightInputs], bool]
    build: Callable[[InsightInputs], Insight]


def _fmt(value: Decimal) -> str:
    return f"{value:.1f}"


def profit_trend_delta(trend: Sequence[Decimal]) -> Decimal:
    """Last minus first of the trailing window; 0 with fewer than 2 points."""
    window = list(trend)[-PROFIT_TREND_WINDOW:]
    if len(window) < 2:
        return Decimal("0")
    return window[-1] - window[0]


LOW_PROFIT_MARGIN = InsightRule(
    id="low-profit-margin",
    applies=lambda kpis: kpis.net_margin < LOW_MARGIN_THRESHOLD,
    build=lambda kpis: Insight(
        id="low-profit-margin",
        severity=Severity.WARNING,
        title="Low profit margin",
        description=(
            f"Your current profit margin is {_fmt(kpis.net_margin)}%, "
            "below the recommended level."
        ),
        impact=Impact.HIGH,
        actionable=True,
        recommendation=(
            "Review operating costs and pricing strategy to improve profitability."
        ),
    ),
)

REVENUE_GROWTH = InsightRule(
    id="revenue-growth",
    applies=lambda kpis: kpis.revenue_change_pct > REVENUE_GROWTH_THRESHOLD,
    build=lambda kpis: Insight(
        id="revenue-growth",
        severity=Severity.SUCCESS,
        title="Positive revenue growth",
        description=(
            f"Revenue grew {_fmt(kpis.revenue_change_pct)}% over the analyzed period."
        ),
        impact=Impact.MEDIUM,
    ),
)

LOW_RUNWAY = InsightRule(
    id="low-runway",
    applies=lambda kpis: (
        kpis.runway_months is not None and kpis.runway_months < LOW_RUNWAY_MONTHS
    ),
    build=lambda kpis: Insight(
        id="low-runway",
        severity=Severity.WARNING,
        title="Low runway",
        description=(
            f"At the current burn rate you have about {_fmt(kpis.runway_months)} "
            "months of runway."
        ),
        impact=Impact.HIGH,
        actionable=True,
        recommendation="Reduce costs or increase revenue to extend the runway.",
    ),
)

PROFIT_TREND = InsightRule(
    id="profit-trend",
    applies=lambda kpis: profit_trend_delta(kpis.recent_profit_trend) > 0,
    build=lambda kpis: Insight(
        id="profit-trend",
        severity=Severity.OPPORTUNITY,
        title="Positive profit trend",
        description="Profit has been trending upward over recent months.",
        impact=Impact.MEDIUM,
        actionable=True,
        recommendation="Keep the current strategy and consider investing in growth.",
    ),
)

DEFAULT_RULES: tuple[InsightRule, ...] = (
    LOW_PROFIT_MARGIN,
    REVENUE_GROWTH,
    LOW_RUNWAY,
    PROFIT_TREND,
)


def generate_insights(
    inputs: InsightInputs,
    sort: bool = False,
    rules: Sequence[InsightRule] = DEFAULT_RULES,
) -> list[Insight]:
    """Evaluate every rule against the inputs.

    Args:
        inputs: KPI values to evaluate
        sort: Order by impact (high first) then severity instead of rule order
        rules: Rules to evaluate, in declaration order

    Returns:
        Insights for the rules that apply
    """
    insights = [rule.build(inputs) for rule in rules if rule.applies(inputs)]
    if sort:
        insights.sort(
            key=lambda insight: (
                _IMPACT_RANK[insight.impact],
                _SEVERITY_RANK[insight.severity],
            )
        )
    return insights
