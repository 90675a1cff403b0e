"""Tests for KPI calculation and comparison periods."""

from datetime import date
from decimal import Decimal

import pytest

from finreport.domain.entities import DateRange
from finreport.domain.kpis import (
    burn_rate,
    calculate_kpis,
    change_pct,
    insight_inputs,
    previous_period,
    same_period_last_year,
)

from conftest import expense, revenue


def test_previous_period_same_length():
    current = DateRange(date(2024, 3, 1), date(2024, 3, 31))
    assert previous_period(current) == DateRange(date(2024, 1, 30), date(2024, 2, 29))


def test_previous_period_single_day():
    current = DateRange(date(2024, 1, 1), date(2024, 1, 1))
    assert previous_period(current) == DateRange(date(2023, 12, 31), date(2023, 12, 31))


def test_same_period_last_year_handles_leap_day():
    current = DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert same_period_last_year(current) == DateRange(date(2023, 2, 1), date(2023, 2, 28))


def test_comparison_periods_require_bounds():
    with pytest.raises(ValueError):
        previous_period(DateRange(start=date(2024, 1, 1)))
    with pytest.raises(ValueError):
        same_period_last_year(DateRange(end=date(2024, 1, 1)))


def test_change_pct():
    assert change_pct(Decimal("115"), Decimal("100")) == Decimal("15")
    assert change_pct(Decimal("50"), Decimal("100")) == Decimal("-50")
    assert change_pct(Decimal("10"), Decimal("-20")) == Decimal("150")
    assert change_pct(Decimal("10"), Decimal("0")) == Decimal("0")


def test_burn_rate_averages_months_with_expenses(sample_transactions):
    # Jan 400, Feb 400, Mar 50
    assert burn_rate(sample_transactions) == Decimal("850.00") / 3
    assert burn_rate([revenue("r1", "10")]) == Decimal("0")


def test_kpis_for_sample(sample_transactions):
    kpis = calculate_kpis(sample_transactions)
    assert kpis.total_revenue == Decimal("3000.00")
    assert kpis.total_expenses == Decimal("850.00")
    assert kpis.net_income == Decimal("2150.00")
    assert kpis.profit_margin == pytest.approx(Decimal("71.6666667"))
    assert kpis.runway_months is None
    assert kpis.revenue_change_pct == Decimal("0")
    assert kpis.recent_profit_trend == (
        Decimal("600.00"),
        Decimal("100.00"),
        Decimal("1450.00"),
    )


def test_runway_uses_available_funds_only():
    txns = [revenue("r1", "100000"), expense("e1", "1000")]
    kpis = calculate_kpis(txns, available_funds=Decimal("4000"))
    assert kpis.burn_rate == Decimal("1000")
    assert kpis.runway_months == Decimal("4")


def test_runway_unknown_without_burn():
    kpis = calculate_kpis([revenue("r1", "100")], available_funds=Decimal("5000"))
    assert kpis.runway_months is None


def test_changes_against_previous_period():
    current = [revenue("r1", "120"), expense("e1", "55")]
    previous = [revenue("r0", "100"), expense("e0", "50")]
    kpis = calculate_kpis(current, previous=previous)
    assert kpis.revenue_change_pct == Decimal("20")
    assert kpis.expense_change_pct == Decimal("10")
    assert kpis.profit_change_pct == Decimal("30")


def test_empty_input_is_zero():
    kpis = calculate_kpis([], previous=[])
    assert kpis.total_revenue == Decimal("0")
    assert kpis.profit_margin == Decimal("0")
    assert kpis.burn_rate == Decimal("0")
    assert kpis.recent_profit_trend == ()


def test_insight_inputs_projection(sample_transactions):
    kpis = calculate_kpis(sample_transactions, available_funds=Decimal("1000"))
    inputs = insight_inputs(kpis)
    assert inputs.net_margin == kpis.profit_margin
    assert inputs.runway_months == kpis.runway_months
    assert inputs.recent_profit_trend == kpis.recent_profit_trend
