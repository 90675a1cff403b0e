"""Tests for period aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from finreport.domain.aggregation import (
    UNCATEGORIZED,
    aggregate,
    category_breakdown,
    compute_status_totals,
    compute_totals,
    monthly_trend,
    percentage_of,
)
from finreport.domain.entities import DateRange, TransactionKind, TransactionStatus

from conftest import expense, revenue


def test_totals_partition_by_kind(sample_transactions):
    totals = compute_totals(sample_transactions)
    assert totals.revenue == Decimal("3000.00")
    assert totals.expenses == Decimal("850.00")
    assert totals.net == Decimal("2150.00")


def test_kind_is_authoritative_over_category_type(categories):
    # An expense booked under an income category still counts as expense
    txns = [expense("e1", "40.00", category_id="services")]
    result = aggregate(txns, categories)
    assert result.totals.revenue == Decimal("0")
    assert result.totals.expenses == Decimal("40.00")


def test_status_totals(sample_transactions):
    buckets = compute_status_totals(sample_transactions)
    assert set(buckets) == set(TransactionStatus)
    assert buckets[TransactionStatus.CONFIRMED].revenue == Decimal("1000.00")
    assert buckets[TransactionStatus.CONFIRMED].expenses == Decimal("400.00")
    assert buckets[TransactionStatus.PENDING].revenue == Decimal("500.00")
    assert buckets[TransactionStatus.PENDING].expenses == Decimal("400.00")
    assert buckets[TransactionStatus.OVERDUE].revenue == Decimal("1500.00")
    assert buckets[TransactionStatus.CANCELLED].expenses == Decimal("50.00")


def test_each_transaction_lands_in_one_status_bucket(sample_transactions):
    buckets = compute_status_totals(sample_transactions)
    totals = compute_totals(sample_transactions)
    assert sum(b.revenue for b in buckets.values()) == totals.revenue
    assert sum(b.expenses for b in buckets.values()) == totals.expenses


def test_aggregate_status_properties(sample_transactions, categories):
    result = aggregate(sample_transactions, categories)
    assert result.confirmed_totals.net == Decimal("600.00")
    assert result.pending_totals.net == Decimal("100.00")
    assert result.overdue_totals.revenue == Decimal("1500.00")
    assert result.transaction_count == {
        TransactionKind.REVENUE: 3,
        TransactionKind.EXPENSE: 4,
    }


def test_breakdown_example(categories):
    txns = [
        revenue("r1", "300", category_id="products"),
        revenue("r2", "700", category_id="services"),
    ]
    rows = category_breakdown(txns, categories)
    assert [(r.category_id, r.amount, r.percentage_of_total) for r in rows] == [
        ("services", Decimal("700"), Decimal("70")),
        ("products", Decimal("300"), Decimal("30")),
    ]
    assert rows[0].name == "Services"


def test_breakdown_ties_sorted_by_name(categories):
    txns = [
        revenue("r1", "100", category_id="services"),
        revenue("r2", "100", category_id="products"),
    ]
    assert [r.name for r in category_breakdown(txns, categories)] == [
        "Products",
        "Services",
    ]


def test_breakdown_unknown_category_falls_back(categories):
    rows = category_breakdown([revenue("r1", "10", category_id="ghost")], categories)
    assert rows[0].name == UNCATEGORIZED
    assert rows[0].category_id == "ghost"


def test_breakdown_conservation_and_bounds(sample_transactions, categories):
    for kind in TransactionKind:
        rows = category_breakdown(sample_transactions, categories, kind)
        side_total = sum(t.amount for t in sample_transactions if t.kind is kind)
        assert sum(r.amount for r in rows) == side_total
        for row in rows:
            assert Decimal("0") <= row.percentage_of_total <= Decimal("100")
        assert sum(r.percentage_of_total for r in rows) == pytest.approx(Decimal("100"))
        amounts = [r.amount for r in rows]
        assert amounts == sorted(amounts, reverse=True)


def test_expense_breakdown(sample_transactions, categories):
    result = aggregate(sample_transactions, categories, breakdown_kind=TransactionKind.EXPENSE)
    assert result.breakdown_kind is TransactionKind.EXPENSE
    assert [r.category_id for r in result.category_breakdown] == [
        "payroll",
        "cogs",
        "marketing",
        "bank-fees",
    ]


def test_breakdown_without_revenue_does_not_divide_by_zero(categories):
    rows = category_breakdown([revenue("r1", "0", category_id="services")], categories)
    assert rows[0].percentage_of_total == Decimal("0")
    assert percentage_of(Decimal("5"), Decimal("0")) == Decimal("0")


def test_monthly_trend(sample_transactions):
    trend = monthly_trend(sample_transactions)
    assert [p.month_key for p in trend] == ["2024-01", "2024-02", "2024-03"]
    january = trend[0]
    assert january.revenue == Decimal("1000.00")
    assert january.expenses == Decimal("400.00")
    assert january.net == Decimal("600.00")
    assert trend[2].net == Decimal("1450.00")


def test_monthly_trend_is_strictly_ascending_across_years():
    txns = [
        revenue("r1", "1", due_date=date(2024, 2, 1)),
        revenue("r2", "1", due_date=date(2023, 12, 31)),
        expense("e1", "1", due_date=date(2024, 1, 15)),
        revenue("r3", "1", due_date=date(2023, 12, 1)),
    ]
    keys = [p.month_key for p in monthly_trend(txns)]
    assert keys == ["2023-12", "2024-01", "2024-02"]
    assert all(a < b for a, b in zip(keys, keys[1:]))


def test_monthly_trend_sparse_by_default():
    txns = [
        revenue("r1", "10", due_date=date(2024, 1, 5)),
        revenue("r2", "20", due_date=date(2024, 4, 5)),
    ]
    assert [p.month_key for p in monthly_trend(txns)] == ["2024-01", "2024-04"]


def test_monthly_trend_dense_fills_gaps():
    txns = [
        revenue("r1", "10", due_date=date(2024, 1, 5)),
        revenue("r2", "20", due_date=date(2024, 4, 5)),
    ]
    trend = monthly_trend(txns, dense=True)
    assert [p.month_key for p in trend] == ["2024-01", "2024-02", "2024-03", "2024-04"]
    assert trend[1].revenue == Decimal("0")
    assert trend[1].net == Decimal("0")


def test_monthly_trend_dense_range():
    txns = [revenue("r1", "10", due_date=date(2024, 2, 5))]
    trend = monthly_trend(
        txns, dense_range=DateRange(date(2023, 12, 15), date(2024, 3, 1))
    )
    assert [p.month_key for p in trend] == ["2023-12", "2024-01", "2024-02", "2024-03"]


def test_monthly_trend_dense_range_requires_bounds():
    with pytest.raises(ValueError):
        monthly_trend([], dense_range=DateRange(start=date(2024, 1, 1)))


def test_empty_input_yields_zero_result(categories):
    result = aggregate([], categories)
    assert result.totals.revenue == Decimal("0")
    assert result.totals.net == Decimal("0")
    assert result.category_breakdown == ()
    assert result.monthly_trend == ()
    assert result.pending_totals.expenses == Decimal("0")
    assert monthly_trend([], dense=True) == []


def test_aggregate_is_deterministic(sample_transactions, categories):
    first = aggregate(sample_transactions, categories)
    second = aggregate(list(sample_transactions), list(categories))
    assert first == second
