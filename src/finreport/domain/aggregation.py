"""Period aggregation: totals, status buckets, category breakdown, monthly trend."""

from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from finreport.domain.entities import (
    ZERO,
    AggregateResult,
    Category,
    CategoryBreakdownRow,
    DateRange,
    MonthlyTrendPoint,
    Totals,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from finreport.logging_setup import get_logger
from finreport.utils.date_parser import iter_month_keys, month_key, month_key_to_date

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"
HUNDRED = Decimal("100")


def compute_totals(transactions: Sequence[Transaction]) -> Totals:
    """Sum revenue and expense amounts, partitioned by transaction kind."""
    revenue = sum((txn.amount for txn in transactions if txn.is_revenue), ZERO)
    expenses = sum((txn.amount for txn in transactions if txn.is_expense), ZERO)
    return Totals(revenue=revenue, expenses=expenses)


def compute_status_totals(
    transactions: Sequence[Transaction],
) -> dict[TransactionStatus, Totals]:
    """Sum amounts per status. Every status gets a bucket, even when empty."""
    grouped: dict[TransactionStatus, list[Transaction]] = {
        status: [] for status in TransactionStatus
    }
    for txn in transactions:
        grouped[txn.status].append(txn)
    return {status: compute_totals(txns) for status, txns in grouped.items()}


def percentage_of(amount: Decimal, total: Decimal) -> Decimal:
    """Return amount as a percentage of total; 0 when total is zero."""
    if total == 0:
        return ZERO
    return amount / total * HUNDRED


def category_breakdown(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    kind: TransactionKind = TransactionKind.REVENUE,
) -> list[CategoryBreakdownRow]:
    """Group one side of the transactions by category.

    Args:
        transactions: Filtered transactions; only those of ``kind`` count
        categories: Category metadata used to resolve names
        kind: Which side to break down (revenue by default)

    Returns:
        Rows sorted by amount descending, then name and category id ascending.
        Percentages are relative to the side total and are 0 when it is 0.
    """
    names = {category.id: category.name for category in categories}

    amounts: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for txn in transactions:
        if txn.kind is kind:
            amounts[txn.category_id] += txn.amount

    side_total = sum(amounts.values(), ZERO)

    rows = [
        CategoryBreakdownRow(
            category_id=category_id,
            name=names.get(category_id, UNCATEGORIZED),
            amount=amount,
            percentage_of_total=percentage_of(amount, side_total),
        )
        for category_id, amount in amounts.items()
    ]
    rows.sort(key=lambda row: (-row.amount, row.name, row.category_id))
    return rows


def monthly_trend(
    transactions: Sequence[Transaction],
    dense: bool = False,
    dense_range: Optional[DateRange] = None,
) -> list[MonthlyTrendPoint]:
    """Bucket transactions by due-date calendar month.

    Args:
        transactions: Transactions of both kinds
        dense: Fill months without activity between the first and last
            observed month
        dense_range: Emit every month of this range (bounds must be set),
            in addition to any observed month

    Returns:
        Points in ascending month order
    """
    revenue: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[str, Decimal] = defaultdict(lambda: ZERO)
    keys: set[str] = set()

    for txn in transactions:
        key = month_key(txn.due_date)
        keys.add(key)
        if txn.is_revenue:
            revenue[key] += txn.amount
        else:
            expenses[key] += txn.amount

    if dense and keys:
        keys.update(
            iter_month_keys(month_key_to_date(min(keys)), month_key_to_date(max(keys)))
        )
    if dense_range is not None:
        if dense_range.start is None or dense_range.end is None:
            raise ValueError("dense_range requires both start and end dates")
        keys.update(iter_month_keys(dense_range.start, dense_range.end))

    return [
        MonthlyTrendPoint(
            month_key=key, revenue=revenue.get(key, ZERO), expenses=expenses.get(key, ZERO)
        )
        for key in sorted(keys)
    ]


def aggregate(
    filtered: Sequence[Transaction],
    categories: Sequence[Category],
    breakdown_kind: TransactionKind = TransactionKind.REVENUE,
    dense: bool = False,
    dense_range: Optional[DateRange] = None,
) -> AggregateResult:
    """Build period statistics for an already-filtered transaction set.

    Args:
        filtered: Output of the filter engine
        categories: Category metadata
        breakdown_kind: Side used for the category breakdown
        dense: Synthesize empty months in the trend (see ``monthly_trend``)
        dense_range: Explicit month range for the trend

    Returns:
        AggregateResult; zero-valued with empty lists for empty input
    """
    counts = {kind: 0 for kind in TransactionKind}
    for txn in filtered:
        counts[txn.kind] += 1

    result = AggregateResult(
        totals=compute_totals(filtered),
        status_totals=compute_status_totals(filtered),
        category_breakdown=tuple(category_breakdown(filtered, categories, breakdown_kind)),
        breakdown_kind=breakdown_kind,
        monthly_trend=tuple(monthly_trend(filtered, dense=dense, dense_range=dense_range)),
        transaction_count=counts,
    )
    logger.debug(
        "Aggregated %d transactions into %d categories and %d months",
        len(filtered),
        len(result.category_breakdown),
        len(result.monthly_trend),
    )
    return result
