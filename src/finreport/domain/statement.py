"""Waterfall income statement (DRE) calculator.

The statement is computed top to bottom, each subtotal feeding the next
line:

    gross_revenue
    - deductions                  (gross_revenue * deduction_rate)
    = net_revenue
    - cost_of_goods
    = gross_profit
    - operating_expenses          (sales + admin + financial)
    = operating_profit
    + non_operating_revenue
    - non_operating_expense
    = pre_tax_profit
    - taxes                       (max(0, pre_tax_profit * tax_rate))
    = net_profit

Expense categories are assigned to lines through a ``ClassificationMap``.
Expenses whose category is not mapped are left out of every line and
reported in the statement's reconciliation block instead.
"""

from decimal import Decimal
from typing import Sequence

from finreport.domain import errors
from finreport.domain.aggregation import percentage_of
from finreport.domain.classification import ClassificationMap
from finreport.domain.entities import (
    ZERO,
    LineRole,
    Margins,
    Reconciliation,
    StatementLine,
    StatementResult,
    Transaction,
)
from finreport.domain.errors import ConfigurationError
from finreport.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_TAX_RATE = Decimal("0.25")
DEFAULT_DEDUCTION_RATE = Decimal("0.08")

# Waterfall order
LINE_LABELS: dict[str, str] = {
    "gross_revenue": "Gross Revenue",
    "deductions": "Deductions",
    "net_revenue": "Net Revenue",
    "cost_of_goods": "Cost of Goods/Services",
    "gross_profit": "Gross Profit",
    "sales_expenses": "Sales Expenses",
    "admin_expenses": "Administrative Expenses",
    "financial_expenses": "Financial Expenses",
    "operating_expenses": "Operating Expenses",
    "operating_profit": "Operating Profit",
    "non_operating_revenue": "Non-operating Revenue",
    "non_operating_expense": "Non-operating Expense",
    "pre_tax_profit": "Pre-tax Profit",
    "taxes": "Taxes",
    "net_profit": "Net Profit",
}

_OPERATING_ROLES = {
    LineRole.SALES_EXPENSE: "sales_expenses",
    LineRole.ADMIN_EXPENSE: "admin_expenses",
    LineRole.FINANCIAL_EXPENSE: "financial_expenses",
}


def _check_rate(name: str, rate: Decimal) -> Decimal:
    if not isinstance(rate, Decimal):
        rate = Decimal(str(rate))
    if rate < 0 or rate > 1:
        raise ConfigurationError(errors.rate_out_of_range(name, rate))
    return rate


def sum_expenses_by_role(
    transactions: Sequence[Transaction], classification: ClassificationMap
) -> dict[LineRole, Decimal]:
    """Sum expense amounts per line role. Revenue is ignored."""
    sums = {role: ZERO for role in LineRole}
    for txn in transactions:
        if txn.is_expense:
            sums[classification.role_for(txn.category_id)] += txn.amount
    return sums


def compute_statement(
    filtered: Sequence[Transaction],
    classification: ClassificationMap,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    deduction_rate: Decimal = DEFAULT_DEDUCTION_RATE,
    non_operating_revenue: Decimal = ZERO,
    non_operating_expense: Decimal = ZERO,
) -> StatementResult:
    """Compute the income statement for a filtered transaction set.

    Args:
        filtered: Output of the filter engine
        classification: Category to line role mapping
        tax_rate: Income tax rate applied to a positive pre-tax profit
        deduction_rate: Statutory deductions on gross revenue
        non_operating_revenue: Pre-aggregated non-operating revenue
        non_operating_expense: Pre-aggregated non-operating expense

    Returns:
        StatementResult with lines in fixed order, margins and reconciliation

    Raises:
        ConfigurationError: If a rate is outside [0, 1]
    """
    tax_rate = _check_rate("tax_rate", tax_rate)
    deduction_rate = _check_rate("deduction_rate", deduction_rate)

    gross_revenue = sum((txn.amount for txn in filtered if txn.is_revenue), ZERO)
    by_role = sum_expenses_by_role(filtered, classification)

    deductions = gross_revenue * deduction_rate
    net_revenue = gross_revenue - deductions
    cost_of_goods = by_role[LineRole.COST_OF_GOODS]
    gross_profit = net_revenue - cost_of_goods

    operating = {key: by_role[role] for role, key in _OPERATING_ROLES.items()}
    operating_total = sum(operating.values(), ZERO)
    operating_profit = gross_profit - operating_total

    pre_tax_profit = operating_profit + non_operating_revenue - non_operating_expense
    taxes = max(ZERO, pre_tax_profit * tax_rate)
    net_profit = pre_tax_profit - taxes

    amounts = {
        "gross_revenue": gross_revenue,
        "deductions": deductions,
        "net_revenue": net_revenue,
        "cost_of_goods": cost_of_goods,
        "gross_profit": gross_profit,
        **operating,
        "operating_expenses": operating_total,
        "operating_profit": operating_profit,
        "non_operating_revenue": non_operating_revenue,
        "non_operating_expense": non_operating_expense,
        "pre_tax_profit": pre_tax_profit,
        "taxes": taxes,
        "net_profit": net_profit,
    }
    subtotals = {
        "net_revenue",
        "gross_profit",
        "operating_expenses",
        "operating_profit",
        "pre_tax_profit",
        "net_profit",
    }
    lines = tuple(
        StatementLine(
            key=key,
            label=label,
            amount=amounts[key],
            is_subtotal=key in subtotals,
            level=1 if key in _OPERATING_ROLES.values() else 0,
        )
        for key, label in LINE_LABELS.items()
    )

    margins = Margins(
        gross=percentage_of(gross_profit, net_revenue),
        operating=percentage_of(operating_profit, net_revenue),
        net=percentage_of(net_profit, net_revenue),
    )

    unclassified = [
        txn
        for txn in filtered
        if txn.is_expense and classification.role_for(txn.category_id) is LineRole.OTHER
    ]
    total_expenses = sum(by_role.values(), ZERO)
    unclassified_total = by_role[LineRole.OTHER]
    reconciliation = Reconciliation(
        total_expenses=total_expenses,
        classified_expenses=total_expenses - unclassified_total,
        unclassified_expenses=unclassified_total,
        unclassified_count=len(unclassified),
    )
    if unclassified:
        logger.warning(
            "%d expense transactions (total %s) have no statement classification: %s",
            len(unclassified),
            unclassified_total,
            ", ".join(sorted({txn.category_id for txn in unclassified})),
        )

    return StatementResult(
        lines=lines,
        margins=margins,
        reconciliation=reconciliation,
        deduction_rate=deduction_rate,
        tax_rate=tax_rate,
    )
