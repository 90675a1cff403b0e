"""Input contract checks for transactions.

The engine trusts its data provider by default. These checks are applied
by the CSV loader and by ``ReportService`` in strict mode so that bad data
fails fast instead of leaking into totals.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from finreport.domain import errors
from finreport.domain.entities import Transaction
from finreport.domain.errors import InvalidTransactionError


def validate_transaction(txn: Transaction) -> Transaction:
    """Check a single transaction against the input contract.

    Args:
        txn: Transaction to check

    Returns:
        The same transaction, unchanged

    Raises:
        InvalidTransactionError: If the amount is not a finite non-negative
            Decimal, the due date is not a date, or a required reference
            is missing
    """
    if not txn.id:
        raise InvalidTransactionError(errors.missing_field("<unknown>", "id"))
    if not txn.category_id:
        raise InvalidTransactionError(errors.missing_field(txn.id, "category_id"))

    if not isinstance(txn.amount, Decimal) or not txn.amount.is_finite():
        raise InvalidTransactionError(errors.invalid_amount(txn.id, txn.amount))
    if txn.amount < 0:
        raise InvalidTransactionError(errors.negative_amount(txn.id, txn.amount))

    # datetime is a date subclass but would break month bucketing equality
    if not isinstance(txn.due_date, date) or isinstance(txn.due_date, datetime):
        raise InvalidTransactionError(errors.invalid_due_date(txn.id, txn.due_date))

    return txn


def validate_transactions(transactions: Iterable[Transaction]) -> None:
    """Validate every transaction, raising on the first violation."""
    for txn in transactions:
        validate_transaction(txn)
