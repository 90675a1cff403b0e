"""Transaction filter engine."""

from typing import Sequence

from finreport.domain.entities import FilterCriteria, Transaction
from finreport.logging_setup import get_logger

logger = get_logger(__name__)


def _matches_search(txn: Transaction, search_term: str) -> bool:
    haystack = f"{txn.description or ''} {txn.notes or ''}".casefold()
    return search_term.casefold() in haystack


def matches(txn: Transaction, criteria: FilterCriteria) -> bool:
    """Return True if a transaction satisfies every criterion.

    Args:
        txn: Transaction to test
        criteria: Filter criteria; empty or missing fields impose no constraint

    Returns:
        True when all criteria hold
    """
    if criteria.kinds and txn.kind not in criteria.kinds:
        return False

    if criteria.date_range is not None and not criteria.date_range.contains(
        txn.due_date
    ):
        return False

    if criteria.category_ids and txn.category_id not in criteria.category_ids:
        return False

    if (
        criteria.bank_account_ids
        and txn.bank_account_id not in criteria.bank_account_ids
    ):
        return False

    if (
        criteria.payment_method_ids
        and txn.payment_method_id not in criteria.payment_method_ids
    ):
        return False

    if criteria.statuses and txn.status not in criteria.statuses:
        return False

    if criteria.amount_range is not None and not criteria.amount_range.contains(
        txn.amount
    ):
        return False

    if criteria.search_term and criteria.search_term.strip():
        if not _matches_search(txn, criteria.search_term.strip()):
            return False

    if criteria.tags and criteria.tags.isdisjoint(txn.tags):
        return False

    if criteria.is_recurrent is not None and txn.is_recurrent != criteria.is_recurrent:
        return False

    return True


def filter_transactions(
    transactions: Sequence[Transaction], criteria: FilterCriteria
) -> list[Transaction]:
    """Filter transactions, preserving input order.

    Args:
        transactions: Transactions to filter
        criteria: Conjunctive filter criteria

    Returns:
        New list with the matching transactions (possibly empty)
    """
    result = [txn for txn in transactions if matches(txn, criteria)]
    logger.debug("Filter matched %d of %d transactions", len(result), len(transactions))
    return result
