"""CSV snapshot loader.

Reads a data directory holding ``transactions.csv`` and ``categories.csv``
into a ``FinancialSnapshot``.

transactions.csv columns (header required):
    id, kind, description, amount, due_date, status, category_id,
    payment_method_id, notes, settled_date, bank_account_id, tags,
    recurrent, recurrence_period

categories.csv columns:
    id, name, type, parent_id

Optional columns may be missing or empty. ``tags`` is ``;``-separated and
``recurrent`` accepts true/false, yes/no or 1/0.
"""

import csv
from pathlib import Path
from typing import Optional

from finreport.domain.entities import (
    Category,
    CategoryType,
    FinancialSnapshot,
    Recurrence,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from finreport.domain.errors import InvalidTransactionError, ValidationError
from finreport.domain.validation import validate_transaction
from finreport.logging_setup import get_logger
from finreport.utils.amount_parser import parse_amount
from finreport.utils.date_parser import parse_date

logger = get_logger(__name__)

TRANSACTIONS_FILE = "transactions.csv"
CATEGORIES_FILE = "categories.csv"
TAG_SEPARATOR = ";"

_TRUE_VALUES = {"true", "yes", "1", "y"}
_FALSE_VALUES = {"false", "no", "0", "n", ""}


def _optional(row: dict[str, Optional[str]], column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _required(row: dict[str, Optional[str]], column: str) -> str:
    value = _optional(row, column)
    if value is None:
        raise ValueError(f"missing value for '{column}'")
    return value


def _parse_bool(value: Optional[str]) -> bool:
    normalized = (value or "").strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean '{value}'")


def parse_transaction_row(row: dict[str, Optional[str]]) -> Transaction:
    """Build a Transaction from a CSV row.

    Raises:
        ValueError: If a required value is missing or cannot be parsed
    """
    settled = _optional(row, "settled_date")
    tags = _optional(row, "tags") or ""
    return Transaction(
        id=_required(row, "id"),
        kind=TransactionKind(_required(row, "kind").lower()),
        description=_optional(row, "description") or "",
        amount=parse_amount(_required(row, "amount")),
        due_date=parse_date(_required(row, "due_date")),
        status=TransactionStatus(_required(row, "status").lower()),
        category_id=_required(row, "category_id"),
        payment_method_id=_required(row, "payment_method_id"),
        notes=_optional(row, "notes"),
        settled_date=parse_date(settled) if settled else None,
        bank_account_id=_optional(row, "bank_account_id"),
        tags=frozenset(tag.strip() for tag in tags.split(TAG_SEPARATOR) if tag.strip()),
        recurrence=Recurrence(
            is_recurrent=_parse_bool(row.get("recurrent")),
            period=_optional(row, "recurrence_period"),
        ),
    )


def parse_category_row(row: dict[str, Optional[str]]) -> Category:
    """Build a Category from a CSV row.

    Raises:
        ValueError: If a required value is missing or the type is unknown
    """
    return Category(
        id=_required(row, "id"),
        name=_required(row, "name"),
        category_type=CategoryType(_required(row, "type").lower()),
        parent_id=_optional(row, "parent_id"),
    )


def _read_rows(csv_path: Path) -> list[dict[str, Optional[str]]]:
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        return list(csv.DictReader(f))


def load_transactions(csv_path: str | Path) -> list[Transaction]:
    """Load and validate transactions from a CSV file.

    Args:
        csv_path: Path to transactions CSV

    Returns:
        Transactions in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidTransactionError: If a row cannot be parsed or violates the
            transaction contract (message includes the row number)
    """
    transactions = []
    # Row 1 is the header
    for row_num, row in enumerate(_read_rows(Path(csv_path)), start=2):
        try:
            txn = parse_transaction_row(row)
        except ValueError as e:
            raise InvalidTransactionError(f"{csv_path}, row {row_num}: {e}") from e
        try:
            validate_transaction(txn)
        except InvalidTransactionError as e:
            raise InvalidTransactionError(f"{csv_path}, row {row_num}: {e}") from e
        transactions.append(txn)

    logger.info("Loaded %d transactions from %s", len(transactions), csv_path)
    return transactions


def load_categories(csv_path: str | Path) -> list[Category]:
    """Load categories from a CSV file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If a row cannot be parsed
    """
    categories = []
    for row_num, row in enumerate(_read_rows(Path(csv_path)), start=2):
        try:
            categories.append(parse_category_row(row))
        except ValueError as e:
            raise ValidationError(f"{csv_path}, row {row_num}: {e}") from e

    logger.info("Loaded %d categories from %s", len(categories), csv_path)
    return categories


def load_snapshot(data_dir: str | Path) -> FinancialSnapshot:
    """Load a snapshot from a data directory.

    ``categories.csv`` is optional; without it breakdown rows fall back to
    "Uncategorized" names.
    """
    data_path = Path(data_dir)
    categories_path = data_path / CATEGORIES_FILE
    categories = load_categories(categories_path) if categories_path.exists() else []
    return FinancialSnapshot(
        transactions=tuple(load_transactions(data_path / TRANSACTIONS_FILE)),
        categories=tuple(categories),
    )
