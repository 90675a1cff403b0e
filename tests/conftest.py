"""Shared pytest fixtures for finreport tests."""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from finreport import logging_setup
from finreport.config import EngineConfig
from finreport.domain.classification import ClassificationMap
from finreport.domain.entities import (
    Category,
    CategoryType,
    FinancialSnapshot,
    LineRole,
    Recurrence,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from finreport.domain.report import ReportService


def make_transaction(
    id: str = "t1",
    kind: TransactionKind = TransactionKind.REVENUE,
    amount: str = "100.00",
    due_date: date = date(2024, 1, 10),
    category_id: str = "services",
    status: TransactionStatus = TransactionStatus.CONFIRMED,
    description: str = "Consulting",
    notes: str | None = None,
    payment_method_id: str = "pix",
    bank_account_id: str | None = None,
    tags: frozenset[str] = frozenset(),
    recurrent: bool = False,
) -> Transaction:
    """Build a transaction with sensible defaults."""
    return Transaction(
        id=id,
        kind=kind,
        description=description,
        amount=Decimal(amount),
        due_date=due_date,
        status=status,
        category_id=category_id,
        payment_method_id=payment_method_id,
        notes=notes,
        bank_account_id=bank_account_id,
        tags=tags,
        recurrence=Recurrence(is_recurrent=recurrent, period="monthly" if recurrent else None),
    )


def revenue(id: str, amount: str, **kwargs) -> Transaction:
    return make_transaction(id=id, kind=TransactionKind.REVENUE, amount=amount, **kwargs)


def expense(id: str, amount: str, **kwargs) -> Transaction:
    kwargs.setdefault("category_id", "cogs")
    kwargs.setdefault("description", "Supplies")
    return make_transaction(id=id, kind=TransactionKind.EXPENSE, amount=amount, **kwargs)


@pytest.fixture
def categories():
    """Sample category metadata."""
    return [
        Category(id="services", name="Services", category_type=CategoryType.INCOME),
        Category(id="products", name="Products", category_type=CategoryType.INCOME),
        Category(id="cogs", name="Cost of Sales", category_type=CategoryType.EXPENSE),
        Category(id="marketing", name="Marketing", category_type=CategoryType.EXPENSE),
        Category(id="payroll", name="Payroll", category_type=CategoryType.EXPENSE),
        Category(id="bank-fees", name="Bank Fees", category_type=CategoryType.EXPENSE),
    ]


@pytest.fixture
def classification():
    """Classification map for the sample categories."""
    return ClassificationMap(
        roles={
            "cogs": LineRole.COST_OF_GOODS,
            "marketing": LineRole.SALES_EXPENSE,
            "payroll": LineRole.ADMIN_EXPENSE,
            "bank-fees": LineRole.FINANCIAL_EXPENSE,
        }
    )


@pytest.fixture
def sample_transactions():
    """A mixed set of revenues and expenses across three months."""
    return [
        revenue(
            "r1",
            "1000.00",
            due_date=date(2024, 1, 10),
            category_id="services",
            description="Consulting retainer",
            notes="Client ACME",
            bank_account_id="main",
            tags=frozenset({"consulting"}),
            recurrent=True,
        ),
        revenue(
            "r2",
            "500.00",
            due_date=date(2024, 2, 5),
            category_id="products",
            description="Product sale",
            status=TransactionStatus.PENDING,
            payment_method_id="card",
        ),
        revenue(
            "r3",
            "1500.00",
            due_date=date(2024, 3, 20),
            category_id="services",
            description="Workshop",
            status=TransactionStatus.OVERDUE,
            bank_account_id="savings",
        ),
        expense("e1", "300.00", due_date=date(2024, 1, 15), category_id="cogs"),
        expense(
            "e2",
            "100.00",
            due_date=date(2024, 1, 20),
            category_id="marketing",
            description="Ads",
            tags=frozenset({"ads", "online"}),
        ),
        expense(
            "e3",
            "400.00",
            due_date=date(2024, 2, 28),
            category_id="payroll",
            description="Salaries",
            status=TransactionStatus.PENDING,
            recurrent=True,
        ),
        expense(
            "e4",
            "50.00",
            due_date=date(2024, 3, 1),
            category_id="bank-fees",
            description="Bank fees",
            status=TransactionStatus.CANCELLED,
        ),
    ]


@pytest.fixture
def snapshot(sample_transactions, categories):
    return FinancialSnapshot(
        transactions=tuple(sample_transactions), categories=tuple(categories)
    )


@pytest.fixture
def report_service(snapshot, classification):
    """Create a ReportService over the sample snapshot."""
    return ReportService(snapshot, EngineConfig(classification=classification))


TRANSACTIONS_CSV = """id,kind,description,amount,due_date,status,category_id,payment_method_id,notes,settled_date,bank_account_id,tags,recurrent,recurrence_period
r1,revenue,Consulting retainer,"1,000.00",2024-01-10,confirmed,services,pix,Client ACME,2024-01-12,main,consulting,yes,monthly
r2,revenue,Product sale,500.00,2024-02-05,pending,products,card,,,,,,
e1,expense,Supplies,300.00,2024-01-15,confirmed,cogs,pix,,,main,,no,
e2,expense,Ads,100.00,2024-01-20,confirmed,marketing,card,,,,ads;online,,
e3,expense,Office rent,200.00,2024-02-01,overdue,rent,pix,,,,,true,monthly
"""

CATEGORIES_CSV = """id,name,type,parent_id
services,Services,income,
products,Products,income,
cogs,Cost of Sales,expense,
marketing,Marketing,expense,
rent,Rent,expense,
"""

CONFIG_TOML = """strict = true

[statement]
deduction_rate = "0.08"
tax_rate = 0.25

[classification]
cogs = "cost_of_goods"
marketing = "sales_expense"
"""


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Write a CSV snapshot to a temporary directory."""
    (tmp_path / "transactions.csv").write_text(TRANSACTIONS_CSV, encoding="utf-8")
    (tmp_path / "categories.csv").write_text(CATEGORIES_CSV, encoding="utf-8")
    return tmp_path


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "finreport.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo CLI logging configuration so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("finreport")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False
