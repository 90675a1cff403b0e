"""Shared filter options for report commands."""

import functools
from decimal import Decimal
from typing import Callable

import click

from finreport.cli.date_filters import resolve_cli_date_range
from finreport.cli.error_handling import handle_domain_error
from finreport.domain.entities import (
    AmountRange,
    DateRange,
    FilterCriteria,
    TransactionStatus,
)
from finreport.utils.amount_parser import parse_amount
from finreport.utils.date_parser import SUPPORTED_PERIODS

_STATUS_CHOICES = [status.value for status in TransactionStatus]

_FILTER_OPTIONS: list[Callable] = [
    click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"),
    click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')"),
    *[
        click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Filter to {period.replace('-', ' ')}",
        )
        for period in SUPPORTED_PERIODS
    ],
    click.option("--category", "categories", multiple=True, help="Category ID (repeatable)"),
    click.option(
        "--status",
        "statuses",
        multiple=True,
        type=click.Choice(_STATUS_CHOICES, case_sensitive=False),
        help="Transaction status (repeatable)",
    ),
    click.option("--account", "accounts", multiple=True, help="Bank account ID (repeatable)"),
    click.option(
        "--payment-method", "payment_methods", multiple=True, help="Payment method ID (repeatable)"
    ),
    click.option("--min-amount", help="Minimum amount (inclusive)"),
    click.option("--max-amount", help="Maximum amount (inclusive)"),
    click.option("--search", help="Case-insensitive text in description or notes"),
    click.option("--tag", "tags", multiple=True, help="Tag (repeatable, matches any)"),
    click.option(
        "--recurrent/--non-recurrent",
        "recurrent",
        default=None,
        help="Only recurrent or only non-recurrent transactions",
    ),
]


def filter_options(command: Callable) -> Callable:
    """Attach the filter options and pass a ``criteria`` keyword instead."""

    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        kwargs["criteria"] = build_criteria(click.get_current_context(), kwargs)
        return command(*args, **kwargs)

    for option in reversed(_FILTER_OPTIONS):
        wrapper = option(wrapper)
    return wrapper


def _parse_cli_amount(ctx, name: str, value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        handle_domain_error(ctx, ValueError(f"Invalid {name}: {e}"))
    return None


def build_criteria(ctx, options: dict) -> FilterCriteria:
    """Pop filter option values from ``options`` and build FilterCriteria."""
    period_flags = {
        period: options.pop(period.replace("-", "_")) for period in SUPPORTED_PERIODS
    }
    start, end = resolve_cli_date_range(
        ctx,
        start_date=options.pop("start_date"),
        end_date=options.pop("end_date"),
        period_flags=period_flags,
    )
    minimum = _parse_cli_amount(ctx, "--min-amount", options.pop("min_amount"))
    maximum = _parse_cli_amount(ctx, "--max-amount", options.pop("max_amount"))

    return FilterCriteria(
        date_range=DateRange(start, end) if start or end else None,
        category_ids=frozenset(options.pop("categories")),
        bank_account_ids=frozenset(options.pop("accounts")),
        payment_method_ids=frozenset(options.pop("payment_methods")),
        statuses=frozenset(
            TransactionStatus(status.lower()) for status in options.pop("statuses")
        ),
        amount_range=(
            AmountRange(minimum, maximum)
            if minimum is not None or maximum is not None
            else None
        ),
        search_term=options.pop("search"),
        tags=frozenset(options.pop("tags")),
        is_recurrent=options.pop("recurrent"),
    )
