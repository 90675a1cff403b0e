"""Plain-text rendering helpers for report commands."""

from decimal import Decimal, ROUND_HALF_UP

import click

WIDTH = 80
LABEL_WIDTH = 50
VALUE_WIDTH = 20
_CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount.quantize(_CENTS, rounding=ROUND_HALF_UP):,.2f}"


def format_percentage(value: Decimal) -> str:
    return f"{value.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}%"


def echo_header(title: str, columns: tuple[str, str] = ("Item", "Amount")) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * WIDTH)
    click.echo(f"{columns[0]:<{LABEL_WIDTH}} {columns[1]:>{VALUE_WIDTH}}")
    click.echo("-" * WIDTH)


def echo_row(label: str, value: str, indent: int = 0) -> None:
    indent_str = " " * (4 * indent)
    width = LABEL_WIDTH - len(indent_str)
    click.echo(f"{indent_str}{label:<{width}} {value:>{VALUE_WIDTH}}")
