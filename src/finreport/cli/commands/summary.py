"""Summary command."""

import click

from finreport.cli.filter_options import filter_options
from finreport.cli.formatting import echo_header, echo_row, format_amount, format_percentage
from finreport.domain.entities import FilterCriteria, TransactionKind, TransactionStatus


@click.command("summary")
@filter_options
@click.option(
    "--expenses",
    "expense_breakdown",
    is_flag=True,
    help="Break down expense categories instead of revenue",
)
@click.pass_context
def summary(ctx, expense_breakdown: bool, criteria: FilterCriteria):
    """Show totals, status buckets and category breakdown."""
    service = ctx.obj["service"]
    kind = TransactionKind.EXPENSE if expense_breakdown else TransactionKind.REVENUE
    result = service.summarize(criteria, breakdown_kind=kind)

    if not any(result.transaction_count.values()):
        click.echo("No transactions found.")
        return

    echo_header("Totals", ("", "Revenue / Expenses / Net"))
    for label, totals in [
        ("All", result.totals),
        *[(status.value.capitalize(), result.status_totals[status]) for status in TransactionStatus],
    ]:
        echo_row(
            label,
            f"{format_amount(totals.revenue)} / {format_amount(totals.expenses)} "
            f"/ {format_amount(totals.net)}",
        )

    side = "Expense" if expense_breakdown else "Revenue"
    echo_header(f"{side} by Category", ("Category", "Amount"))
    for row in result.category_breakdown:
        echo_row(
            row.name,
            f"{format_amount(row.amount)} ({format_percentage(row.percentage_of_total)})",
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
