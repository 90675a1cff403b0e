"""Income statement (DRE) command."""

import click

from finreport.cli.filter_options import filter_options
from finreport.cli.formatting import (
    WIDTH,
    echo_header,
    echo_row,
    format_amount,
    format_percentage,
)
from finreport.domain.entities import FilterCriteria


@click.command("statement")
@filter_options
@click.pass_context
def statement(ctx, criteria: FilterCriteria):
    """Show the waterfall income statement with margins."""
    service = ctx.obj["service"]
    result = service.statement(criteria)

    echo_header("Income Statement", ("Line", "Amount"))
    for line in result.lines:
        if line.is_subtotal:
            click.echo("-" * WIDTH)
        echo_row(line.label, format_amount(line.amount), indent=line.level)
    click.echo("=" * WIDTH)

    echo_header("Margins", ("Margin", "Value"))
    echo_row("Gross", format_percentage(result.margins.gross))
    echo_row("Operating", format_percentage(result.margins.operating))
    echo_row("Net", format_percentage(result.margins.net))

    reconciliation = result.reconciliation
    if reconciliation.unclassified_count:
        click.echo(
            f"\nWarning: {reconciliation.unclassified_count} expense transaction(s) "
            f"totalling {format_amount(reconciliation.unclassified_expenses)} "
            "have no statement classification.",
            err=True,
        )


def register_commands(cli):
    """Register statement command with main CLI."""
    cli.add_command(statement)
