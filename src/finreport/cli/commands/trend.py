"""Monthly trend command."""

import click

from finreport.cli.filter_options import filter_options
from finreport.cli.formatting import WIDTH, format_amount
from finreport.domain.entities import FilterCriteria


@click.command("trend")
@filter_options
@click.option("--dense", is_flag=True, help="Include months without activity")
@click.pass_context
def trend(ctx, dense: bool, criteria: FilterCriteria):
    """Show revenue, expenses and net per month."""
    service = ctx.obj["service"]
    points = service.summarize(criteria, dense=dense).monthly_trend

    if not points:
        click.echo("No transactions found.")
        return

    click.echo("\nMonthly Trend:")
    click.echo("-" * WIDTH)
    click.echo(f"{'Month':<14} {'Revenue':>20} {'Expenses':>20} {'Net':>20}")
    click.echo("-" * WIDTH)
    for point in points:
        click.echo(
            f"{point.month_key:<14} {format_amount(point.revenue):>20} "
            f"{format_amount(point.expenses):>20} {format_amount(point.net):>20}"
        )


def register_commands(cli):
    """Register trend command with main CLI."""
    cli.add_command(trend)
