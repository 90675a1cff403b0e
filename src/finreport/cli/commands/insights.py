"""Insights command."""

import click

from finreport.cli.error_handling import handle_domain_error
from finreport.cli.filter_options import filter_options
from finreport.domain.entities import FilterCriteria
from finreport.domain.report import COMPARE_PREVIOUS_PERIOD, COMPARISON_MODES
from finreport.utils.amount_parser import parse_amount


@click.command("insights")
@filter_options
@click.option(
    "--available-funds",
    help="Cash available to the business, used to compute runway",
)
@click.option(
    "--compare",
    type=click.Choice(COMPARISON_MODES),
    default=COMPARE_PREVIOUS_PERIOD,
    show_default=True,
    help="Period used for change percentages (needs a start and end date)",
)
@click.option("--sort", is_flag=True, help="Sort by impact instead of rule order")
@click.pass_context
def insights(
    ctx,
    available_funds: str | None,
    compare: str,
    sort: bool,
    criteria: FilterCriteria,
):
    """Show rule-based financial insights."""
    service = ctx.obj["service"]

    funds = None
    if available_funds is not None:
        try:
            funds = parse_amount(available_funds)
        except ValueError as e:
            handle_domain_error(ctx, ValueError(f"Invalid --available-funds: {e}"))

    results = service.insights(
        criteria, available_funds=funds, comparison=compare, sort=sort
    )
    if not results:
        click.echo("No insights for the selected period.")
        return

    for insight in results:
        click.echo(
            f"[{insight.severity.value.upper()}] {insight.title} "
            f"(impact: {insight.impact.value})"
        )
        click.echo(f"    {insight.description}")
        if insight.recommendation:
            click.echo(f"    Recommendation: {insight.recommendation}")


def register_commands(cli):
    """Register insights command with main CLI."""
    cli.add_command(insights)
