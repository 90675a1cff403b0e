"""Main CLI entry point."""

import click

from finreport.config import CONFIG_ENV_VAR, load_config
from finreport.domain.errors import DomainError
from finreport.domain.report import ReportService
from finreport.loaders import load_snapshot
from finreport.logging_setup import configure_logging
from finreport.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from finreport.cli.commands import insights, statement, summary, trend


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    envvar="FINREPORT_DATA_DIR",
    help="Directory with transactions.csv and categories.csv",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar=CONFIG_ENV_VAR,
    help="TOML file with classification map and statement rates",
)
@click.option(
    "--log-level",
    envvar="FINREPORT_LOG_LEVEL",
    help="Logging level (DEBUG, INFO, WARNING, ...)",
)
@click.pass_context
def cli(ctx, data_dir: str, config_path: str | None, log_level: str | None):
    """finreport - Financial statement and reporting engine.

    Builds period summaries, monthly trends, income statements (DRE) and
    rule-based insights from a CSV snapshot of revenues and expenses.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Load the snapshot only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None:
        try:
            config = load_config(config_path)
            snapshot = load_snapshot(data_dir)
            ctx.obj["service"] = ReportService(snapshot, config)
        except (DomainError, FileNotFoundError) as e:
            handle_domain_error(ctx, e)


# Register all commands
summary.register_commands(cli)
trend.register_commands(cli)
statement.register_commands(cli)
insights.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
