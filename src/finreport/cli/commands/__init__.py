"""CLI commands for finreport."""
