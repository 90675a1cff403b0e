"""Command line interface for finreport."""
