"""Utility functions for finreport."""

from finreport.utils.date_parser import parse_date, get_date_range, month_key
from finreport.utils.amount_parser import parse_amount, to_decimal

__all__ = ["parse_date", "get_date_range", "month_key", "parse_amount", "to_decimal"]
