"""Utility functions for finnexus."""

from finnexus.utils.date_parser import parse_date, parse_iso_date, parse_month
from finnexus.utils.amount_parser import parse_amount, format_currency

__all__ = ["parse_date", "parse_iso_date", "parse_month", "parse_amount", "format_currency"]
