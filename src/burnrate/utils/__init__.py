"""Utility functions for burnrate."""

from burnrate.utils.date_parser import parse_date, parse_signal_date
from burnrate.utils.amount_parser import parse_amount, parse_magnitude

__all__ = ["parse_date", "parse_signal_date", "parse_amount", "parse_magnitude"]
