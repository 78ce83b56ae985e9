"""Shared output formatting for CLI commands."""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union


def format_money(value: Union[Decimal, int, float]) -> str:
    """Format an amount as dollars with thousands separators."""
    amount = Decimal(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_frequency(frequency: Optional[Union[Enum, str]]) -> str:
    """Title-case a frequency label ('bi-weekly' -> 'Bi-Weekly')."""
    if not frequency:
        return "-"
    label = getattr(frequency, "value", frequency)
    return "-".join(part.capitalize() for part in label.split("-"))
