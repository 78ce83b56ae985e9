"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Union

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount: Union[str, int, float, Decimal]) -> Decimal:
    """Parse an amount into a Decimal.

    Handles numbers as well as strings such as:
    - "123.45"
    - "$1,234.56"
    - "-123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount: Amount as a number or string

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed
    """
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount '{amount}'")
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, (int, float)):
        # str() keeps the shortest repr so 22.99 stays 22.99
        return _to_decimal(str(amount))

    if amount is None or not str(amount).strip():
        raise ValueError("Empty amount string")

    text = str(amount).strip()
    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()
    value = _to_decimal(text)
    return -value if is_negative else value


def parse_magnitude(amount: Union[str, int, float, Decimal]) -> Decimal:
    """Parse an amount and drop its sign.

    Signals carry direction in their flow, so only the magnitude is stored.
    """
    return abs(parse_amount(amount))


def _to_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{text}': {e}")
    if not value.is_finite():
        raise ValueError(f"Could not parse amount '{text}': not a finite number")
    return value
