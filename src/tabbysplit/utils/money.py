from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction
from typing import Union

from tabbysplit.errors import InvalidAmount


CENT = Decimal("0.01")

# "$1,234.50", "-8.19", "(8.19)", "12,50 EUR"
_AMOUNT_RE = re.compile(r"^(?P<neg>[-(])?\s*[^\d\-(.,]*\s*(?P<number>\d[\d,\s]*(?:[.,]\d{1,2})?|[.,]\d{1,2})\s*\)?\s*[A-Za-z]*$")


def parse_amount(text: str) -> Decimal:
    """
    Parse a receipt amount as printed into a Decimal.

    Supported forms:
    - 12.50, -8.19, (8.19)
    - $1,234.50, €12.50
    - 12,50 EUR (comma as the decimal separator)
    """
    cleaned = text.strip()
    match = _AMOUNT_RE.match(cleaned)
    if not match:
        raise InvalidAmount(f"Cannot parse amount {text!r}")

    number = match.group("number").replace(" ", "")
    # a trailing ",dd" group is a decimal comma, every other comma groups thousands
    decimal_comma = re.search(r",\d{1,2}$", number)
    if decimal_comma and "." not in number:
        number = number[: decimal_comma.start()].replace(",", "") + "." + number[decimal_comma.start() + 1 :]
    else:
        number = number.replace(",", "")

    value = Decimal(number)
    return -value if match.group("neg") else value


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount(f"Expected an amount, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            result = parse_amount(value)
    else:
        raise TypeError(f"Unsupported amount type {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {value!r}")
    return result


def to_cents(value: Union[Decimal, int, float, str], rounding: str = ROUND_HALF_UP) -> int:
    return int(to_decimal(value).quantize(CENT, rounding=rounding).scaleb(2))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def round_cents(value: Fraction) -> int:
    """Round exact fractional cents to whole cents, halves away from zero."""
    if value < 0:
        return -math.floor(-value + Fraction(1, 2))
    return math.floor(value + Fraction(1, 2))
