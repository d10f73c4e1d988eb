"""Lenient parsing of formatted currency amounts"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_money(value: Any) -> Decimal:
    """
    Parse a formatted amount such as "$148,500.00" into a Decimal.

    Every character other than a digit, "." or "-" is stripped before parsing.
    Numbers skip the stripping and are converted through repr(), so floats from
    JSON payloads keep their printed precision, exponent form included.
    Anything missing or unparseable yields 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, (int, float)):
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal("0")
    if not isinstance(value, str):
        return Decimal("0")

    cleaned = _NON_NUMERIC.sub("", value)
    if not cleaned:
        return Decimal("0")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")
