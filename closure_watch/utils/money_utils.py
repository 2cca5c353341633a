"""Currency helpers for smallest-unit (cent) amounts"""

import re
from typing import Any

INTEGRAL_CENTS = re.compile(r"-?[0-9]+")


def format_cents(amount_cents: int) -> str:
    """Format cents as a two-decimal string, e.g. -12550 -> "-125.50" """
    sign = "-" if amount_cents < 0 else ""
    units, cents = divmod(abs(amount_cents), 100)
    return f"{sign}{units}.{cents:02d}"


def parse_cents(value: Any) -> int:
    """
    Parse an upstream cent amount.

    Accepts ints and strings of ASCII digits with an optional leading minus
    ("-12550"). Floats, fractional strings, digit separators and signs
    other than "-" are rejected.

    Raises:
        ValueError: If the value is not a whole number of cents
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid cent amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGRAL_CENTS.fullmatch(value.strip()):
        return int(value.strip())
    raise ValueError(f"Invalid cent amount: {value!r}")
