"""Amount parsing utilities."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional
import re

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(\d+\.?\d*|\.\d+)")
CENT = Decimal("0.01")


def parse_amount(amount_str: Optional[str]) -> Decimal:
    """Parse an amount string into a non-negative Decimal.

    Handles various formats:
    - "5000"
    - "-5,000.00"
    - "₹1,23,456.50"
    - "INR 2500 Dr"

    Everything except digits, decimal points and minus signs is stripped,
    the leading number is read, its sign dropped and the result rounded to
    paise. Unparseable input yields 0 rather than an error.

    Args:
        amount_str: Amount string

    Returns:
        Decimal magnitude
    """
    if not amount_str:
        return Decimal("0")

    cleaned = _NON_NUMERIC.sub("", str(amount_str))
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return Decimal("0")

    try:
        return abs(Decimal(match.group(0))).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return Decimal("0")


def is_negative_amount(amount_str: Optional[str]) -> bool:
    """Return True if the raw amount carries a leading minus sign."""
    return bool(amount_str) and str(amount_str).strip().startswith("-")


def parse_optional_decimal(value: Optional[str]) -> Optional[Decimal]:
    """Parse a rate-like value ("18", "18%", "0.1").

    Returns None if the value is absent, invalid or not finite ("NaN", "Infinity").
    """
    if value is None:
        return None
    cleaned = str(value).strip().rstrip("%").strip()
    if not cleaned:
        return None
    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None
