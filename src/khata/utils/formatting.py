"""Rupee formatting in the Indian numbering system."""

from decimal import Decimal
from typing import Union

Number = Union[int, float, Decimal]

CRORE = Decimal("10000000")
LAKH = Decimal("100000")
THOUSAND = Decimal("1000")


def _to_decimal(amount: Number) -> Decimal:
    return amount if isinstance(amount, Decimal) else Decimal(str(amount))


def group_indian(amount: Number, decimals: int = 0) -> str:
    """Group digits the Indian way: 12,34,567."""
    value = _to_decimal(amount)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])

    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def format_inr(amount: Number) -> str:
    """Format as rupees, switching to lakh/crore notation for large values.

    >>> format_inr(4500)
    '₹4,500'
    >>> format_inr(250000)
    '₹2.50 L'
    """
    value = _to_decimal(amount)
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= CRORE:
        return f"{sign}₹{magnitude / CRORE:.2f} Cr"
    if magnitude >= LAKH:
        return f"{sign}₹{magnitude / LAKH:.2f} L"
    return f"{sign}₹{group_indian(magnitude)}"


def lakhs(amount: Number) -> str:
    """Amount expressed in lakhs with two decimals ("2.50")."""
    return f"{_to_decimal(amount) / LAKH:.2f}"


def thousands(amount: Number) -> str:
    """Amount expressed in thousands with two decimals ("12.40")."""
    return f"{_to_decimal(amount) / THOUSAND:.2f}"
