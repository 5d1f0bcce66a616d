"""Utility functions for khata."""

from khata.utils.date_parser import parse_date
from khata.utils.amount_parser import parse_amount
from khata.utils.formatting import format_inr

__all__ = ["parse_date", "parse_amount", "format_inr"]
