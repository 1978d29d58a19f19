"""Utility functions for fiscalcontrol."""

from fiscalcontrol.utils.date_parser import parse_date, coerce_date, get_date_range
from fiscalcontrol.utils.amount_parser import parse_amount, require_non_negative, to_cents

__all__ = [
    "parse_date",
    "coerce_date",
    "get_date_range",
    "parse_amount",
    "require_non_negative",
    "to_cents",
]
