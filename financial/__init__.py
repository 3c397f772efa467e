"""
Financial calculations for the currency converter.

This module provides precise Decimal parsing and cost arithmetic used by the
currency model, rate ingestion and conversion queries.
"""

from .calculations import (
    COST_TOLERANCE,
    NumericInput,
    costs_consistent,
    format_decimal,
    normalize_decimal_separator,
    parse_decimal,
    parse_integer,
    round_for_display,
    to_decimal
)

__all__ = [
    'COST_TOLERANCE',
    'NumericInput',
    'costs_consistent',
    'format_decimal',
    'normalize_decimal_separator',
    'parse_decimal',
    'parse_integer',
    'round_for_display',
    'to_decimal'
]
