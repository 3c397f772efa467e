"""
Decimal arithmetic helpers for exchange rate data.

All costs and rates are handled as Decimal so the lot cost / unit cost
consistency check and the conversion results are not affected by binary
floating-point rounding.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from data.exceptions import ParseError

# Type alias for numeric inputs that will be converted to Decimal
NumericInput = Union[int, str, Decimal]

# Maximum allowed difference between unit_cost * amount and lot_cost
COST_TOLERANCE = Decimal('1e-6')

# Precision used when costs and conversion results are displayed
DISPLAY_QUANTUM = Decimal('0.0001')

_INTEGER_PATTERN = re.compile(r'^[+-]?[0-9]+$')


def normalize_decimal_separator(text: str) -> str:
    """Replace a comma decimal separator with a dot.

    The CBR feed writes "90,1234"; user input may use either form.
    """
    return text.strip().replace(',', '.')


def parse_decimal(text: str, field: str = "value") -> Decimal:
    """
    Parse decimal text that uses either '.' or ',' as the separator.

    Args:
        text: Text to parse
        field: Field name used in the error message

    Returns:
        Decimal: The parsed value

    Raises:
        ParseError: If the text is not a finite decimal number

    Examples:
        >>> parse_decimal("90,1234")
        Decimal('90.1234')
        >>> parse_decimal(" 0.5 ")
        Decimal('0.5')
    """
    if text is None:
        raise ParseError(f'"{field}" has no value', field=field)

    normalized = normalize_decimal_separator(text)
    # Decimal() also takes "1_000" and non-ASCII digits
    if '_' in normalized or not normalized.isascii():
        raise ParseError(
            f'"{field}" has invalid value "{text}": expected a decimal number',
            field=field
        )
    try:
        value = Decimal(normalized)
    except InvalidOperation:
        raise ParseError(
            f'"{field}" has invalid value "{text}": expected a decimal number',
            field=field
        ) from None

    if not value.is_finite():
        raise ParseError(
            f'"{field}" has invalid value "{text}": expected a finite decimal number',
            field=field
        )
    return value


def parse_integer(text: str, field: str = "value") -> int:
    """
    Parse integer text, allowing surrounding whitespace and a sign.

    Raises:
        ParseError: If the text is not an integer
    """
    if text is None:
        raise ParseError(f'"{field}" has no value', field=field)

    stripped = text.strip()
    if not _INTEGER_PATTERN.match(stripped):
        raise ParseError(
            f'"{field}" has invalid value "{text}": expected an integer',
            field=field
        )
    return int(stripped)


def to_decimal(value: NumericInput, field: str = "amount") -> Decimal:
    """Convert an amount to Decimal without rounding it.

    Floats go through str() first, the same way the rest of the money
    handling avoids binary float artifacts.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ParseError(f'"{field}" must be a number, got {value!r}', field=field)
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return parse_decimal(value, field)
    raise ParseError(f'"{field}" must be a number, got {value!r}', field=field)


def costs_consistent(unit_cost: Decimal, amount: int, lot_cost: Decimal,
                     tolerance: Decimal = COST_TOLERANCE) -> bool:
    """
    Check that unit_cost * amount equals lot_cost within the tolerance.

    Examples:
        >>> costs_consistent(Decimal('0.251234'), 100, Decimal('25.1234'))
        True
        >>> costs_consistent(Decimal('2'), 10, Decimal('999'))
        False
    """
    return abs(unit_cost * amount - lot_cost) <= tolerance


def round_for_display(value: Decimal) -> Decimal:
    """Round a cost or conversion result to four decimal places.

    Precision is raised for large values so quantize() always has room for
    every integer digit plus the four decimal places.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 5)
        return value.quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)


def format_decimal(value: Decimal, separator: str = ',') -> str:
    """Format a Decimal the way the CBR feed writes numbers.

    Examples:
        >>> format_decimal(Decimal('90.1234'))
        '90,1234'
    """
    text = format(value, 'f')
    return text.replace('.', separator) if separator != '.' else text
