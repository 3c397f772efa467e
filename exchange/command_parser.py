"""
REPL command parsing.

A line is split on whitespace and matched against a small grammar:

    exit | q | quit
    h | help
    l | list
    update [dd.MM.yyyy]
    load
    reload [dd.MM.yyyy]
    AMOUNT FROM (to | -> | =>) TO
    FROM (to | -> | =>) TO

Keywords are case-insensitive and currency codes are upper-cased before
they are validated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from data.exceptions import ConverterError, ParseError
from data.models.currency import Currency
from financial.calculations import parse_decimal
from utils.date_utils import ACTUAL_DATE_FORMAT, parse_actual_date

EXIT_KEYWORDS = frozenset({'exit', 'q', 'quit'})
HELP_KEYWORDS = frozenset({'h', 'help'})
LIST_KEYWORDS = frozenset({'l', 'list'})
UPDATE_KEYWORD = 'update'
LOAD_KEYWORD = 'load'
RELOAD_KEYWORD = 'reload'
ARROW_KEYWORDS = frozenset({'to', '->', '=>'})


class CommandError(ConverterError):
    """Exception raised when a REPL line can't be parsed into a command."""
    pass


@dataclass(frozen=True)
class ExitCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class ListCommand:
    pass


@dataclass(frozen=True)
class UpdateCommand:
    actual_date: Optional[date] = None


@dataclass(frozen=True)
class LoadCommand:
    pass


@dataclass(frozen=True)
class ReloadCommand:
    actual_date: Optional[date] = None


@dataclass(frozen=True)
class ConvertCommand:
    """Convert `amount` units of `from_code` into `to_code`.

    A bare "FROM to TO" line is a rate query and gets amount 1.
    """
    amount: Decimal
    from_code: str
    to_code: str
    is_rate_query: bool = False


Command = Union[
    ExitCommand, HelpCommand, ListCommand, UpdateCommand,
    LoadCommand, ReloadCommand, ConvertCommand
]


def _parse_date_argument(token: str, position: int) -> date:
    try:
        return parse_actual_date(token)
    except ParseError:
        raise CommandError(
            f'Argument #{position} ("{token}") must be a date in {ACTUAL_DATE_FORMAT} format'
        ) from None


def _parse_amount_argument(token: str, position: int) -> Decimal:
    try:
        return parse_decimal(token, 'amount')
    except ParseError:
        raise CommandError(f'Argument #{position} ("{token}") must be a number') from None


def _parse_code_argument(token: str, position: int) -> str:
    code = token.upper()
    if not Currency.is_valid_code(code):
        raise CommandError(
            f'Argument #{position} ("{token}") must be a currency code of 3 Latin letters'
        )
    return code


def _parse_dated_command(keyword: str, args: List[str]) -> Optional[date]:
    if not args:
        return None
    if len(args) > 1:
        raise CommandError(f'"{keyword}" takes at most one argument, got {len(args)}')
    return _parse_date_argument(args[0], 1)


def parse_command(line: str) -> Command:
    """
    Parse one REPL line.

    Args:
        line: Raw user input

    Returns:
        The parsed command

    Raises:
        CommandError: If the line is empty, unknown or has a bad argument
    """
    tokens = line.split()
    if not tokens:
        raise CommandError("No command was received")

    keyword = tokens[0].lower()
    args = tokens[1:]

    if len(tokens) == 1:
        if keyword in EXIT_KEYWORDS:
            return ExitCommand()
        if keyword in HELP_KEYWORDS:
            return HelpCommand()
        if keyword in LIST_KEYWORDS:
            return ListCommand()
        if keyword == LOAD_KEYWORD:
            return LoadCommand()

    if keyword == UPDATE_KEYWORD:
        return UpdateCommand(_parse_dated_command(keyword, args))
    if keyword == RELOAD_KEYWORD:
        return ReloadCommand(_parse_dated_command(keyword, args))

    if len(tokens) == 3 and tokens[1].lower() in ARROW_KEYWORDS:
        from_code = _parse_code_argument(tokens[0], 1)
        to_code = _parse_code_argument(tokens[2], 3)
        return ConvertCommand(Decimal(1), from_code, to_code, is_rate_query=True)

    if len(tokens) == 4 and tokens[2].lower() in ARROW_KEYWORDS:
        amount = _parse_amount_argument(tokens[0], 1)
        from_code = _parse_code_argument(tokens[1], 2)
        to_code = _parse_code_argument(tokens[3], 4)
        return ConvertCommand(amount, from_code, to_code)

    raise CommandError(f'Unknown command "{line.strip()}". Type "help" to see the list of commands')
