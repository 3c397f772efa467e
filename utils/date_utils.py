"""Date parsing and formatting for rate feeds and commands.

The feed and the REPL use the fixed-width dd.MM.yyyy format; the CBR
request parameter uses dd/MM/yyyy.
"""

import re
from datetime import date, datetime

from config.constants import ACTUAL_DATE_FORMAT
from data.exceptions import ParseError

_ACTUAL_DATE_STRPTIME = "%d.%m.%Y"
_ACTUAL_DATE_PATTERN = re.compile(r'^\d{2}\.\d{2}\.\d{4}$')

REQUEST_DATE_FORMAT = "dd/MM/yyyy"
_REQUEST_DATE_STRFTIME = "%d/%m/%Y"


def parse_actual_date(text: str) -> date:
    """Parse a dd.MM.yyyy date.

    Only the exact fixed-width form is accepted, so "1.2.2003" is rejected.

    Raises:
        ParseError: If the text doesn't match the format or isn't a real date
    """
    if text is None or not _ACTUAL_DATE_PATTERN.match(text.strip()):
        raise ParseError(f'"{text}" doesn\'t match the date format {ACTUAL_DATE_FORMAT}', field='date')
    try:
        return datetime.strptime(text.strip(), _ACTUAL_DATE_STRPTIME).date()
    except ValueError:
        raise ParseError(f'"{text}" is not a valid {ACTUAL_DATE_FORMAT} date', field='date') from None


def format_actual_date(value: date) -> str:
    """Format a date as dd.MM.yyyy."""
    return value.strftime(_ACTUAL_DATE_STRPTIME)


def format_request_date(value: date) -> str:
    """Format a date the way the CBR endpoint expects it (dd/MM/yyyy)."""
    return value.strftime(_REQUEST_DATE_STRFTIME)
