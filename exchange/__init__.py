"""
Exchange module for rate queries and the interactive converter.

This module provides:
- RatesManager: Update, load and query exchange rates
- Command parsing for REPL input lines
- ConverterInterface: The interactive converter session
"""

from .rates_manager import RatesManager, RatesListing
from .command_parser import CommandError, parse_command
from .converter_interface import ConverterInterface

__all__ = [
    'RatesManager',
    'RatesListing',
    'CommandError',
    'parse_command',
    'ConverterInterface'
]
