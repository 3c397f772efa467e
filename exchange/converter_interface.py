"""Converter interface module.

This module provides the interactive layer of the converter: it reads REPL
lines, dispatches the parsed commands to the RatesManager and prints the
results. The interface holds the current CurrencyTable; loading a snapshot
builds a new table and replaces the reference.
"""

import logging
from datetime import date
from typing import Callable, Optional

from config.constants import PROMPT
from data.models.currency_table import CurrencyTable
from display.console_output import (
    print_exception, print_info, print_plain, print_success, print_warning
)
from display.table_formatter import TableFormatter
from financial.calculations import round_for_display
from utils.date_utils import ACTUAL_DATE_FORMAT, format_actual_date
from .command_parser import (
    Command, ConvertCommand, ExitCommand, HelpCommand, ListCommand,
    LoadCommand, ReloadCommand, UpdateCommand, parse_command
)
from .rates_manager import RatesManager

logger = logging.getLogger(__name__)

HELP_TEXT = f"""Commands:
  exit, q, quit              exit the program
  h, help                    show this help
  l, list                    list loaded currencies, their count and the rates date
  update [{ACTUAL_DATE_FORMAT}]        download rates (today by default) and save them
  load                       load the saved rates
  reload [{ACTUAL_DATE_FORMAT}]        update, then load
  AMOUNT FROM to TO          convert AMOUNT of FROM into TO ("->" and "=>" work too)
  FROM to TO                 show the rate of FROM in TO

Currency codes are 3 Latin letters (case doesn't matter), e.g. "100 usd -> eur".
The amount may use "." or "," as the decimal separator."""


class ConverterInterface:
    """Handles the interactive currency converter session."""

    def __init__(self, manager: RatesManager, table: Optional[CurrencyTable] = None,
                 formatter: Optional[TableFormatter] = None):
        """Initialize converter interface.

        Args:
            manager: Rates manager used for every command
            table: Initial table (a bootstrap table with only RUB if omitted)
            formatter: Formatter for the "list" command
        """
        self.manager = manager
        self.table = table if table is not None else CurrencyTable()
        self.formatter = formatter or TableFormatter()
        logger.info("Converter interface initialized")

    def startup(self, update: bool = True) -> None:
        """Prepare rates for the session.

        The update and the load are attempted independently, so a failed
        download still loads a previously saved snapshot.

        Args:
            update: Whether to download fresh rates first
        """
        if update:
            self._run_safely(self.update_rates)
        self._run_safely(self.load_rates)

    def update_rates(self, actual_date: Optional[date] = None) -> None:
        path = self.manager.update(actual_date)
        print_success(f"Rates have been updated and saved to {path}")

    def load_rates(self) -> None:
        result = self.manager.load()
        self.table = result.table
        print_success(
            f"Rates have been loaded: {result.loaded_count} currencies actual for "
            f"{format_actual_date(result.table.actual_date)}"
        )
        if result.skipped_count:
            print_warning(f"Currencies skipped: {result.skipped_count}")

    def reload_rates(self, actual_date: Optional[date] = None) -> None:
        self.update_rates(actual_date)
        self.load_rates()

    def convert(self, command: ConvertCommand) -> None:
        """Print the conversion result with four decimal places."""
        result = self.manager.convert(self.table, command.amount, command.from_code, command.to_code)
        amount_text = format(command.amount, 'f')
        print_plain(f"{amount_text} {command.from_code} = "
                    f"{round_for_display(result):f} {command.to_code}.")

    def list_rates(self) -> None:
        self.formatter.create_rates_table(self.manager.list_rates(self.table))

    def show_help(self) -> None:
        print_plain(HELP_TEXT)

    def execute(self, command: Command) -> bool:
        """Run one parsed command.

        Returns:
            bool: False when the session should end, True otherwise
        """
        if isinstance(command, ExitCommand):
            return False
        if isinstance(command, HelpCommand):
            self.show_help()
        elif isinstance(command, ListCommand):
            self.list_rates()
        elif isinstance(command, UpdateCommand):
            self.update_rates(command.actual_date)
        elif isinstance(command, LoadCommand):
            self.load_rates()
        elif isinstance(command, ReloadCommand):
            self.reload_rates(command.actual_date)
        elif isinstance(command, ConvertCommand):
            self.convert(command)
        return True

    def handle_line(self, line: str) -> bool:
        """Parse and run one input line, printing any error.

        Returns:
            bool: False when the session should end, True otherwise
        """
        result = self._run_safely(lambda: self.execute(parse_command(line)))
        return result is not False

    def _run_safely(self, action: Callable[[], Optional[bool]]) -> Optional[bool]:
        try:
            return action()
        except Exception as e:
            logger.error(f"Command failed: {type(e).__name__}: {e}")
            print_exception(e)
            return None

    def run(self, input_func: Optional[Callable[[str], str]] = None) -> None:
        """Read and handle lines until exit or end of input.

        Args:
            input_func: Source of input lines (the built-in input() if omitted)
        """
        read_line = input_func or input
        print_info('Type "help" to see the list of commands')
        while True:
            try:
                line = read_line(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print_plain("")
                break
            if not self.handle_line(line):
                break
        logger.info("Converter session finished")
