"""Table formatter module for the currency rates list.

The list is rendered as a Rich table, or as aligned plain text (colored with
colorama unless plain output is forced) in fallback mode.
"""

from typing import TYPE_CHECKING, List

from rich.table import Table
from rich.text import Text

from data.models.currency import Currency, REFERENCE_CODE
from financial.calculations import round_for_display
from utils.date_utils import format_actual_date
from . import console_output
from .console_output import _safe_emoji, get_console, has_rich_support

if TYPE_CHECKING:
    from exchange.rates_manager import RatesListing


class TableFormatter:
    """Creates the rates table shown by the "list" command."""

    def __init__(self):
        self.console = get_console()

    def create_rates_table(self, listing: "RatesListing") -> None:
        """Print the currencies of a listing with their costs.

        Args:
            listing: Currencies, total count and as-of date
        """
        # Fallback mode may have been switched since construction
        self.console = get_console()
        title = f"Exchange rates on {format_actual_date(listing.actual_date)}"
        if has_rich_support() and self.console:
            self._create_rich_rates_table(listing.currencies, title)
        else:
            self._create_plain_rates_table(listing.currencies, title)
        self._print_footer(listing)

    def _create_rich_rates_table(self, currencies: List[Currency], title: str) -> None:
        table = Table(
            title=f"{_safe_emoji('📋')} {title}",
            show_header=True,
            header_style="bold magenta"
        )
        table.add_column("Code", style="cyan", no_wrap=True, width=5)
        table.add_column("Name", style="white", justify="left")
        table.add_column("Amount", justify="right", style="bright_white")
        table.add_column(f"Cost, {REFERENCE_CODE}", justify="right", style="yellow")
        table.add_column(f"Unit cost, {REFERENCE_CODE}", justify="right", style="bright_yellow")

        for currency in currencies:
            table.add_row(
                currency.code,
                Text(currency.name),
                str(currency.amount),
                f"{round_for_display(currency.lot_cost)}",
                f"{round_for_display(currency.unit_cost)}"
            )

        self.console.print(table)

    def _create_plain_rates_table(self, currencies: List[Currency], title: str) -> None:
        # Colors are switched off entirely in plain fallback mode
        Fore, Style = console_output.Fore, console_output.Style
        print(f"\n{Fore.MAGENTA}{title}:{Style.RESET_ALL}")

        name_width = max([len("Name")] + [len(c.name) for c in currencies])
        header_line = (f"{'Code':<5} {'Name':<{name_width}} {'Amount':>8} "
                       f"{'Cost, ' + REFERENCE_CODE:>14} {'Unit cost, ' + REFERENCE_CODE:>16}")
        print(header_line)
        print("-" * len(header_line))
        for currency in currencies:
            print(f"{Fore.CYAN}{currency.code:<5}{Style.RESET_ALL} {currency.name:<{name_width}} "
                  f"{currency.amount:>8} {round_for_display(currency.lot_cost):>14} "
                  f"{round_for_display(currency.unit_cost):>16}")

    def _print_footer(self, listing: "RatesListing") -> None:
        footer = (f"Total: {listing.total} currencies. "
                  f"Rates are actual for {format_actual_date(listing.actual_date)}")
        if has_rich_support() and self.console:
            self.console.print(footer, style="dim", markup=False, highlight=False)
        else:
            print(footer)
