#!/usr/bin/env python3
"""
Test suite for the interactive converter session.

Covers startup (update and load attempted independently), dispatch of each
command, the printed result and error formats, and the input loop.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from data.models.currency_table import CurrencyTable
from data.repositories import XmlRatesRepository
from exchange.converter_interface import ConverterInterface
from exchange.rates_manager import RatesManager
from feed_samples import FEED_DATE, USD_RECORD, make_feed
from market_data.rates_fetcher import FetchError, FetchResult


def fetch_result(content: bytes) -> FetchResult:
    return FetchResult(content=content, url="https://www.cbr.ru/scripts/XML_daily.asp",
                       attempts=1, actual_date=FEED_DATE)


@pytest.fixture
def repository(tmp_path) -> XmlRatesRepository:
    return XmlRatesRepository(tmp_path)


@pytest.fixture
def fetcher():
    return MagicMock()


@pytest.fixture
def interface(fetcher, repository) -> ConverterInterface:
    return ConverterInterface(RatesManager(fetcher, repository))


@pytest.fixture
def loaded_interface(interface, repository, sample_feed) -> ConverterInterface:
    repository.save_feed(sample_feed)
    interface.load_rates()
    return interface


class TestStartup:
    """Startup update and load."""

    def test_starts_with_bootstrap_table(self, interface):
        assert interface.table.is_bootstrapped

    def test_update_then_load(self, interface, fetcher, sample_feed, capsys):
        fetcher.fetch.return_value = fetch_result(sample_feed)

        interface.startup()

        assert interface.table.codes == ["RUB", "USD", "EUR", "JPY"]
        out = capsys.readouterr().out
        assert "Rates have been updated" in out
        assert "Rates have been loaded: 4 currencies actual for 18.10.2024" in out

    def test_failed_update_still_loads_snapshot(self, interface, fetcher, repository,
                                                sample_feed, capsys):
        repository.save_feed(sample_feed)
        fetcher.fetch.side_effect = FetchError("network down")

        interface.startup()

        assert "USD" in interface.table
        out = capsys.readouterr().out
        assert "FetchError: [network down]." in out
        assert "Rates have been loaded" in out

    def test_no_snapshot_and_no_network(self, interface, fetcher, capsys):
        fetcher.fetch.side_effect = FetchError("network down")

        interface.startup()

        assert interface.table.is_bootstrapped
        out = capsys.readouterr().out
        assert "FetchError" in out
        assert "DataNotFoundError" in out

    def test_startup_without_update(self, interface, fetcher, repository, sample_feed):
        repository.save_feed(sample_feed)

        interface.startup(update=False)

        fetcher.fetch.assert_not_called()
        assert len(interface.table) == 4

    def test_skipped_records_are_reported(self, interface, repository,
                                          partially_broken_feed, capsys):
        repository.save_feed(partially_broken_feed)

        interface.load_rates()

        assert "Currencies skipped: 1" in capsys.readouterr().out


class TestCommands:
    """Dispatch of parsed lines."""

    def test_convert_output_format(self, loaded_interface, capsys):
        assert loaded_interface.handle_line("10 usd to rub") is True
        assert "10 USD = 969.9480 RUB." in capsys.readouterr().out

    def test_rate_query(self, loaded_interface, capsys):
        loaded_interface.handle_line("JPY -> RUB")
        assert "1 JPY = 0.6485 RUB." in capsys.readouterr().out

    def test_comma_amount(self, loaded_interface, capsys):
        loaded_interface.handle_line("2,5 USD => RUB")
        assert "2.5 USD = 242.4870 RUB." in capsys.readouterr().out

    def test_large_amount(self, loaded_interface, capsys):
        loaded_interface.handle_line("1e25 usd -> rub")
        out = capsys.readouterr().out
        assert ("10000000000000000000000000 USD = "
                "969948000000000000000000000.0000 RUB.") in out
        assert "InvalidOperation" not in out

    def test_amount_out_of_range(self, loaded_interface, capsys):
        loaded_interface.handle_line("1e999999 usd -> rub")
        out = capsys.readouterr().out
        assert "InvalidArgumentError: [" in out
        assert "too large to convert to RUB" in out

    def test_unknown_currency(self, loaded_interface, capsys):
        assert loaded_interface.handle_line("1 USD to GBP") is True
        out = capsys.readouterr().out
        assert 'CurrencyNotFoundError: [Currency with CharCode="GBP"' in out
        assert out.rstrip().endswith("].")

    def test_command_error(self, loaded_interface, capsys):
        assert loaded_interface.handle_line("") is True
        assert "CommandError: [No command was received]." in capsys.readouterr().out

    def test_exit(self, loaded_interface):
        assert loaded_interface.handle_line("quit") is False

    def test_help(self, loaded_interface, capsys):
        loaded_interface.handle_line("help")
        out = capsys.readouterr().out
        assert "AMOUNT FROM to TO" in out
        assert "reload" in out

    def test_list(self, loaded_interface, capsys):
        loaded_interface.handle_line("list")
        out = capsys.readouterr().out
        assert "Доллар США" in out
        assert "Total: 4 currencies" in out
        assert "18.10.2024" in out

    def test_update_with_date(self, loaded_interface, fetcher, sample_feed):
        fetcher.fetch.return_value = fetch_result(sample_feed)

        loaded_interface.handle_line("update 18.10.2024")

        fetcher.fetch.assert_called_once_with(FEED_DATE)

    def test_load_replaces_table(self, loaded_interface, repository):
        old_table = loaded_interface.table
        repository.save_feed(make_feed([USD_RECORD]))

        loaded_interface.handle_line("load")

        assert loaded_interface.table is not old_table
        assert loaded_interface.table.codes == ["RUB", "USD"]

    def test_failed_load_keeps_table(self, loaded_interface, repository, capsys):
        old_table = loaded_interface.table
        repository.save_feed(b"<ValCurs>")

        loaded_interface.handle_line("load")

        assert loaded_interface.table is old_table
        assert "ParseError" in capsys.readouterr().out

    def test_reload(self, loaded_interface, fetcher):
        fetcher.fetch.return_value = fetch_result(make_feed([USD_RECORD]))

        loaded_interface.handle_line("reload")

        assert loaded_interface.table.codes == ["RUB", "USD"]

    def test_initial_table_can_be_given(self, fetcher, repository):
        table = CurrencyTable(FEED_DATE)
        interface = ConverterInterface(RatesManager(fetcher, repository), table=table)
        assert interface.table is table


class TestRunLoop:
    """The input loop."""

    def test_runs_until_exit(self, loaded_interface, capsys):
        lines = iter(["1 EUR to RUB", "bogus", "exit", "1 USD to RUB"])

        loaded_interface.run(input_func=lambda prompt: next(lines))

        out = capsys.readouterr().out
        assert "1 EUR = 105.2137 RUB." in out
        assert "CommandError" in out
        assert "1 USD =" not in out

    def test_stops_at_end_of_input(self, loaded_interface):
        def no_input(prompt):
            raise EOFError

        loaded_interface.run(input_func=no_input)
