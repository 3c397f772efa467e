"""
Unit tests for the XML rates snapshot repository.
"""

import unittest
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
import sys

# Add the parent directory to the path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from data.ingestion import ingest_bytes
from data.models.currency import Currency
from data.models.currency_table import CurrencyTable
from data.repositories import DataNotFoundError, RepositoryError, XmlRatesRepository
from feed_samples import EUR_RECORD, JPY_RECORD, USD_RECORD, make_feed


class TestXmlRatesRepository(unittest.TestCase):
    """Test saving and loading the rates snapshot."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.temp_dir.name) / "rates_data"
        self.repository = XmlRatesRepository(self.data_dir)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_default_file_name(self):
        self.assertEqual(self.repository.rates_file, self.data_dir / "rates.xml")

    def test_load_without_snapshot(self):
        self.assertFalse(self.repository.exists())
        with self.assertRaises(DataNotFoundError) as ctx:
            self.repository.load_feed()
        self.assertIn("update", str(ctx.exception))

    def test_feed_bytes_round_trip(self):
        content = make_feed([USD_RECORD, EUR_RECORD])
        path = self.repository.save_feed(content)

        self.assertTrue(path.exists())
        self.assertTrue(self.repository.exists())
        self.assertEqual(self.repository.load_feed(), content)

    def test_save_overwrites_snapshot(self):
        self.repository.save_feed(make_feed([USD_RECORD]))
        self.repository.save_feed(make_feed([EUR_RECORD]))

        table = ingest_bytes(self.repository.load_feed()).table
        self.assertEqual(table.codes, ["RUB", "EUR"])

    def test_table_round_trip(self):
        """A saved table loads back with the same codes and unit costs."""
        original = ingest_bytes(make_feed([USD_RECORD, EUR_RECORD, JPY_RECORD])).table
        self.repository.save_table(original)

        reloaded = ingest_bytes(self.repository.load_feed()).table

        self.assertEqual(reloaded.codes, original.codes)
        self.assertEqual(reloaded.actual_date, original.actual_date)
        for currency in original:
            self.assertEqual(reloaded.get(currency.code).unit_cost, currency.unit_cost)
            self.assertEqual(reloaded.get(currency.code).name, currency.name)

    def test_table_with_bracketed_name(self):
        table = CurrencyTable(date(2024, 1, 9))
        table.add(Currency("XDR", "СДР [специальные права заимствования]", 1,
                           Decimal('118.3351'), Decimal('118.3351')))
        self.repository.save_table(table)

        reloaded = ingest_bytes(self.repository.load_feed()).table
        self.assertEqual(reloaded.get("XDR").name, "СДР [специальные права заимствования]")
        self.assertEqual(reloaded.actual_date, date(2024, 1, 9))

    def test_unwritable_location(self):
        blocker = Path(self.temp_dir.name) / "not_a_directory"
        blocker.write_text("x")
        repository = XmlRatesRepository(blocker)

        with self.assertRaises(RepositoryError):
            repository.save_feed(b"<ValCurs/>")


if __name__ == '__main__':
    unittest.main()
