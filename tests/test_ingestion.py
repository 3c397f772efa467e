#!/usr/bin/env python3
"""
Test suite for rates feed ingestion.

Broken records must be skipped one at a time, while problems with the
document itself (malformed XML, wrong root, missing Date) abort the
whole ingestion.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from data.exceptions import ParseError, SchemaError
from data.ingestion import ingest_bytes, map_records, parse_document, read_actual_date
from data.models.currency import REFERENCE_CODE
from data.repositories.field_mapper import RecordError, RecordOk
from feed_samples import (
    BROKEN_NOMINAL_RECORD, EUR_RECORD, FEED_DATE, JPY_RECORD, USD_RECORD, make_feed
)


class TestSuccessfulIngestion:
    """Well-formed feeds."""

    def test_sample_feed(self, sample_feed):
        result = ingest_bytes(sample_feed)

        assert result.skipped_count == 0
        assert result.loaded_count == 4
        assert result.table.codes == [REFERENCE_CODE, "USD", "EUR", "JPY"]
        assert result.table.actual_date == FEED_DATE

    def test_windows_1251_names_are_decoded(self, sample_feed):
        table = ingest_bytes(sample_feed).table
        assert table.get("USD").name == "Доллар США"
        assert table.get("JPY").name == "Японских иен"

    def test_comma_decimals_are_parsed(self, sample_feed):
        jpy = ingest_bytes(sample_feed).table.get("JPY")
        assert jpy.amount == 100
        assert jpy.lot_cost == Decimal('64.8526')
        assert jpy.unit_cost == Decimal('0.648526')

    def test_utf8_feed(self):
        result = ingest_bytes(make_feed([EUR_RECORD], encoding="utf-8"))
        assert result.table.get("EUR").name == "Евро"

    def test_feed_without_records(self):
        result = ingest_bytes(make_feed([]))
        assert result.table.is_bootstrapped
        assert result.skipped_count == 0

    def test_unknown_sub_elements_are_ignored(self):
        record = USD_RECORD.replace("<NumCode>840</NumCode>", "<NumCode>840</NumCode><Extra>x</Extra>")
        result = ingest_bytes(make_feed([record]))
        assert "USD" in result.table

    def test_duplicate_codes_last_wins(self):
        second_usd = USD_RECORD.replace("96,9948", "90,0000")
        table = ingest_bytes(make_feed([USD_RECORD, second_usd])).table
        assert len(table) == 2
        assert table.get("USD").unit_cost == Decimal('90.0000')


class TestPartialFailure:
    """Broken records are skipped and reported."""

    def test_one_broken_record_of_three(self, partially_broken_feed):
        result = ingest_bytes(partially_broken_feed)

        assert len(result.table) == 3
        assert result.skipped_count == 1
        assert "GBP" not in result.table

        skipped = result.skipped[0]
        assert skipped.index == 2
        assert skipped.kind == "ParseError"
        assert skipped.field == "Nominal"
        assert skipped.code == "GBP"
        assert "Nominal" in skipped.describe()

    def test_inconsistent_record_among_three(self):
        """unit_cost 2 * amount 10 != lot_cost 999: only that record is skipped."""
        broken = ('<Valute ID="R01010"><NumCode>036</NumCode><CharCode>AUD</CharCode>'
                  '<Nominal>10</Nominal><Name>Австралийский доллар</Name>'
                  '<Value>999</Value><VunitRate>2</VunitRate></Valute>')
        result = ingest_bytes(make_feed([USD_RECORD, broken, EUR_RECORD]))

        assert len(result.table) == 3
        assert result.table.codes == [REFERENCE_CODE, "USD", "EUR"]
        assert result.skipped_count == 1
        assert result.skipped[0].kind == "IntegrityError"
        assert result.skipped[0].code == "AUD"

    def test_every_record_broken_leaves_reference_only(self):
        result = ingest_bytes(make_feed([BROKEN_NOMINAL_RECORD]))

        assert len(result.table) == 1
        assert REFERENCE_CODE in result.table
        assert result.skipped[0].index == 1

    def test_missing_field(self):
        record = EUR_RECORD.replace("<VunitRate>105,2137</VunitRate>", "")
        result = ingest_bytes(make_feed([USD_RECORD, record]))

        assert result.skipped_count == 1
        assert result.skipped[0].kind == "SchemaError"
        assert result.skipped[0].field == "VunitRate"

    def test_inconsistent_costs(self):
        record = JPY_RECORD.replace("<VunitRate>0,648526</VunitRate>", "<VunitRate>0,7</VunitRate>")
        result = ingest_bytes(make_feed([record, USD_RECORD]))

        assert result.skipped[0].kind == "IntegrityError"
        assert "USD" in result.table

    def test_invalid_code(self):
        record = USD_RECORD.replace("<CharCode>USD</CharCode>", "<CharCode>usd</CharCode>")
        result = ingest_bytes(make_feed([record]))

        assert result.skipped[0].kind == "InvalidArgumentError"
        assert result.skipped[0].field == "code"

    def test_unexpected_child_element(self):
        result = ingest_bytes(make_feed(["<Metal/>", EUR_RECORD]))
        assert result.skipped_count == 1
        assert "EUR" in result.table

    def test_map_records_variants(self, partially_broken_feed):
        results = map_records(parse_document(partially_broken_feed))

        assert [type(r) for r in results] == [RecordOk, RecordError, RecordOk]
        assert [r.ok for r in results] == [True, False, True]


class TestWholeFeedFailure:
    """Problems with the document abort ingestion."""

    def test_missing_date(self):
        with pytest.raises(SchemaError) as exc_info:
            ingest_bytes(make_feed([USD_RECORD], feed_date=None))
        assert exc_info.value.field == "Date"

    def test_bad_date_format(self):
        with pytest.raises(SchemaError):
            ingest_bytes(make_feed([USD_RECORD], feed_date="2024-10-18"))

    def test_wrong_root(self):
        with pytest.raises(SchemaError) as exc_info:
            ingest_bytes(b'<?xml version="1.0"?><Rates Date="18.10.2024"/>')
        assert exc_info.value.field == "ValCurs"

    def test_malformed_xml(self):
        with pytest.raises(ParseError) as exc_info:
            ingest_bytes(b"<ValCurs Date='18.10.2024'><Valute>")
        assert exc_info.value.field == "document"

    def test_read_actual_date(self, sample_feed):
        assert read_actual_date(parse_document(sample_feed)) == FEED_DATE
