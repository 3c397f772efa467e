"""
Rates feed ingestion.

Turns a CBR <ValCurs> document into a CurrencyTable. The root element and
its Date attribute describe the whole feed, so problems there abort the
ingestion. Each <Valute> record is handled on its own: a broken record is
logged and skipped and the rest of the feed is still loaded.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import date
from typing import List

from utils.date_utils import ACTUAL_DATE_FORMAT, parse_actual_date
from .exceptions import ParseError, SchemaError
from .models.currency_table import CurrencyTable
from .repositories.field_mapper import (
    CurrencyMapper,
    RecordError,
    RecordResult,
    ROOT_DATE_ATTRIBUTE,
    ROOT_ELEMENT,
)

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Result of ingesting a rates feed."""
    table: CurrencyTable
    skipped: List[RecordError] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def loaded_count(self) -> int:
        """Number of currencies in the table, reference currency included."""
        return len(self.table)


def parse_document(content: bytes) -> ET.Element:
    """Parse raw feed bytes into the root element.

    The XML declaration decides the encoding (the CBR feed is windows-1251).

    Raises:
        ParseError: If the content is not well-formed XML
    """
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError(f"Rates feed is not well-formed XML: {e}", field='document') from e


def read_actual_date(root: ET.Element) -> date:
    """Validate the <ValCurs> root and return its as-of date.

    Raises:
        SchemaError: If the root name, the Date attribute or its format is wrong
    """
    if root.tag != ROOT_ELEMENT:
        raise SchemaError(
            f'Rates feed has wrong schema: "{ROOT_ELEMENT}" element not found (root is "{root.tag}")',
            field=ROOT_ELEMENT
        )

    date_text = root.get(ROOT_DATE_ATTRIBUTE)
    if date_text is None:
        raise SchemaError(
            f'"{ROOT_ELEMENT}" element has wrong schema: "{ROOT_DATE_ATTRIBUTE}" attribute not found',
            field=ROOT_DATE_ATTRIBUTE
        )

    try:
        return parse_actual_date(date_text)
    except ParseError as e:
        raise SchemaError(
            f'"{ROOT_ELEMENT}" element has wrong schema: "{ROOT_DATE_ATTRIBUTE}" attribute has invalid '
            f'value "{date_text}" (expected {ACTUAL_DATE_FORMAT})',
            field=ROOT_DATE_ATTRIBUTE
        ) from e


def map_records(root: ET.Element) -> List[RecordResult]:
    """Map every child of the root to RecordOk or RecordError."""
    return [CurrencyMapper.element_to_result(element, index)
            for index, element in enumerate(root, start=1)]


def ingest_feed(root: ET.Element) -> IngestionResult:
    """
    Build a CurrencyTable from a parsed <ValCurs> element.

    Args:
        root: Root element of the feed

    Returns:
        IngestionResult with the populated table and the skipped records

    Raises:
        SchemaError: If the root element or its Date attribute is invalid
    """
    actual_date = read_actual_date(root)
    table = CurrencyTable(actual_date)
    skipped: List[RecordError] = []

    for result in map_records(root):
        if isinstance(result, RecordError):
            logger.warning(f"Skipping {result.describe()}")
            skipped.append(result)
        else:
            table.add(result.currency)

    if skipped:
        logger.warning(f"Currencies skipped: {len(skipped)}")
    logger.info(f"Rates loaded: {len(table)} currencies actual for {actual_date.isoformat()}")
    return IngestionResult(table=table, skipped=skipped)


def ingest_bytes(content: bytes) -> IngestionResult:
    """Parse raw feed bytes and build a CurrencyTable from them."""
    return ingest_feed(parse_document(content))
