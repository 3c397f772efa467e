"""Field mapping between CBR feed XML elements and currency models."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional, Union

from financial.calculations import costs_consistent, format_decimal, parse_decimal, parse_integer
from utils.date_utils import format_actual_date
from ..exceptions import ConverterError, IntegrityError, SchemaError
from ..models.currency import Currency, REFERENCE_CODE
from ..models.currency_table import CurrencyTable

logger = logging.getLogger(__name__)

# Feed element and attribute names
ROOT_ELEMENT = "ValCurs"
ROOT_DATE_ATTRIBUTE = "Date"
ROOT_NAME_ATTRIBUTE = "name"
ROOT_NAME_VALUE = "Foreign Currency Market"
CURRENCY_ELEMENT = "Valute"
CODE_ELEMENT = "CharCode"
NAME_ELEMENT = "Name"
AMOUNT_ELEMENT = "Nominal"
LOT_COST_ELEMENT = "Value"
UNIT_COST_ELEMENT = "VunitRate"


@dataclass
class RecordOk:
    """A feed record that was parsed into a valid currency."""
    index: int
    currency: Currency

    @property
    def ok(self) -> bool:
        return True


@dataclass
class RecordError:
    """A feed record that was rejected.

    `kind` is the error class name (SchemaError, ParseError, ...) and
    `field` the feed element that caused it, when known.
    """
    index: int
    kind: str
    field: Optional[str]
    message: str
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        where = f"record #{self.index}"
        if self.code:
            where += f" ({self.code})"
        return f"{where}: {self.kind}: [{self.message}]"


RecordResult = Union[RecordOk, RecordError]


class CurrencyMapper:
    """Maps between the Currency model and CBR <Valute> elements."""

    @staticmethod
    def _required_text(element: ET.Element, tag: str) -> str:
        child = element.find(tag)
        if child is None:
            raise SchemaError(
                f'"{CURRENCY_ELEMENT}" element has wrong schema: "{tag}" element not found',
                field=tag
            )
        return child.text or ""

    @classmethod
    def element_to_model(cls, element: ET.Element) -> Currency:
        """Convert a <Valute> element to a Currency.

        Raises:
            SchemaError: If the element or one of its fields is missing
            ParseError: If a numeric field can't be parsed
            IntegrityError: If VunitRate * Nominal != Value
            InvalidArgumentError: If the code, amount or a cost is out of range
        """
        if element.tag != CURRENCY_ELEMENT:
            raise SchemaError(
                f'"{ROOT_ELEMENT}" element has wrong schema: unknown element "{element.tag}"',
                field=element.tag
            )

        code = cls._required_text(element, CODE_ELEMENT).strip()
        name = cls._required_text(element, NAME_ELEMENT).strip()
        amount_text = cls._required_text(element, AMOUNT_ELEMENT)
        lot_cost_text = cls._required_text(element, LOT_COST_ELEMENT)
        unit_cost_text = cls._required_text(element, UNIT_COST_ELEMENT)

        amount = parse_integer(amount_text, AMOUNT_ELEMENT)
        lot_cost = parse_decimal(lot_cost_text, LOT_COST_ELEMENT)
        unit_cost = parse_decimal(unit_cost_text, UNIT_COST_ELEMENT)

        if not costs_consistent(unit_cost, amount, lot_cost):
            raise IntegrityError(
                f'"{CURRENCY_ELEMENT}" element {code} contains wrong data: '
                f'{UNIT_COST_ELEMENT} ({unit_cost:.4f}) * {AMOUNT_ELEMENT} ({amount}) '
                f'!= {LOT_COST_ELEMENT} ({lot_cost:.4f})',
                field=UNIT_COST_ELEMENT
            )

        return Currency(
            code=code,
            name=name,
            amount=amount,
            lot_cost=lot_cost,
            unit_cost=unit_cost
        )

    @classmethod
    def element_to_result(cls, element: ET.Element, index: int) -> RecordResult:
        """Convert a <Valute> element to RecordOk or RecordError."""
        try:
            return RecordOk(index=index, currency=cls.element_to_model(element))
        except ConverterError as e:
            code_element = element.find(CODE_ELEMENT)
            code = code_element.text.strip() if code_element is not None and code_element.text else None
            return RecordError(
                index=index,
                kind=type(e).__name__,
                field=getattr(e, 'field', None),
                message=str(e),
                code=code
            )

    @staticmethod
    def model_to_element(currency: Currency, parent: Optional[ET.Element] = None) -> ET.Element:
        """Convert a Currency to a <Valute> element."""
        if parent is not None:
            element = ET.SubElement(parent, CURRENCY_ELEMENT)
        else:
            element = ET.Element(CURRENCY_ELEMENT)
        ET.SubElement(element, CODE_ELEMENT).text = currency.code
        ET.SubElement(element, AMOUNT_ELEMENT).text = str(currency.amount)
        ET.SubElement(element, NAME_ELEMENT).text = currency.name
        ET.SubElement(element, LOT_COST_ELEMENT).text = format_decimal(currency.lot_cost)
        ET.SubElement(element, UNIT_COST_ELEMENT).text = format_decimal(currency.unit_cost)
        return element


class TableMapper:
    """Maps a CurrencyTable to a <ValCurs> document."""

    @staticmethod
    def model_to_element(table: CurrencyTable) -> ET.Element:
        """Convert a table to a <ValCurs> element.

        The reference currency is implied by the feed and is not written.
        """
        root = ET.Element(ROOT_ELEMENT)
        root.set(ROOT_DATE_ATTRIBUTE, format_actual_date(table.actual_date))
        root.set(ROOT_NAME_ATTRIBUTE, ROOT_NAME_VALUE)
        for currency in table:
            if currency.code == REFERENCE_CODE:
                continue
            CurrencyMapper.model_to_element(currency, root)
        return root
