"""Rates management module.

This module provides the RatesManager class which ties together the rates
fetcher, the snapshot repository and feed ingestion. It is the query surface
used by the REPL: download a feed, load the snapshot into a fresh
CurrencyTable and answer rate, conversion and listing queries against a
table passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from data.ingestion import IngestionResult, ingest_bytes, parse_document
from data.models.currency import Currency
from data.models.currency_table import CurrencyTable
from data.repositories.base_repository import BaseRatesRepository
from financial.calculations import NumericInput
from market_data.rates_fetcher import RatesFetcher

logger = logging.getLogger(__name__)


@dataclass
class RatesListing:
    """Snapshot of a table for display."""
    currencies: List[Currency]
    total: int
    actual_date: date


class RatesManager:
    """Downloads, persists and loads exchange rates.

    The manager keeps no table of its own. load() returns a new table and
    the caller decides whether to replace the one it holds.
    """

    def __init__(self, fetcher: RatesFetcher, repository: BaseRatesRepository):
        """Initialize rates manager.

        Args:
            fetcher: Fetcher used to download the feed
            repository: Repository holding the rates snapshot
        """
        self.fetcher = fetcher
        self.repository = repository
        logger.info(f"Rates manager initialized with {type(repository).__name__}")

    def update(self, actual_date: Optional[date] = None) -> Path:
        """
        Download the feed actual for `actual_date` and persist it.

        The feed is checked for well-formedness before it replaces the
        existing snapshot, so a broken download never overwrites good data.

        Args:
            actual_date: Requested date (defaults to today)

        Returns:
            Path of the saved snapshot

        Raises:
            FetchError: If the feed can't be downloaded
            ParseError: If the downloaded content is not well-formed XML
            RepositoryError: If the snapshot can't be written
        """
        result = self.fetcher.fetch(actual_date)
        parse_document(result.content)
        path = self.repository.save_feed(result.content)
        logger.info(f"Rates for {result.actual_date.isoformat()} saved after {result.attempts} attempt(s)")
        return path

    def load(self) -> IngestionResult:
        """
        Parse the persisted snapshot into a new CurrencyTable.

        Raises:
            DataNotFoundError: If no snapshot has been saved yet
            ParseError: If the snapshot is not well-formed XML
            SchemaError: If the snapshot root or its Date attribute is invalid
        """
        return ingest_bytes(self.repository.load_feed())

    def reload(self, actual_date: Optional[date] = None) -> IngestionResult:
        """Update the snapshot and load it."""
        self.update(actual_date)
        return self.load()

    def rate(self, table: CurrencyTable, from_code: str, to_code: str) -> Decimal:
        return table.rate(from_code, to_code)

    def convert(self, table: CurrencyTable, amount: NumericInput,
                from_code: str, to_code: str) -> Decimal:
        return table.convert(amount, from_code, to_code)

    def list_rates(self, table: CurrencyTable) -> RatesListing:
        """Collect the table's currencies, count and as-of date."""
        currencies = table.currencies()
        return RatesListing(
            currencies=currencies,
            total=len(currencies),
            actual_date=table.actual_date
        )
