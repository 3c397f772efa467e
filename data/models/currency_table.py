"""Currency table: the in-memory conversion engine."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, DecimalException
from typing import Dict, Iterator, List, Optional

from financial.calculations import NumericInput, to_decimal
from .currency import Currency, REFERENCE_CODE
from ..exceptions import CurrencyNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)


class CurrencyTable:
    """Maps currency codes to currencies quoted against the reference currency.

    A new table holds only the reference currency (RUB, 1:1) and the date its
    rates are actual for. Currencies are added one by one as a feed is
    ingested; loading a fresh feed builds a new table instead of updating
    this one.

    The table owns its records: add() stores a copy and every read returns
    copies, so callers can't change the stored rates.
    """

    def __init__(self, actual_date: Optional[date] = None):
        """Initialize the table with the reference currency.

        Args:
            actual_date: Date the rates are actual for (defaults to today)
        """
        self._currencies: Dict[str, Currency] = {}
        reference = Currency.reference()
        self._currencies[reference.code] = reference
        self.actual_date: date = actual_date or date.today()

    def __len__(self) -> int:
        return len(self._currencies)

    def __contains__(self, code: object) -> bool:
        return code in self._currencies

    def __iter__(self) -> Iterator[Currency]:
        for currency in list(self._currencies.values()):
            yield currency.copy()

    def __repr__(self) -> str:
        return f"CurrencyTable(actual_date={self.actual_date.isoformat()}, currencies={len(self)})"

    @property
    def is_bootstrapped(self) -> bool:
        """True while the table holds nothing but the reference currency."""
        return len(self._currencies) == 1 and REFERENCE_CODE in self._currencies

    @property
    def codes(self) -> List[str]:
        """Currency codes in insertion order."""
        return list(self._currencies)

    def add(self, currency: Currency) -> None:
        """Insert or overwrite a currency by its code (last write wins)."""
        if currency.code == REFERENCE_CODE:
            logger.warning(f"Reference currency {REFERENCE_CODE} is being redefined: {currency.describe()}")
        self._currencies[currency.code] = currency.copy()

    def get(self, code: str) -> Currency:
        """Get a copy of the currency with the given code.

        Raises:
            CurrencyNotFoundError: If the code is not in the table
        """
        self._check_codes(code)
        return self._currencies[code].copy()

    def currencies(self) -> List[Currency]:
        """Return independent copies of all currencies in insertion order."""
        return list(self)

    def _check_codes(self, *codes: str) -> None:
        missing = []
        for code in codes:
            if code not in self._currencies and code not in missing:
                missing.append(code)
        if missing:
            raise CurrencyNotFoundError(missing)

    def rate(self, from_code: str, to_code: str) -> Decimal:
        """
        Calculate how many units of `to_code` one unit of `from_code` is worth.

        Args:
            from_code: Source currency code
            to_code: Target currency code

        Returns:
            Decimal: The cross rate through the reference currency

        Raises:
            CurrencyNotFoundError: If either code is not in the table
        """
        self._check_codes(from_code, to_code)
        return self._currencies[from_code].rate_to(self._currencies[to_code])

    def convert(self, amount: NumericInput, from_code: str, to_code: str) -> Decimal:
        """
        Convert an amount of `from_code` into `to_code`.

        The amount itself isn't validated: zero and negative amounts are
        converted like any other number.

        Raises:
            CurrencyNotFoundError: If either code is not in the table
            ParseError: If the amount is not a number
            InvalidArgumentError: If the result is out of the Decimal range
        """
        amount_dec = to_decimal(amount)
        rate = self.rate(from_code, to_code)
        try:
            return amount_dec * rate
        except DecimalException:
            raise InvalidArgumentError(
                f"Amount {amount_dec} {from_code} is too large to convert to {to_code}",
                field='amount'
            ) from None
