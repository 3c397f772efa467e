"""Currency model."""

from __future__ import annotations

import string
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from typing import Any, Dict

from config.constants import REFERENCE_CURRENCY
from financial.calculations import costs_consistent, to_decimal
from ..exceptions import IntegrityError, InvalidArgumentError

# Code of the currency all costs are denominated in
REFERENCE_CODE = REFERENCE_CURRENCY
REFERENCE_NAME = "Российский рубль"

_CODE_LETTERS = frozenset(string.ascii_uppercase)

# Fields tied together by unit_cost * amount == lot_cost
_COST_FIELDS = ('amount', 'lot_cost', 'unit_cost')


@dataclass
class Currency:
    """Represents one currency quoted against the reference currency (RUB).

    `amount` units of the currency cost `lot_cost` roubles; one unit costs
    `unit_cost` roubles. Every field is validated on assignment and the
    cost invariant is checked whenever amount or a cost changes, so a
    Currency is always consistent. An assignment that would break the
    invariant is undone before IntegrityError is raised.
    """
    code: str
    name: str
    amount: int
    lot_cost: Decimal
    unit_cost: Decimal

    def __setattr__(self, name: str, value: Any) -> None:
        if name == 'code':
            self._check_code(value)
        elif name == 'name':
            value = str(value)
        elif name == 'amount':
            value = self._check_amount(value)
        elif name in ('lot_cost', 'unit_cost'):
            value = self._check_cost(name, value)

        missing = object()
        previous = self.__dict__.get(name, missing)
        super().__setattr__(name, value)

        if name in _COST_FIELDS and all(f in self.__dict__ for f in _COST_FIELDS):
            try:
                self._check_costs()
            except IntegrityError:
                if previous is not missing:
                    super().__setattr__(name, previous)
                raise

    def _check_costs(self) -> None:
        if not costs_consistent(self.unit_cost, self.amount, self.lot_cost):
            raise IntegrityError(
                f"Currency {self.code}: UnitCost ({self.unit_cost:.4f}) * Amount ({self.amount}) "
                f"!= AmountCost ({self.lot_cost:.4f})",
                field='unit_cost'
            )

    @staticmethod
    def is_valid_code(code: Any) -> bool:
        """A code is valid when it is exactly 3 uppercase Latin letters."""
        return isinstance(code, str) and len(code) == 3 and all(c in _CODE_LETTERS for c in code)

    @classmethod
    def _check_code(cls, code: Any) -> None:
        if not cls.is_valid_code(code):
            raise InvalidArgumentError(
                f"CharCode must consist of 3 uppercase Latin letters. Given CharCode: {code}",
                field='code'
            )

    @staticmethod
    def _check_amount(amount: Any) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError(
                f"Amount must be a natural (positive integer) number. Given Amount: {amount}",
                field='amount'
            )
        return amount

    @staticmethod
    def _check_cost(name: str, cost: Any) -> Decimal:
        try:
            value = to_decimal(cost, name)
        except ValueError:
            raise InvalidArgumentError(
                f"{name} must be a positive number. Given {name}: {cost!r}",
                field=name
            ) from None
        if not value.is_finite() or value <= 0:
            raise InvalidArgumentError(
                f"{name} must be a positive number. Given {name}: {cost}",
                field=name
            )
        return value

    @classmethod
    def reference(cls) -> Currency:
        """Create the reference currency record (1 RUB = 1 RUB)."""
        return cls(
            code=REFERENCE_CODE,
            name=REFERENCE_NAME,
            amount=1,
            lot_cost=Decimal('1'),
            unit_cost=Decimal('1')
        )

    def rate_to(self, other: Currency) -> Decimal:
        """Number of units of `other` equal to one unit of this currency.

        Both unit costs are already in roubles, so the cross rate is a
        single division. Costs are always positive, so it can't divide by zero.
        """
        return self.unit_cost / other.unit_cost

    def describe(self) -> str:
        """Human-readable rate line, e.g. "100 JPY (Японских иен) = 58.1234 RUB"."""
        return f"{self.amount} {self.code} ({self.name}) = {self.lot_cost:.4f} {REFERENCE_CODE}"

    def copy(self) -> Currency:
        """Return an independent copy of this currency."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Costs are kept as strings so no precision is lost.
        """
        return {
            'code': self.code,
            'name': self.name,
            'amount': self.amount,
            'lot_cost': str(self.lot_cost),
            'unit_cost': str(self.unit_cost)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Currency:
        """Create a Currency from a dictionary produced by to_dict()."""
        missing = [f.name for f in fields(cls) if f.name not in data]
        if missing:
            raise InvalidArgumentError(
                f"Currency data is missing fields: {', '.join(missing)}",
                field=missing[0]
            )
        return cls(
            code=data['code'],
            name=data['name'],
            amount=data['amount'],
            lot_cost=data['lot_cost'],
            unit_cost=data['unit_cost']
        )
