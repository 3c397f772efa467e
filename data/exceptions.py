"""Exceptions raised by the currency model and rate ingestion."""

from __future__ import annotations

from typing import Iterable, Optional


class ConverterError(Exception):
    """Base exception for currency converter operations."""
    pass


class InvalidArgumentError(ConverterError, ValueError):
    """Exception raised when a currency is built from a malformed code, amount or cost."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SchemaError(ConverterError, ValueError):
    """Exception raised when a rates feed does not have the expected structure."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ParseError(ConverterError, ValueError):
    """Exception raised when numeric, date or XML text can't be parsed."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class IntegrityError(ConverterError, ValueError):
    """Exception raised when unit cost * amount doesn't match the lot cost."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CurrencyNotFoundError(ConverterError, LookupError):
    """Exception raised when a currency code is absent from the table."""

    def __init__(self, codes: Iterable[str]):
        self.codes = tuple(codes)
        quoted = ", ".join(f'"{code}"' for code in self.codes)
        noun = "Currency" if len(self.codes) == 1 else "Currencies"
        super().__init__(f"{noun} with CharCode={quoted} doesn't exist in the currency table")

    def __str__(self) -> str:
        return self.args[0]
