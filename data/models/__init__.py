"""Data models for the currency converter.

This module contains the currency record and the currency table used as the
conversion engine.
"""

from .currency import Currency, REFERENCE_CODE, REFERENCE_NAME
from .currency_table import CurrencyTable

__all__ = ['Currency', 'CurrencyTable', 'REFERENCE_CODE', 'REFERENCE_NAME']
