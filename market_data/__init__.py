"""
Market data module for fetching exchange rates.

This module provides:
- RatesFetcher: Downloads the daily CBR rates feed with bounded retries
- FetchResult: Raw feed bytes plus request details
"""

from .rates_fetcher import RatesFetcher, FetchResult, FetchError

__all__ = [
    'RatesFetcher',
    'FetchResult',
    'FetchError'
]
