"""
Daily exchange rates fetcher for the Central Bank of Russia XML feed.

The feed is requested with a bounded number of attempts. Each failed attempt
(network error or non-2xx status) is logged; when every attempt fails a
FetchError is raised with the last failure.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Optional

import requests

from config.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RATES_URL,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)
from data.exceptions import ConverterError
from utils.date_utils import format_request_date

logger = logging.getLogger(__name__)

REQUEST_DATE_PARAMETER = "date_req"


class FetchError(ConverterError):
    """Exception raised when the rates feed can't be downloaded."""
    pass


@dataclass
class FetchResult:
    """Result of a rates fetch operation."""
    content: bytes
    url: str
    attempts: int
    actual_date: date


class RatesFetcher:
    """Downloads the daily rates XML for a given date."""

    def __init__(self, url: str = DEFAULT_RATES_URL,
                 max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
                 session: Optional[requests.Session] = None):
        """
        Initialize the rates fetcher.

        Args:
            url: Feed endpoint
            max_attempts: Number of attempts before giving up (at least 1)
            timeout: Per-request timeout in seconds
            retry_delay: Pause between failed attempts in seconds
            session: Optional requests session (a new one is created if omitted)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.url = url
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.session = session or requests.Session()

    def fetch(self, actual_date: Optional[date] = None) -> FetchResult:
        """
        Fetch the rates feed actual for the latest day not after `actual_date`.

        Args:
            actual_date: Requested date (defaults to today)

        Returns:
            FetchResult with the raw XML bytes

        Raises:
            FetchError: If every attempt fails
        """
        actual_date = actual_date or date.today()
        params = {REQUEST_DATE_PARAMETER: format_request_date(actual_date)}
        logger.info(f"Requesting rates from {self.url} for {actual_date.isoformat()}")

        last_failure = "no attempts were made"
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.session.get(self.url, params=params, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                last_failure = f"{type(e).__name__}: {e}"
                logger.warning(f"Attempt {attempt}/{self.max_attempts} failed: {last_failure}")
            else:
                if 200 <= response.status_code < 300:
                    logger.info(f"Rates retrieved on attempt {attempt} ({len(response.content)} bytes)")
                    return FetchResult(
                        content=response.content,
                        url=response.url or self.url,
                        attempts=attempt,
                        actual_date=actual_date
                    )
                last_failure = f"HTTP {response.status_code}"
                logger.warning(f"Attempt {attempt}/{self.max_attempts} failed: {last_failure}")

            if attempt < self.max_attempts and self.retry_delay > 0:
                time.sleep(self.retry_delay)

        raise FetchError(
            f"Failed to retrieve rates from {self.url} after {self.max_attempts} attempts "
            f"(last failure: {last_failure})"
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
