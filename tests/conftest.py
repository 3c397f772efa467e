import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root and the tests directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from data.ingestion import ingest_bytes
from display.console_output import set_force_fallback
from feed_samples import (
    BROKEN_NOMINAL_RECORD, EUR_RECORD, JPY_RECORD, USD_RECORD, make_feed
)


@pytest.fixture(autouse=True)
def plain_console_output():
    """Print plain text so captured output is easy to match."""
    set_force_fallback(True)
    yield
    set_force_fallback(False)


@pytest.fixture
def sample_feed() -> bytes:
    """A well-formed feed with USD, EUR and JPY."""
    return make_feed([USD_RECORD, EUR_RECORD, JPY_RECORD])


@pytest.fixture
def partially_broken_feed() -> bytes:
    """A feed with two good records and one with a non-numeric Nominal."""
    return make_feed([USD_RECORD, BROKEN_NOMINAL_RECORD, EUR_RECORD])


@pytest.fixture
def sample_table(sample_feed):
    return ingest_bytes(sample_feed).table


@pytest.fixture
def mock_session():
    """A requests session stand-in whose get() is configured per test."""
    return MagicMock()
