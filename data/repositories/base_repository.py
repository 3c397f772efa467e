"""Abstract base repository interface for the rates snapshot."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..exceptions import ConverterError
from ..models.currency_table import CurrencyTable


class BaseRatesRepository(ABC):
    """Abstract base class for rates snapshot storage.

    The snapshot is the raw feed exactly as it was fetched, so what is
    saved is what is parsed later.
    """

    @abstractmethod
    def save_feed(self, content: bytes) -> Path:
        """Save raw feed bytes as the current snapshot.

        Args:
            content: Raw XML bytes of the feed

        Returns:
            Location the snapshot was written to

        Raises:
            RepositoryError: If the save operation fails
        """
        pass

    @abstractmethod
    def load_feed(self) -> bytes:
        """Load the raw bytes of the current snapshot.

        Raises:
            DataNotFoundError: If no snapshot has been saved
            RepositoryError: If the snapshot can't be read
        """
        pass

    @abstractmethod
    def save_table(self, table: CurrencyTable) -> Path:
        """Serialize a currency table to the feed format and save it as the snapshot.

        Raises:
            RepositoryError: If the save operation fails
        """
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check whether a snapshot has been saved."""
        pass


class RepositoryError(ConverterError):
    """Base exception for repository operations."""
    pass


class DataNotFoundError(RepositoryError):
    """Exception raised when the requested snapshot is not found."""
    pass
