"""Repository pattern implementation for the rates snapshot."""

from .base_repository import (
    BaseRatesRepository,
    RepositoryError,
    DataNotFoundError
)
from .field_mapper import (
    CurrencyMapper,
    TableMapper,
    RecordOk,
    RecordError,
    RecordResult
)
from .xml_repository import XmlRatesRepository, DEFAULT_RATES_FILE_NAME

__all__ = [
    # Base repository interface
    'BaseRatesRepository',
    'RepositoryError',
    'DataNotFoundError',

    # Field mapping
    'CurrencyMapper',
    'TableMapper',
    'RecordOk',
    'RecordError',
    'RecordResult',

    # Concrete implementations
    'XmlRatesRepository',
    'DEFAULT_RATES_FILE_NAME',
]
