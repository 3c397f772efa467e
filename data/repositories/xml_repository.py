"""XML file repository for the rates snapshot."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from config.constants import DEFAULT_DATA_DIR, RATES_FILE_NAME
from .base_repository import BaseRatesRepository, DataNotFoundError, RepositoryError
from .field_mapper import TableMapper
from ..models.currency_table import CurrencyTable

logger = logging.getLogger(__name__)

DEFAULT_RATES_FILE_NAME = RATES_FILE_NAME


class XmlRatesRepository(BaseRatesRepository):
    """Stores the rates snapshot as an XML file under a fixed name."""

    def __init__(self, data_directory: Union[str, Path] = DEFAULT_DATA_DIR,
                 file_name: str = DEFAULT_RATES_FILE_NAME):
        """Initialize XML repository.

        Args:
            data_directory: Directory holding the snapshot file
            file_name: Snapshot file name
        """
        self.data_dir = Path(data_directory)
        self.rates_file = self.data_dir / file_name

    def exists(self) -> bool:
        return self.rates_file.is_file()

    def save_feed(self, content: bytes) -> Path:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self.rates_file.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to save rates to {self.rates_file}: {e}")
            raise RepositoryError(f"Failed to save rates to {self.rates_file}: {e}") from e

        logger.info(f"Rates have been saved to {self.rates_file} ({len(content)} bytes)")
        return self.rates_file

    def load_feed(self) -> bytes:
        if not self.exists():
            raise DataNotFoundError(
                f"Rates file {self.rates_file} not found. Run \"update\" to download rates first"
            )
        try:
            content = self.rates_file.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read rates from {self.rates_file}: {e}")
            raise RepositoryError(f"Failed to read rates from {self.rates_file}: {e}") from e

        logger.debug(f"Read {len(content)} bytes from {self.rates_file}")
        return content

    def save_table(self, table: CurrencyTable) -> Path:
        root = TableMapper.model_to_element(table)
        ET.indent(root)
        content = ET.tostring(root, encoding='utf-8', xml_declaration=True)
        return self.save_feed(content)
