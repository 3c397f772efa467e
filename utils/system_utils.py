"""System utilities for the currency converter."""

import logging
import os
import platform
import sys
from importlib import metadata

from display.console_output import print_error, print_warning

logger = logging.getLogger(__name__)

REQUIRED_DISTRIBUTIONS = ('requests', 'rich', 'colorama', 'python-dotenv')


class InitializationError(Exception):
    """Exception raised during system initialization."""
    pass


def setup_error_handlers() -> None:
    """Setup global error handlers for uncaught exceptions."""
    def handle_exception(exc_type, exc_value, exc_traceback):
        """Handle uncaught exceptions."""
        if issubclass(exc_type, KeyboardInterrupt):
            print_warning("\nOperation cancelled by user")
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

        print_error("An unexpected error occurred. Please check the log file for details.")
        print_error(f"Error: {exc_value}")

        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    sys.excepthook = handle_exception


def validate_system_requirements() -> None:
    """Validate the interpreter version and installed distributions.

    Raises:
        InitializationError: If Python is too old or a distribution is missing
    """
    if sys.version_info < (3, 9):
        raise InitializationError(
            f"Python 3.9+ required, found {sys.version_info.major}.{sys.version_info.minor}"
        )

    missing_packages = []
    for distribution in REQUIRED_DISTRIBUTIONS:
        try:
            metadata.version(distribution)
        except metadata.PackageNotFoundError:
            missing_packages.append(distribution)

    if missing_packages:
        raise InitializationError(
            f"Required packages missing: {', '.join(missing_packages)}. "
            "Please install with: pip install -e ."
        )

    logger.info("System requirements validation passed")


def log_system_info(version: str = "1.0.0") -> None:
    """Log system information for debugging.

    Args:
        version: Version string to log
    """
    logger.info(f"Currency Converter {version} starting up")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Platform: {platform.platform()}")
    logger.info(f"Working directory: {os.getcwd()}")
