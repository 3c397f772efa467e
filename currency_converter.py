#!/usr/bin/env python3
"""
Currency Converter - Main Script

Interactive converter between currencies quoted by the Central Bank of
Russia. On start it downloads the daily rates, saves them to a local
snapshot, loads the snapshot and then answers rate and conversion queries
typed at the prompt.

Usage:
    currency-converter [--config FILE] [--data-dir DIR] [--debug]
                       [--no-update] [--force-fallback] [--version]
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from config.constants import LOG_FILE, VERSION
from config.settings import Settings, configure_system
from data.exceptions import ConverterError
from data.repositories.xml_repository import XmlRatesRepository
from display.console_output import (
    print_error, print_header, print_success, print_warning, set_force_fallback
)
from exchange.converter_interface import ConverterInterface
from exchange.rates_manager import RatesManager
from market_data.rates_fetcher import RatesFetcher
from utils.system_utils import (
    InitializationError, log_system_info, setup_error_handlers, validate_system_requirements
)

logger = logging.getLogger(__name__)

fetcher: Optional[RatesFetcher] = None


def setup_logging(settings: Settings) -> None:
    """Setup logging configuration.

    Everything at the configured level goes to the log file; the console
    only shows records at the console level so the prompt stays readable.

    Args:
        settings: System settings containing logging configuration
    """
    log_config = settings.get_logging_config()
    level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    console_level = getattr(logging, str(log_config.get('console_level', 'WARNING')).upper(),
                            logging.WARNING)

    file_handler = logging.FileHandler(log_config.get('file', LOG_FILE), encoding='utf-8', delay=True)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(max(level, console_level))

    logging.basicConfig(
        level=level,
        format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=[file_handler, console_handler]
    )

    logger.info(f"Logging configured - Level: {logging.getLevelName(level)}")


def parse_command_line_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (sys.argv[1:] when omitted)

    Returns:
        Parsed command-line arguments
    """
    parser = argparse.ArgumentParser(
        description="Currency Converter - CBR exchange rates at the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  currency-converter                          # Download today's rates and start
  currency-converter --no-update              # Use the saved rates.xml only
  currency-converter --data-dir rates_data    # Keep rates.xml in another directory
  currency-converter --config config.json     # Use custom configuration
  currency-converter --debug                  # Enable debug logging
        """
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration file'
    )

    parser.add_argument(
        '--data-dir',
        type=str,
        default=None,
        help='Directory holding rates.xml (overrides config setting)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    parser.add_argument(
        '--no-update',
        action='store_true',
        help="Don't download rates on start, only load the saved snapshot"
    )

    parser.add_argument(
        '--force-fallback',
        action='store_true',
        help='Disable Rich output and use plain colored text'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Currency Converter {VERSION}'
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> Tuple[Settings, ConverterInterface]:
    """Initialize the converter with configuration and dependencies.

    Args:
        args: Parsed command-line arguments

    Returns:
        Tuple of (settings, interface)

    Raises:
        InitializationError: If system initialization fails
    """
    global fetcher

    try:
        if args.force_fallback:
            set_force_fallback(True, colorama_only=True)

        print_header("Currency Converter", "💱")

        settings = configure_system(args.config)

        if args.data_dir:
            settings.set('storage.data_directory', args.data_dir)
        if args.debug:
            settings.set('logging.level', 'DEBUG')

        setup_logging(settings)
        log_system_info(VERSION)
        validate_system_requirements()

        rates_config = settings.get_rates_config()
        fetcher = RatesFetcher(
            url=rates_config.get('url'),
            max_attempts=int(rates_config.get('max_attempts')),
            timeout=float(rates_config.get('timeout_seconds')),
            retry_delay=float(rates_config.get('retry_delay_seconds'))
        )
        repository = XmlRatesRepository(settings.get_data_directory(), settings.get_rates_file_name())
        manager = RatesManager(fetcher, repository)
        interface = ConverterInterface(manager)

        print_success("System initialization completed successfully")
        return settings, interface

    except Exception as e:
        error_msg = f"System initialization failed: {e}"
        logger.error(error_msg, exc_info=True)
        raise InitializationError(error_msg) from e


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the currency converter.

    1. Parse command-line arguments
    2. Initialize settings, logging and components
    3. Update and load the rates
    4. Run the interactive session until exit
    """
    setup_error_handlers()

    try:
        args = parse_command_line_arguments(argv)
        settings, interface = initialize_system(args)

        update_on_start = bool(settings.get('startup.update_on_start', True)) and not args.no_update
        interface.startup(update=update_on_start)
        interface.run()

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        sys.exit(0)

    except InitializationError as e:
        print_error(str(e))
        sys.exit(1)

    except ConverterError as e:
        print_error(f"Converter error: {e}")
        sys.exit(1)

    finally:
        cleanup_system()


def cleanup_system() -> None:
    """Cleanup system resources and connections."""
    if fetcher is not None:
        try:
            fetcher.close()
        except Exception as e:
            logger.error(f"Error during system cleanup: {e}")
    logger.info("System cleanup completed")


if __name__ == "__main__":
    main()
