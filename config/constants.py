"""System constants and default values."""

# File paths and names
DEFAULT_DATA_DIR = "."
RATES_FILE_NAME = "rates.xml"

# Rates feed configuration
DEFAULT_RATES_URL = "https://www.cbr.ru/scripts/XML_daily.asp"
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_RETRY_DELAY_SECONDS = 1.0

# Currency configuration
REFERENCE_CURRENCY = "RUB"
ACTUAL_DATE_FORMAT = "dd.MM.yyyy"

# Logging configuration
LOG_FILE = "currency_converter.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Version information
VERSION = "1.0.0"

# REPL prompt
PROMPT = ">>> "
