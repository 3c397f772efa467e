"""Configuration management for the currency converter."""

from .settings import ConfigurationError, Settings, get_settings, configure_system
from .constants import *

__all__ = [
    'ConfigurationError',
    'Settings',
    'get_settings',
    'configure_system',
    # Constants will be imported via *
]
