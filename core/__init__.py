"""
Core infrastructure module for the Contacts Dashboard.

This module provides the foundational components: configuration management,
logging setup, custom exceptions and the session provider interface.
"""

from .config import Config, DataConfig, GeocodingConfig, LoggingConfig, TableConfig
from .exceptions import (
    ConfigurationError,
    ContactsDashboardError,
    FileProcessingError,
    GeocodingError,
    ValidationError,
)
from .logging_config import setup_logging
from .session import SessionProvider, StaticSessionProvider, User

__all__ = [
    # Configuration
    'Config',
    'DataConfig',
    'TableConfig',
    'GeocodingConfig',
    'LoggingConfig',

    # Exceptions
    'ContactsDashboardError',
    'ConfigurationError',
    'FileProcessingError',
    'ValidationError',
    'GeocodingError',

    # Logging
    'setup_logging',

    # Session
    'SessionProvider',
    'StaticSessionProvider',
    'User',
]

# Version info
__version__ = "1.0.0"
