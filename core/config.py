"""
Configuration management for the Contacts Dashboard.

This module provides a split configuration system: each concern
(data source, table defaults, geocoding, logging) has its own focused
dataclass, and the top-level Config loads and saves them as sections
of a single TOML file.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import toml

from .exceptions import ConfigurationError

SORT_DIRECTIONS = ('ascending', 'descending')


@dataclass
class DataConfig:
    """Configuration for the contacts data source."""

    data_dir: str = 'data'
    contacts_file: str = 'contacts.json'

    def get_contacts_path(self) -> str:
        """Get the full path to the contacts file."""
        return os.path.join(self.data_dir, self.contacts_file)

    def validate(self) -> List[str]:
        """Validate the data configuration and return any errors."""
        errors = []

        if not self.data_dir:
            errors.append("data_dir cannot be empty")

        if not self.contacts_file:
            errors.append("contacts_file cannot be empty")
        elif os.path.splitext(self.contacts_file)[1].lower() not in ('.json', '.csv'):
            errors.append("contacts_file must be a .json or .csv file")

        return errors


@dataclass
class TableConfig:
    """Defaults for the contacts table."""

    page_size: int = 10
    max_page_size: int = 100
    page_size_options: List[int] = field(default_factory=lambda: [5, 10, 20, 50, 100])
    default_sort_column: str = 'full_name'
    default_sort_direction: str = 'ascending'

    def validate(self) -> List[str]:
        """Validate the table configuration and return any errors."""
        errors = []

        if self.page_size <= 0:
            errors.append("page_size must be positive")

        if self.page_size > self.max_page_size:
            errors.append("page_size cannot exceed max_page_size")

        if any(size <= 0 for size in self.page_size_options):
            errors.append("page_size_options must all be positive")

        if not self.default_sort_column:
            errors.append("default_sort_column cannot be empty")

        if self.default_sort_direction not in SORT_DIRECTIONS:
            errors.append(f"default_sort_direction must be one of {list(SORT_DIRECTIONS)}")

        return errors


@dataclass
class GeocodingConfig:
    """Settings for the OpenStreetMap Nominatim lookup."""

    enabled: bool = True
    base_url: str = 'https://nominatim.openstreetmap.org'
    user_agent: str = 'ContactsApp/1.0'
    timeout_seconds: float = 10.0
    # Nominatim usage policy: at most one request per second
    min_interval_seconds: float = 1.0

    def validate(self) -> List[str]:
        """Validate the geocoding configuration and return any errors."""
        errors = []

        if not self.base_url.startswith(('http://', 'https://')):
            errors.append("base_url must be an http(s) URL")

        if not self.user_agent:
            errors.append("user_agent is required by the Nominatim usage policy")

        if self.timeout_seconds <= 0:
            errors.append("timeout_seconds must be positive")

        if self.min_interval_seconds < 0:
            errors.append("min_interval_seconds cannot be negative")

        return errors


@dataclass
class LoggingConfig:
    """Logging level and optional file output."""

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'

    def validate(self) -> List[str]:
        errors = []
        if self.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"logging level '{self.level}' is not recognised")
        return errors


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""

    config_file_path: str = "config.toml"

    data: DataConfig = field(default_factory=DataConfig)
    table: TableConfig = field(default_factory=TableConfig)
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Load configuration when an instance is created."""
        self.load_config()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize all sections into the TOML layout."""
        logging_section = {
            'level': self.logging.level,
            'log_dir': self.logging.log_dir,
        }
        if self.logging.log_file:
            logging_section['log_file'] = self.logging.log_file

        return {
            'data': {
                'data_dir': self.data.data_dir,
                'contacts_file': self.data.contacts_file,
            },
            'table': {
                'page_size': self.table.page_size,
                'max_page_size': self.table.max_page_size,
                'page_size_options': list(self.table.page_size_options),
                'default_sort_column': self.table.default_sort_column,
                'default_sort_direction': self.table.default_sort_direction,
            },
            'geocoding': {
                'enabled': self.geocoding.enabled,
                'base_url': self.geocoding.base_url,
                'user_agent': self.geocoding.user_agent,
                'timeout_seconds': self.geocoding.timeout_seconds,
                'min_interval_seconds': self.geocoding.min_interval_seconds,
            },
            'logging': logging_section,
        }

    def save_config(self) -> None:
        """Save current configuration to TOML file."""
        try:
            with open(self.config_file_path, 'w') as f:
                toml.dump(self.to_dict(), f)
            logging.info(f"Configuration saved to {self.config_file_path}")
        except OSError as e:
            error_msg = f"Error saving configuration: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

    def load_config(self) -> None:
        """Load configuration from TOML file, creating it with defaults if missing."""
        try:
            with open(self.config_file_path) as f:
                config_data = toml.load(f)
        except FileNotFoundError:
            logging.info(f"{self.config_file_path} not found. Creating with default values.")
            self.save_config()
            return
        except toml.TomlDecodeError as e:
            error_msg = f"Error decoding {self.config_file_path}: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        _apply_section(self.data, config_data.get('data', {}))
        _apply_section(self.table, config_data.get('table', {}))
        _apply_section(self.geocoding, config_data.get('geocoding', {}))
        _apply_section(self.logging, config_data.get('logging', {}))

        errors = self.validate()
        if errors:
            error_msg = f"Invalid configuration in {self.config_file_path}: {'; '.join(errors)}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        logging.info(f"Configuration loaded from {self.config_file_path}")

    def validate(self) -> List[str]:
        """Validate all configuration sections and return any errors."""
        errors = []
        errors.extend(self.data.validate())
        errors.extend(self.table.validate())
        errors.extend(self.geocoding.validate())
        errors.extend(self.logging.validate())
        return errors


def _apply_section(section: Any, values: Dict[str, Any]) -> None:
    """Copy known keys from a TOML table onto a config section; unknown keys are ignored."""
    for key, value in values.items():
        if hasattr(section, key):
            setattr(section, key, value)
        else:
            logging.warning(f"Ignoring unknown configuration key '{key}' in [{type(section).__name__}]")
