"""
Centralized configuration manager to avoid multiple Config instances.
"""
import logging

from core.config import Config
from core.logging_config import setup_logging

# Global config instance - loaded once
_config_instance = None


def get_config() -> Config:
    """Get the global config instance, creating it only once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
        logging.debug(f"Config instance created from {_config_instance.config_file_path}")
    return _config_instance


def refresh_config() -> Config:
    """Force a refresh of the global config instance."""
    global _config_instance
    _config_instance = None
    return get_config()


def configure_logging_from_config(config: Config = None) -> None:
    """Apply the [logging] section of the config to the root logger."""
    config = config or get_config()
    setup_logging(
        level=config.logging.level,
        log_file=config.logging.log_file,
        log_dir=config.logging.log_dir,
    )
