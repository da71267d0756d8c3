import os
import sys
from pathlib import Path

import pytest
import toml

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config_manager
from core.config import Config, DataConfig, GeocodingConfig, TableConfig
from core.exceptions import ConfigurationError


@pytest.fixture
def config_path(tmp_path):
    """Path to a not-yet-existing config file inside tmp_path."""
    return str(tmp_path / "test_config.toml")


# --- Test Cases for Config.load_config() ---

def test_missing_file_created_with_defaults(config_path):
    config = Config(config_file_path=config_path)

    assert Path(config_path).exists()
    saved = toml.load(config_path)
    assert saved['data']['contacts_file'] == 'contacts.json'
    assert saved['table']['page_size'] == 10
    assert saved['geocoding']['base_url'] == 'https://nominatim.openstreetmap.org'
    assert 'log_file' not in saved['logging']
    assert config.table.default_sort_column == 'full_name'


def test_load_config_exists_and_valid(config_path):
    custom_values = {
        'data': {'data_dir': 'custom_data', 'contacts_file': 'people.csv'},
        'table': {'page_size': 20, 'default_sort_column': 'country', 'default_sort_direction': 'descending'},
        'geocoding': {'enabled': False, 'min_interval_seconds': 2.5},
        'logging': {'level': 'DEBUG'},
    }
    with open(config_path, 'w') as f:
        toml.dump(custom_values, f)

    config = Config(config_file_path=config_path)

    assert config.data.get_contacts_path() == os.path.join('custom_data', 'people.csv')
    assert config.table.page_size == 20
    assert config.table.default_sort_direction == 'descending'
    assert config.geocoding.enabled is False
    assert config.geocoding.min_interval_seconds == 2.5
    assert config.logging.level == 'DEBUG'
    # Untouched keys keep their defaults
    assert config.table.max_page_size == 100


def test_unknown_keys_ignored(config_path):
    with open(config_path, 'w') as f:
        toml.dump({'table': {'page_size': 5, 'colour': 'blue'}, 'extra': {'x': 1}}, f)

    config = Config(config_file_path=config_path)
    assert config.table.page_size == 5
    assert not hasattr(config.table, 'colour')


def test_malformed_file_raises(config_path):
    Path(config_path).write_text("[table\npage_size = ")
    with pytest.raises(ConfigurationError) as exc_info:
        Config(config_file_path=config_path)
    assert config_path in str(exc_info.value)


def test_invalid_values_raise(config_path):
    with open(config_path, 'w') as f:
        toml.dump({'table': {'page_size': 500}}, f)
    with pytest.raises(ConfigurationError):
        Config(config_file_path=config_path)


def test_save_and_reload(config_path):
    config = Config(config_file_path=config_path)
    config.table.page_size = 50
    config.logging.log_file = 'dashboard.log'
    config.save_config()

    reloaded = Config(config_file_path=config_path)
    assert reloaded.table.page_size == 50
    assert reloaded.logging.log_file == 'dashboard.log'


# --- Section validation ---

def test_data_config_validation():
    assert DataConfig().validate() == []
    assert DataConfig(contacts_file='contacts.xlsx').validate()
    assert DataConfig(data_dir='').validate()


def test_table_config_validation():
    assert TableConfig().validate() == []
    assert TableConfig(page_size=0).validate()
    assert TableConfig(default_sort_direction='up').validate()
    assert TableConfig(page_size_options=[10, 0]).validate()


def test_geocoding_config_validation():
    assert GeocodingConfig().validate() == []
    assert GeocodingConfig(base_url='ftp://example.com').validate()
    assert GeocodingConfig(user_agent='').validate()
    assert GeocodingConfig(timeout_seconds=0).validate()


# --- config_manager ---

def test_config_manager_singleton(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_manager, '_config_instance', None)

    first = config_manager.get_config()
    assert config_manager.get_config() is first
    assert (tmp_path / "config.toml").exists()

    refreshed = config_manager.refresh_config()
    assert refreshed is not first
