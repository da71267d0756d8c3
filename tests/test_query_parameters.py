"""
Tests for saving and restoring table views as TOML.
"""
import os
import sys

import pytest
import toml

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.exceptions import ValidationError
from table.columns import ALL_COLUMNS, ExplicitColumns
from table.reducer import reduce
from table.selection import ALL_ROWS
from table.state.models import TableState
from table.query_parameters import export_table_state_to_toml, import_table_state_from_toml


@pytest.fixture
def configured_state():
    state = reduce(None, 'search_changed', value='acme')
    state = reduce(state, 'industry_changed', value='Tech')
    state = reduce(state, 'date_changed', value='last30Days')
    state = reduce(state, 'sort_changed', column='country', direction='descending')
    state = reduce(state, 'columns_changed', keys=['full_name', 'country'])
    state = reduce(state, 'page_size_changed', page_size=20)
    return reduce(state, 'select_all')


class TestExport:

    def test_sections(self, configured_state):
        data = toml.loads(export_table_state_to_toml(configured_state, user_notes="Tech leads"))
        assert set(data) == {'metadata', 'filters', 'sort', 'view'}
        assert data['metadata']['format_version'] == '1.0'
        assert data['metadata']['user_notes'] == "Tech leads"
        assert data['filters']['search'] == 'acme'
        assert data['sort'] == {'column': 'country', 'direction': 'descending'}
        assert data['view']['visible_columns'] == ['country', 'full_name']

    def test_selection_not_exported(self, configured_state):
        text = export_table_state_to_toml(configured_state)
        assert 'selection' not in text

    def test_all_columns_omitted(self):
        data = toml.loads(export_table_state_to_toml(TableState()))
        assert 'visible_columns' not in data['view']


class TestImport:

    def test_restores_query_parameters(self, configured_state):
        text = export_table_state_to_toml(configured_state)
        state, errors = import_table_state_from_toml(text)
        assert errors == []
        assert state.filters == configured_state.filters
        assert state.sort == configured_state.sort
        assert state.visible_columns == ExplicitColumns(frozenset(['full_name', 'country']))
        assert state.pagination.page_size == 20

    def test_session_details_kept_from_base(self, configured_state):
        text = export_table_state_to_toml(TableState())
        state, _ = import_table_state_from_toml(text, base=configured_state)
        assert state.selection == ALL_ROWS
        assert state.visible_columns == ALL_COLUMNS

    def test_invalid_toml_raises(self):
        with pytest.raises(ValidationError):
            import_table_state_from_toml("[filters\nsearch = ")

    def test_missing_section(self):
        state, errors = import_table_state_from_toml("[metadata]\nformat_version = '1.0'\n")
        assert any('filters' in e for e in errors)
        assert state == TableState()

    def test_version_mismatch(self):
        text = export_table_state_to_toml(TableState()).replace("'1.0'", "'9.9'").replace('"1.0"', '"9.9"')
        _, errors = import_table_state_from_toml(text)
        assert errors and 'format version' in errors[0]

    def test_bad_values_reported_and_defaulted(self):
        text = toml.dumps({
            'metadata': {'format_version': '1.0'},
            'filters': {'search': '', 'date': 'lastDecade'},
            'sort': {'column': 'shoe_size', 'direction': 'descending'},
            'view': {'page_size': -1, 'visible_columns': ['full_name', 'shoe_size']},
        })
        state, errors = import_table_state_from_toml(text)
        assert len(errors) == 4
        assert state.filters.date == 'all'
        assert state.sort.column == 'full_name'
        assert state.sort.direction == 'descending'
        assert state.pagination.page_size == 10
        assert state.visible_columns == ExplicitColumns(frozenset(['full_name']))

    @pytest.mark.parametrize('text', [
        'metadata = 1\n[filters]\n[sort]\n[view]\n',
        'filters = "tech"\n[metadata]\nformat_version = "1.0"\n[sort]\n[view]\n',
        'sort = ["country"]\n[metadata]\nformat_version = "1.0"\n[filters]\n[view]\n',
    ])
    def test_section_that_is_not_a_table(self, text):
        state, errors = import_table_state_from_toml(text)
        assert any('must be a table' in e for e in errors)
        assert state == TableState()

    def test_wrongly_typed_values_reported_and_defaulted(self):
        text = toml.dumps({
            'metadata': {'format_version': '1.0'},
            'filters': {'date': ['x'], 'industry': ['Tech'], 'country': 3},
            'sort': {'column': ['country'], 'direction': {'way': 'up'}},
            'view': {'page_size': True, 'visible_columns': ['full_name']},
        })
        state, errors = import_table_state_from_toml(text)
        assert len(errors) == 6
        assert state.filters.date == 'all'
        assert state.filters.industry == 'all'
        assert state.filters.country == 'all'
        assert state.sort == TableState().sort
        assert state.pagination.page_size == 10
        assert state.visible_columns == ExplicitColumns(frozenset(['full_name']))

    def test_server_pagination_kept(self):
        base = reduce(TableState(), 'totals_changed', total_pages=9, total_items=85)
        base = reduce(base, 'page_changed', page=4)
        text = toml.dumps({
            'metadata': {'format_version': '1.0'},
            'filters': {},
            'sort': {},
            'view': {'page_size': 25},
        })
        state, errors = import_table_state_from_toml(text, base=base)
        assert errors == []
        assert state.pagination.server_paginated
        assert state.pagination.total_items == 85
        assert state.pagination.total_pages == 9
        assert state.pagination.page_size == 25
        assert state.pagination.page == 1
