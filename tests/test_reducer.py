"""
Tests for the table reducer and the store helpers around it.
"""
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.exceptions import ValidationError
from table.columns import ALL_COLUMNS, ExplicitColumns
from table.reducer import ACTIONS, reduce
from table.selection import ALL_ROWS, ExplicitSet
from table.state.helpers import get_table_state, initial_store_data, update_table_state
from table.state.models import LOAD_FAILED, LOAD_LOADED, LOAD_PENDING, TableState, initial_state


def _on_page(page):
    return reduce(TableState(), 'page_changed', page=page)


class TestFilterActions:

    @pytest.mark.parametrize('action_name,payload', [
        ('search_changed', {'value': 'ann'}),
        ('industry_changed', {'value': 'Tech'}),
        ('country_changed', {'value': 'US'}),
        ('date_changed', {'value': 'last7Days'}),
        ('clear_filters', {}),
    ])
    def test_filter_change_resets_page(self, action_name, payload):
        state = reduce(_on_page(3), action_name, **payload)
        assert state.pagination.page == 1

    def test_search_sets_filter(self):
        state = reduce(None, 'search_changed', value='ann')
        assert state.filters.search == 'ann'
        assert state.has_active_filters

    def test_none_values_fall_back_to_all(self):
        state = reduce(TableState(), 'industry_changed', value=None)
        assert state.filters.industry == 'all'

    def test_clear_filters(self):
        state = reduce(None, 'search_changed', value='x')
        state = reduce(state, 'country_changed', value='US')
        state = reduce(state, 'clear_filters')
        assert not state.has_active_filters

    def test_unknown_date_bucket_rejected(self):
        with pytest.raises(ValidationError):
            reduce(TableState(), 'date_changed', value='lastCentury')


class TestOtherActions:

    def test_sort_changed(self):
        state = reduce(TableState(), 'sort_changed', column='country', direction='descending')
        assert state.sort.column == 'country'
        assert state.sort.direction == 'descending'

    def test_bad_sort_direction(self):
        with pytest.raises(ValidationError):
            reduce(TableState(), 'sort_changed', column='country', direction='upwards')

    def test_selection_actions(self):
        state = reduce(TableState(), 'selection_changed', keys=['1', '2'])
        assert state.selection == ExplicitSet(frozenset(['1', '2']))
        state = reduce(state, 'select_all')
        assert state.selection == ALL_ROWS
        state = reduce(state, 'clear_selection')
        assert state.selection == ExplicitSet()

    def test_columns_changed(self):
        state = reduce(TableState(), 'columns_changed', keys=['full_name'])
        assert state.visible_columns == ExplicitColumns(frozenset(['full_name']))
        assert reduce(state, 'columns_changed', keys='all').visible_columns == ALL_COLUMNS

    def test_column_toggled(self):
        state = reduce(TableState(), 'column_toggled', key='email')
        assert 'email' not in state.visible_columns.keys

    def test_page_below_one_rejected(self):
        with pytest.raises(ValidationError):
            reduce(TableState(), 'page_changed', page=0)

    def test_page_size_resets_page(self):
        state = reduce(_on_page(4), 'page_size_changed', page_size=50)
        assert state.pagination.page_size == 50
        assert state.pagination.page == 1

    def test_server_mode_clamps_page(self):
        state = reduce(TableState(), 'totals_changed', total_pages=3, total_items=25)
        state = reduce(state, 'page_changed', page=9)
        assert state.pagination.page == 3

    def test_contact_drawer(self):
        state = reduce(TableState(), 'contact_opened', contact_id=42)
        assert state.selected_contact_id == '42'
        assert reduce(state, 'contact_closed').selected_contact_id is None

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            reduce(TableState(), 'explode')

    def test_bad_payload_wrapped(self):
        with pytest.raises(ValidationError):
            reduce(TableState(), 'page_changed', page='three')

    def test_old_state_untouched(self):
        before = TableState()
        after = reduce(before, 'search_changed', value='x')
        assert before.filters.search == ''
        assert after.last_updated is not None

    def test_all_actions_registered(self):
        for name in ('search_changed', 'load_started', 'load_succeeded', 'load_failed', 'totals_changed'):
            assert name in ACTIONS


class TestLoadTokens:

    def test_load_cycle(self):
        state = reduce(TableState(), 'load_started')
        assert state.load.status == LOAD_PENDING
        token = state.load.token
        state = reduce(state, 'load_succeeded', token=token)
        assert state.load.status == LOAD_LOADED

    def test_stale_result_is_ignored(self):
        first = reduce(TableState(), 'load_started')
        second = reduce(first, 'load_started')
        stale = reduce(second, 'load_failed', error='timeout', token=first.load.token)
        assert stale is second
        assert stale.load.status == LOAD_PENDING

    def test_failure_records_error(self):
        state = reduce(TableState(), 'load_started')
        state = reduce(state, 'load_failed', error='boom', token=state.load.token)
        assert state.load.status == LOAD_FAILED
        assert state.load.error == 'boom'


class TestStoreHelpers:

    def test_empty_store_gives_defaults(self):
        assert get_table_state(None) == TableState()

    def test_update_round_trips_through_dict(self):
        data = update_table_state(initial_store_data(), 'country_changed', value='US')
        assert isinstance(data, dict)
        assert get_table_state(data).filters.country == 'US'

    def test_store_dict_is_lossless(self):
        state = initial_state(page_size=20, sort_column='country', sort_direction='descending')
        state = reduce(state, 'select_all')
        state = reduce(state, 'columns_changed', keys=['full_name', 'email'])
        state = reduce(state, 'contact_opened', contact_id='3')
        assert TableState.from_dict(state.to_dict()) == state
