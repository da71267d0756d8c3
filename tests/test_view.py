"""
Tests for view derivation and the view cache.
"""
import os
import sys
from dataclasses import replace

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from table.pagination import Pagination
from table.reducer import reduce
from table.state.models import FilterState, TableState
from table.view import ViewCache, derive_view
from tests.contact_fixtures import NOW, example_rows, larger_rows


class TestDeriveView:

    def test_pipeline_order(self):
        rows = larger_rows()
        state = reduce_state(
            ('industry_changed', {'value': 'Tech'}),
            ('sort_changed', {'column': 'full_name', 'direction': 'descending'}),
            ('page_size_changed', {'page_size': 3}),
        )
        view = derive_view(rows, state, now=NOW)
        assert all(r.industry == 'Tech' for r in view.filtered_rows)
        assert [r.full_name for r in view.page_rows] == [r.full_name for r in view.sorted_rows[:3]]
        assert view.sorted_rows[0].full_name > view.sorted_rows[-1].full_name
        assert view.total_items == len(view.filtered_rows)

    def test_page_clamped_to_filtered_count(self):
        rows = larger_rows()
        state = replace(TableState(), pagination=Pagination(page=9, page_size=10))
        view = derive_view(rows, state)
        assert view.page == 3
        assert len(view.page_rows) == 5

    def test_selection_summary(self):
        rows = example_rows()
        state = reduce(TableState(), 'select_all')
        assert derive_view(rows, state).selection_summary() == "All items selected"
        state = reduce(state, 'selection_changed', keys=['1'])
        assert derive_view(rows, state).selection_summary() == "1 of 3 selected"

    def test_select_all_then_filter(self):
        rows = example_rows()
        state = reduce(reduce(TableState(), 'select_all'), 'industry_changed', value='Tech')
        view = derive_view(rows, state)
        assert view.selected_ids == ['1', '2']

    def test_server_mode_uses_reported_counters(self):
        rows = larger_rows(10)
        state = reduce(TableState(), 'totals_changed', total_pages=5, total_items=48)
        state = reduce(state, 'page_changed', page=2)
        view = derive_view(rows, state)
        assert (view.page, view.total_pages, view.total_items) == (2, 5, 48)
        assert len(view.page_rows) == 10

    def test_has_active_filters(self):
        assert not derive_view(example_rows(), TableState()).has_active_filters
        state = replace(TableState(), filters=FilterState(search='ann'))
        assert derive_view(example_rows(), state).has_active_filters


def reduce_state(*actions):
    state = TableState()
    for name, payload in actions:
        state = reduce(state, name, **payload)
    return state


class TestViewCache:

    def test_hit_on_same_rows_and_query(self):
        cache = ViewCache()
        rows = tuple(larger_rows())
        state = TableState()
        first = cache.get(rows, state)
        # last_updated is not part of the cache key
        second = cache.get(rows, replace(state, last_updated='later'))
        assert first is second
        assert (cache.hits, cache.misses) == (1, 1)

    def test_miss_on_new_rows(self):
        cache = ViewCache()
        state = TableState()
        cache.get(tuple(larger_rows()), state)
        cache.get(tuple(larger_rows()), state)
        assert cache.misses == 2

    def test_miss_on_query_change(self):
        cache = ViewCache()
        rows = tuple(larger_rows())
        cache.get(rows, TableState())
        view = cache.get(rows, reduce(TableState(), 'country_changed', value='US'))
        assert cache.misses == 2
        assert all(r.country == 'US' for r in view.filtered_rows)

    def test_invalidate(self):
        cache = ViewCache()
        rows = tuple(example_rows())
        cache.get(rows, TableState())
        cache.invalidate()
        cache.get(rows, TableState())
        assert cache.misses == 2
