"""
Tests for row selection and how it resolves against filtered rows.
"""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from table.filtering import filter_rows
from table.selection import (
    ALL_ROWS,
    EMPTY_SELECTION,
    AllRows,
    ExplicitSet,
    effective_selection,
    get_selected_rows,
    select,
    selection_from_value,
    selection_to_value,
    toggle,
)
from tests.contact_fixtures import example_rows, larger_rows


class TestSelect:

    def test_all_keyword(self):
        assert select('all') == ALL_ROWS

    def test_single_string_key(self):
        assert select('7') == ExplicitSet(frozenset(['7']))

    def test_ids_are_stringified(self):
        assert select([1, 2]) == ExplicitSet(frozenset(['1', '2']))

    def test_empty(self):
        assert select([]) == EMPTY_SELECTION


class TestEffectiveSelection:

    def test_subset_of_filtered(self):
        rows = larger_rows()
        filtered = filter_rows(rows, industry='Tech')
        selection = select([r.id for r in rows[:10]])
        filtered_ids = {r.id for r in filtered}
        assert set(effective_selection(selection, filtered)) <= filtered_ids

    def test_select_all_shrinks_with_filter(self):
        rows = example_rows()
        everything = effective_selection(ALL_ROWS, filter_rows(rows))
        narrowed = effective_selection(ALL_ROWS, filter_rows(rows, industry='Tech'))
        assert everything == ['1', '2', '3']
        assert narrowed == ['1', '2']

    def test_stored_ids_survive_filtering(self):
        rows = example_rows()
        selection = select(['1', '3'])
        assert effective_selection(selection, filter_rows(rows, industry='Tech')) == ['1']
        # Widening the filter brings the hidden id back
        assert effective_selection(selection, filter_rows(rows)) == ['1', '3']

    def test_selected_rows_in_filtered_order(self):
        rows = example_rows()
        selected = get_selected_rows(select(['3', '1']), rows)
        assert [r.id for r in selected] == ['1', '3']


class TestToggle:

    def test_toggle_adds_and_removes(self):
        rows = example_rows()
        selection = toggle(EMPTY_SELECTION, '2', rows)
        assert selection == ExplicitSet(frozenset(['2']))
        assert toggle(selection, '2', rows) == EMPTY_SELECTION

    def test_toggle_from_all_materializes_filtered(self):
        rows = example_rows()
        filtered = filter_rows(rows, industry='Tech')
        assert toggle(ALL_ROWS, '1', filtered) == ExplicitSet(frozenset(['2']))


def test_value_round_trip():
    assert selection_to_value(ALL_ROWS) == 'all'
    assert selection_to_value(select(['b', 'a'])) == ['a', 'b']
    assert isinstance(selection_from_value('all'), AllRows)
    assert selection_from_value(None) == EMPTY_SELECTION
