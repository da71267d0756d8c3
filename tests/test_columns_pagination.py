"""
Tests for column visibility and pagination bookkeeping.
"""
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from contacts.models import COLUMNS
from table.columns import (
    ALL_COLUMNS,
    ExplicitColumns,
    header_columns,
    is_visible,
    toggle_column,
    visible_from_value,
    visible_to_value,
)
from table.pagination import Pagination, clamp_page, page_count, page_slice, set_totals
from table.sorting import SortDescriptor


class TestColumns:

    def test_all_columns_in_declared_order(self):
        headers = header_columns(COLUMNS, ALL_COLUMNS, SortDescriptor('country', 'ascending'))
        assert [h['uid'] for h in headers] == [c['uid'] for c in COLUMNS]

    def test_explicit_set_keeps_declared_order(self):
        visible = ExplicitColumns(frozenset(['country', 'full_name']))
        headers = header_columns(COLUMNS, visible, SortDescriptor())
        assert [h['uid'] for h in headers] == ['full_name', 'country']

    def test_sorted_column_carries_direction(self):
        headers = header_columns(COLUMNS, ALL_COLUMNS, SortDescriptor('country', 'descending'))
        marked = [h for h in headers if 'sort_direction' in h]
        assert len(marked) == 1
        assert marked[0]['uid'] == 'country'
        assert marked[0]['sort_direction'] == 'descending'

    def test_descriptors_not_mutated(self):
        header_columns(COLUMNS, ALL_COLUMNS, SortDescriptor('full_name', 'ascending'))
        assert all('sort_direction' not in c for c in COLUMNS)

    def test_hidden_sort_column_has_no_header(self):
        headers = header_columns(COLUMNS, ExplicitColumns(frozenset(['full_name'])), SortDescriptor('country', 'ascending'))
        assert all('sort_direction' not in h for h in headers)

    def test_toggle_from_all(self):
        visible = toggle_column(ALL_COLUMNS, 'email', COLUMNS)
        assert isinstance(visible, ExplicitColumns)
        assert not is_visible(visible, 'email')
        assert is_visible(visible, 'full_name')
        assert is_visible(toggle_column(visible, 'email', COLUMNS), 'email')

    def test_value_conversion(self):
        assert visible_from_value('all') == ALL_COLUMNS
        assert visible_from_value(None) == ALL_COLUMNS
        assert visible_to_value(ExplicitColumns(frozenset(['b', 'a']))) == ['a', 'b']


class TestPagination:

    def test_page_count_at_least_one(self):
        assert page_count(0, 10) == 1
        assert page_count(25, 10) == 3
        assert page_count(30, 10) == 3

    def test_clamp(self):
        assert clamp_page(0, 3) == 1
        assert clamp_page(9, 3) == 3

    def test_slice(self):
        rows = list(range(25))
        assert page_slice(rows, 3, 10) == [20, 21, 22, 23, 24]
        assert page_slice(rows, 4, 10) == []

    def test_set_totals_switches_to_server_mode(self):
        pagination = set_totals(Pagination(), total_pages=7, total_items=64)
        assert pagination.server_paginated
        assert (pagination.total_pages, pagination.total_items) == (7, 64)

    def test_from_dict_repairs_bad_values(self):
        pagination = Pagination.from_dict({'page': 0, 'page_size': -5})
        assert pagination.page == 1
        assert pagination.page_size == 1
