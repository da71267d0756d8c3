"""
Table query engine for the Contacts Dashboard.

This package turns a contact collection plus the user's query
parameters into the view a table renders:

- filtering: free-text search, categorical and date-bucket filters
- sorting: stable single-column sort
- selection: explicit id sets or "all filtered rows"
- columns / pagination: visible columns and page bookkeeping
- facets: distinct filter values over the full collection
- reducer / view: pure state updates and the derived view
"""

from .columns import ALL_COLUMNS, AllColumns, ExplicitColumns, header_columns, toggle_column
from .facets import distinct_values, unique_countries, unique_industries
from .filtering import DATE_BUCKETS, filter_rows, has_active_filters
from .pagination import Pagination, clamp_page, page_count, page_slice
from .query_parameters import export_table_state_to_toml, import_table_state_from_toml
from .reducer import ACTIONS, reduce
from .selection import (
    ALL_ROWS,
    AllRows,
    ExplicitSet,
    clear,
    effective_selection,
    get_selected_rows,
    select,
    select_all,
)
from .sorting import SortDescriptor, sort_rows
from .state import FilterState, TableState, initial_state
from .view import DerivedView, ViewCache, derive_view

__all__ = [
    # State
    'TableState',
    'FilterState',
    'SortDescriptor',
    'Pagination',
    'initial_state',

    # Pipeline stages
    'filter_rows',
    'has_active_filters',
    'DATE_BUCKETS',
    'sort_rows',
    'distinct_values',
    'unique_industries',
    'unique_countries',
    'page_count',
    'clamp_page',
    'page_slice',

    # Selection and columns
    'AllRows',
    'ExplicitSet',
    'ALL_ROWS',
    'select',
    'select_all',
    'clear',
    'effective_selection',
    'get_selected_rows',
    'AllColumns',
    'ExplicitColumns',
    'ALL_COLUMNS',
    'header_columns',
    'toggle_column',

    # Reducer and view
    'reduce',
    'ACTIONS',
    'derive_view',
    'DerivedView',
    'ViewCache',

    # Parameter files
    'export_table_state_to_toml',
    'import_table_state_from_toml',
]
