"""
Derived view of the contacts table.

``derive_view`` runs the whole projection pipeline for one state:
search and filters, then sort, then pagination and selection. Facets
come from the full row collection. ``ViewCache`` keeps the last result
and only recomputes when the rows or a query-relevant part of the
state change.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from contacts.models import COLUMNS, Contact
from .columns import header_columns
from .facets import unique_countries, unique_industries
from .filtering import ALL, filter_rows
from .pagination import clamp_page, page_count, page_slice
from .selection import effective_selection, get_selected_rows
from .sorting import sort_rows
from .state.models import TableState


@dataclass(frozen=True)
class DerivedView:
    """Everything the table renders for one state."""
    filtered_rows: List[Contact] = field(default_factory=list)
    sorted_rows: List[Contact] = field(default_factory=list)
    page_rows: List[Contact] = field(default_factory=list)
    selected_ids: List[str] = field(default_factory=list)
    selected_rows: List[Contact] = field(default_factory=list)
    header_columns: List[Dict[str, Any]] = field(default_factory=list)
    industries: List[str] = field(default_factory=list)
    countries: List[str] = field(default_factory=list)
    has_active_filters: bool = False
    page: int = 1
    total_pages: int = 1
    total_items: int = 0

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)

    def selection_summary(self) -> str:
        if self.filtered_rows and self.selected_count == len(self.filtered_rows):
            return "All items selected"
        return f"{self.selected_count} of {len(self.filtered_rows)} selected"


def derive_view(
    rows: Sequence[Contact],
    state: TableState,
    columns: Sequence[Dict[str, Any]] = COLUMNS,
    now: Optional[datetime] = None,
) -> DerivedView:
    """
    Project the row collection through the table state.

    Args:
        rows: Full row collection (the current page only, when the data
            source paginates on the server)
        state: Current table state
        columns: Declared column descriptors
        now: Reference time for date buckets

    Returns:
        DerivedView for rendering
    """
    filters = state.filters
    filtered = filter_rows(
        rows,
        search=filters.search,
        industry=filters.industry,
        country=filters.country,
        date=filters.date,
        now=now,
    )
    ordered = sort_rows(filtered, state.sort)

    pagination = state.pagination
    if pagination.server_paginated:
        total_pages = pagination.total_pages
        total_items = pagination.total_items
        page = pagination.page
        page_rows = ordered
    else:
        total_items = len(ordered)
        total_pages = page_count(total_items, pagination.page_size)
        page = clamp_page(pagination.page, total_pages)
        page_rows = page_slice(ordered, page, pagination.page_size)

    return DerivedView(
        filtered_rows=filtered,
        sorted_rows=ordered,
        page_rows=page_rows,
        selected_ids=effective_selection(state.selection, filtered),
        selected_rows=get_selected_rows(state.selection, filtered),
        header_columns=header_columns(columns, state.visible_columns, state.sort),
        industries=unique_industries(rows),
        countries=unique_countries(rows),
        has_active_filters=filters.is_active,
        page=page,
        total_pages=total_pages,
        total_items=total_items,
    )


class ViewCache:
    """
    Memoizes the most recent derived view.

    The row collection is keyed by identity, so callers must replace it
    (not mutate it) when data is reloaded.
    """

    def __init__(self, columns: Sequence[Dict[str, Any]] = COLUMNS):
        self.columns = columns
        self._rows: Optional[Sequence[Contact]] = None
        self._key: Optional[Tuple] = None
        self._view: Optional[DerivedView] = None
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _state_key(state: TableState, now: Optional[datetime]) -> Tuple:
        time_key = None
        if state.filters.date != ALL:
            moment = now or datetime.now(timezone.utc)
            time_key = moment.replace(second=0, microsecond=0)
        return (
            state.filters,
            state.sort,
            state.selection,
            state.visible_columns,
            state.pagination,
            time_key,
        )

    def get(self, rows: Sequence[Contact], state: TableState, now: Optional[datetime] = None) -> DerivedView:
        key = self._state_key(state, now)
        if self._view is not None and rows is self._rows and key == self._key:
            self.hits += 1
            return self._view

        self.misses += 1
        self._view = derive_view(rows, state, self.columns, now)
        self._rows = rows
        self._key = key
        logging.debug(f"Derived table view: {len(self._view.filtered_rows)}/{len(rows)} rows pass filters")
        return self._view

    def invalidate(self) -> None:
        self._rows = None
        self._key = None
        self._view = None
