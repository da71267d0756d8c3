"""
Pure reducer for the contacts table.

Every user interaction is an action name plus a payload; ``reduce``
returns a new TableState and never touches the old one. The Dash
callbacks do nothing but translate UI events into these actions.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from contacts.models import COLUMNS
from core.exceptions import ValidationError
from . import columns as column_ops
from . import pagination as pagination_ops
from . import selection as selection_ops
from .filtering import DATE_BUCKETS
from .sorting import DIRECTIONS, SortDescriptor
from .state.models import (
    ALL,
    LOAD_FAILED,
    LOAD_LOADED,
    LOAD_PENDING,
    FilterState,
    LoadState,
    TableState,
)

Handler = Callable[..., TableState]

_HANDLERS: Dict[str, Handler] = {}


def action(name: str) -> Callable[[Handler], Handler]:
    """Register a handler for an action name."""
    def decorator(func: Handler) -> Handler:
        _HANDLERS[name] = func
        return func
    return decorator


def reduce(state: Optional[TableState], action_name: str, **payload: Any) -> TableState:
    """
    Apply one action to the state.

    Args:
        state: Current state (None means the mount-time defaults)
        action_name: One of ``ACTIONS``
        **payload: Action-specific arguments

    Returns:
        New TableState with ``last_updated`` stamped

    Raises:
        ValidationError: For unknown actions or invalid payloads
    """
    handler = _HANDLERS.get(action_name)
    if handler is None:
        raise ValidationError(f"Unknown table action '{action_name}'", field='action', value=action_name)

    current = state if state is not None else TableState()
    try:
        new_state = handler(current, **payload)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid payload for '{action_name}': {e}", field='payload', value=payload)

    if new_state is current:
        return current
    return replace(new_state, last_updated=datetime.now().isoformat())


def _with_filters(state: TableState, reset_page: bool, **changes: Any) -> TableState:
    filters = replace(state.filters, **changes)
    pagination = replace(state.pagination, page=1) if reset_page else state.pagination
    return replace(state, filters=filters, pagination=pagination)


# --- Search and filters ---

@action('search_changed')
def _search_changed(state: TableState, value: Optional[str] = '') -> TableState:
    return _with_filters(state, reset_page=True, search=value or '')


@action('industry_changed')
def _industry_changed(state: TableState, value: Optional[str] = ALL) -> TableState:
    return _with_filters(state, reset_page=True, industry=value or ALL)


@action('country_changed')
def _country_changed(state: TableState, value: Optional[str] = ALL) -> TableState:
    return _with_filters(state, reset_page=True, country=value or ALL)


@action('date_changed')
def _date_changed(state: TableState, value: Optional[str] = ALL) -> TableState:
    value = value or ALL
    if value != ALL and value not in DATE_BUCKETS:
        raise ValidationError(f"Unknown date bucket '{value}'", field='date', value=value)
    return _with_filters(state, reset_page=True, date=value)


@action('clear_filters')
def _clear_filters(state: TableState) -> TableState:
    return replace(state, filters=FilterState(), pagination=replace(state.pagination, page=1))


# --- Sorting ---

@action('sort_changed')
def _sort_changed(state: TableState, column: str, direction: str = 'ascending') -> TableState:
    if direction not in DIRECTIONS:
        raise ValidationError(f"Unknown sort direction '{direction}'", field='direction', value=direction)
    return replace(state, sort=SortDescriptor(column=column, direction=direction))


# --- Selection ---

@action('selection_changed')
def _selection_changed(state: TableState, keys: Any = ()) -> TableState:
    return replace(state, selection=selection_ops.select(keys))


@action('select_all')
def _select_all(state: TableState) -> TableState:
    return replace(state, selection=selection_ops.select_all())


@action('clear_selection')
def _clear_selection(state: TableState) -> TableState:
    return replace(state, selection=selection_ops.clear())


# --- Columns ---

@action('columns_changed')
def _columns_changed(state: TableState, keys: Any = ALL) -> TableState:
    return replace(state, visible_columns=column_ops.visible_from_value(keys))


@action('column_toggled')
def _column_toggled(state: TableState, key: str) -> TableState:
    return replace(state, visible_columns=column_ops.toggle_column(state.visible_columns, key, COLUMNS))


# --- Pagination ---

@action('page_changed')
def _page_changed(state: TableState, page: int) -> TableState:
    page = int(page)
    if page < 1:
        raise ValidationError("Page numbers start at 1", field='page', value=page)
    if state.pagination.server_paginated:
        page = pagination_ops.clamp_page(page, state.pagination.total_pages)
    return replace(state, pagination=replace(state.pagination, page=page))


@action('page_size_changed')
def _page_size_changed(state: TableState, page_size: int) -> TableState:
    page_size = int(page_size)
    if page_size <= 0:
        raise ValidationError("page_size must be positive", field='page_size', value=page_size)
    return replace(state, pagination=replace(state.pagination, page_size=page_size, page=1))


@action('totals_changed')
def _totals_changed(state: TableState, total_pages: int, total_items: int) -> TableState:
    return replace(state, pagination=pagination_ops.set_totals(state.pagination, total_pages, total_items))


# --- Loading ---

@action('load_started')
def _load_started(state: TableState) -> TableState:
    return replace(state, load=LoadState(status=LOAD_PENDING, token=state.load.token + 1))


@action('load_succeeded')
def _load_succeeded(state: TableState, token: Optional[int] = None) -> TableState:
    if token is not None and token != state.load.token:
        logging.debug(f"Dropping stale load result (token {token}, current {state.load.token})")
        return state
    return replace(state, load=replace(state.load, status=LOAD_LOADED, error=None))


@action('load_failed')
def _load_failed(state: TableState, error: str = '', token: Optional[int] = None) -> TableState:
    if token is not None and token != state.load.token:
        logging.debug(f"Dropping stale load failure (token {token}, current {state.load.token})")
        return state
    logging.warning(f"Contact load failed: {error}")
    return replace(state, load=replace(state.load, status=LOAD_FAILED, error=error or 'Unknown error'))


# --- Details drawer ---

@action('contact_opened')
def _contact_opened(state: TableState, contact_id: Any) -> TableState:
    return replace(state, selected_contact_id=str(contact_id))


@action('contact_closed')
def _contact_closed(state: TableState) -> TableState:
    return replace(state, selected_contact_id=None)


ACTIONS = tuple(_HANDLERS)
