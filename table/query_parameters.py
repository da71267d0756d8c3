"""
Table query parameter export/import for the Contacts Dashboard.

This module saves the user-facing query parameters of the contacts table
(search, filters, sort, visible columns, page size) to TOML so a view can
be shared or restored. Selection, load status and the current page are
session details and are not exported.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Tuple

import toml

from contacts.models import COLUMN_KEYS
from core.exceptions import ValidationError
from .columns import AllColumns, visible_from_value, visible_to_value
from .filtering import ALL, DATE_BUCKETS
from .sorting import DIRECTIONS, SortDescriptor
from .state.models import FilterState, TableState

FORMAT_VERSION = '1.0'
REQUIRED_SECTIONS = ('metadata', 'filters', 'sort', 'view')


def export_table_state_to_toml(state: TableState, user_notes: str = "", app_version: str = "1.0.0") -> str:
    """
    Export the table's query parameters to a TOML string.

    Args:
        state: Table state to export
        user_notes: User-provided notes
        app_version: Application version

    Returns:
        TOML format string

    Raises:
        ValidationError: If serialization fails
    """
    params = {
        'metadata': {
            'export_timestamp': datetime.now().isoformat(),
            'app_version': app_version,
            'format_version': FORMAT_VERSION,
            'user_notes': user_notes,
        },
        'filters': {
            'search': state.filters.search,
            'industry': state.filters.industry,
            'country': state.filters.country,
            'date': state.filters.date,
        },
        'sort': {
            'column': state.sort.column,
            'direction': state.sort.direction,
        },
        'view': {
            'page_size': state.pagination.page_size,
        },
    }
    # TOML has no null; an absent key means "all columns"
    if not isinstance(state.visible_columns, AllColumns):
        params['view']['visible_columns'] = visible_to_value(state.visible_columns)

    try:
        return toml.dumps(params)
    except (TypeError, ValueError) as e:
        error_msg = f"Error exporting table parameters to TOML: {e}"
        logging.error(error_msg)
        raise ValidationError(error_msg, field="table_parameters")


def import_table_state_from_toml(toml_string: str, base: TableState = None) -> Tuple[TableState, List[str]]:
    """
    Import table query parameters from a TOML string.

    Invalid individual values are reported and left at their defaults;
    the rest of the file still applies.

    Args:
        toml_string: TOML text produced by export_table_state_to_toml
        base: State to apply the parameters onto (defaults to a fresh state)

    Returns:
        Tuple of (new TableState, error messages)

    Raises:
        ValidationError: If the text is not valid TOML
    """
    base = base or TableState()
    errors: List[str] = []

    try:
        data = toml.loads(toml_string)
    except toml.TomlDecodeError as e:
        error_msg = f"Invalid TOML format: {e}"
        logging.error(error_msg)
        raise ValidationError(error_msg, field="toml_string")

    for section in REQUIRED_SECTIONS:
        if section not in data:
            errors.append(f"Missing required section: {section}")
        elif not isinstance(data[section], dict):
            errors.append(f"Section {section} must be a table")
    if errors:
        return base, errors

    format_version = data['metadata'].get('format_version')
    if format_version != FORMAT_VERSION:
        errors.append(f"Unsupported format version: {format_version}")
        return base, errors

    filters = _parse_filters(data['filters'], errors)
    sort = _parse_sort(data['sort'], base.sort, errors)
    pagination, visible = _parse_view(data['view'], base, errors)

    state = replace(
        base,
        filters=filters,
        sort=sort,
        visible_columns=visible,
        pagination=pagination,
    )
    if errors:
        logging.warning(f"Imported table parameters with {len(errors)} issue(s): {errors}")
    return state, errors


def _parse_filters(section: Dict[str, Any], errors: List[str]) -> FilterState:
    search = section.get('search', '')
    if not isinstance(search, str):
        errors.append("Search must be a string")
        search = ''

    date = section.get('date', ALL)
    if not isinstance(date, str) or (date != ALL and date not in DATE_BUCKETS):
        errors.append(f"Unknown date bucket '{date}'")
        date = ALL

    return FilterState(
        search=search,
        industry=_category(section, 'industry', errors),
        country=_category(section, 'country', errors),
        date=date,
    )


def _category(section: Dict[str, Any], name: str, errors: List[str]) -> str:
    value = section.get(name) or ALL
    if not isinstance(value, str):
        errors.append(f"{name.capitalize()} filter must be a string")
        return ALL
    return value


def _parse_sort(section: Dict[str, Any], default: SortDescriptor, errors: List[str]) -> SortDescriptor:
    column = section.get('column', default.column)
    direction = section.get('direction', default.direction)

    if not isinstance(column, str) or column not in COLUMN_KEYS:
        errors.append(f"Unknown sort column '{column}'")
        column = default.column
    if not isinstance(direction, str) or direction not in DIRECTIONS:
        errors.append(f"Unknown sort direction '{direction}'")
        direction = default.direction
    return SortDescriptor(column=column, direction=direction)


def _parse_view(section: Dict[str, Any], base: TableState, errors: List[str]):
    page_size = section.get('page_size', base.pagination.page_size)
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        errors.append("Page size must be a positive integer")
        page_size = base.pagination.page_size
    pagination = replace(base.pagination, page_size=page_size, page=1)

    columns = section.get('visible_columns')
    if columns is None:
        return pagination, visible_from_value(ALL)
    if not isinstance(columns, list):
        errors.append("Visible columns must be a list")
        return pagination, base.visible_columns

    known = [c for c in columns if isinstance(c, str) and c in COLUMN_KEYS]
    if len(known) != len(columns):
        unknown = [c for c in columns if not (isinstance(c, str) and c in COLUMN_KEYS)]
        errors.append(f"Unknown columns ignored: {', '.join(map(str, unknown))}")
    return pagination, visible_from_value(known)
