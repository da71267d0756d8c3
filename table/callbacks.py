"""
Callback functions for the contacts table page.

Each callback is a plain function that turns a UI event into a reducer
action on the stored TableState (or renders the derived view), so it can
be unit tested without a running Dash server. ``register_callbacks``
wires them to component ids.
"""

import base64
import binascii
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import plotly.graph_objects as go
from dash import Input, Output, State, dcc, html, no_update

import dash_bootstrap_components as dbc

from config_manager import get_config
from contacts.models import COLUMN_KEYS
from contacts.loader import export_contacts_csv, get_repository, load_contacts, parse_contacts
from core import __version__
from core.exceptions import FileProcessingError, ValidationError
from geo.geocoding import DEFAULT_COORDINATES, smart_geocode
from . import ui
from .columns import visible_to_value
from .query_parameters import export_table_state_to_toml, import_table_state_from_toml
from .selection import AllRows, selection_to_value, toggle
from .state.helpers import get_table_state, initial_store_data, update_table_state
from .view import ViewCache

STORE_ID = 'contacts-table-state'

# One cache per process; rows are keyed by repository identity
_view_cache = ViewCache()

# Apps that already have the table callbacks attached
_registered_apps = set()


def _current_view(store_data: Optional[Dict[str, Any]]):
    state = get_table_state(store_data)
    return state, _view_cache.get(get_repository().all(), state)


# --- Data loading ---

def load_contacts_data(_, store_data):
    """Load the configured contacts file into the shared repository."""
    store_data = store_data or initial_store_data(get_config())
    store_data = update_table_state(store_data, 'load_started')
    token = store_data['load']['token']

    path = get_config().data.get_contacts_path()
    try:
        get_repository().replace(load_contacts(path))
    except FileProcessingError as e:
        logging.error(f"Contact load failed for {path}: {e}")
        return update_table_state(store_data, 'load_failed', error=str(e), token=token)

    return update_table_state(store_data, 'load_succeeded', token=token)


def import_contacts(contents, filename, store_data):
    """
    Replace the working set with an uploaded JSON or CSV file.

    Returns the new store data and a status alert. Selection and the
    details drawer are reset since ids refer to the previous set.
    """
    if not contents:
        return no_update, no_update

    store_data = update_table_state(store_data, 'load_started')
    token = store_data['load']['token']
    try:
        _, content_string = contents.split(',', 1)
        contacts = parse_contacts(base64.b64decode(content_string), filename or '', operation='import')
    except (ValueError, binascii.Error) as e:
        logging.error(f"Could not decode uploaded contacts file {filename}: {e}")
        error = f"Could not read {filename}"
        return (
            update_table_state(store_data, 'load_failed', error=error, token=token),
            dbc.Alert(error, color="danger", dismissable=True),
        )
    except FileProcessingError as e:
        return (
            update_table_state(store_data, 'load_failed', error=e.message, token=token),
            dbc.Alert(f"Could not import {filename}: {e.message}", color="danger", dismissable=True),
        )

    get_repository().replace(contacts)
    store_data = update_table_state(store_data, 'load_succeeded', token=token)
    store_data = update_table_state(store_data, 'clear_selection')
    store_data = update_table_state(store_data, 'contact_closed')
    status = dbc.Alert(
        f"Imported {len(contacts)} contacts from {filename}", color="success", dismissable=True, duration=4000
    )
    return store_data, status


# --- Search and filters ---

def on_search_change(value, store_data):
    return update_table_state(store_data, 'search_changed', value=value or '')


def on_industry_change(value, store_data):
    return update_table_state(store_data, 'industry_changed', value=value)


def on_country_change(value, store_data):
    return update_table_state(store_data, 'country_changed', value=value)


def on_date_change(value, store_data):
    return update_table_state(store_data, 'date_changed', value=value)


def on_clear_filters(n_clicks, store_data):
    """Reset filters in state and in the input controls."""
    if not n_clicks:
        return no_update, no_update, no_update, no_update, no_update
    return update_table_state(store_data, 'clear_filters'), '', 'all', 'all', 'all'


# --- Sorting, columns and pages ---

def on_sort_change(column, direction, store_data):
    state = get_table_state(store_data)
    return update_table_state(
        store_data,
        'sort_changed',
        column=column or state.sort.column,
        direction=direction or state.sort.direction,
    )


def on_columns_change(values, store_data):
    values = values or []
    if set(values) == set(COLUMN_KEYS):
        return update_table_state(store_data, 'columns_changed', keys='all')
    return update_table_state(store_data, 'columns_changed', keys=values)


def on_page_change(active_page, store_data):
    if not active_page:
        return no_update
    _, view = _current_view(store_data)
    if active_page == view.page:
        return no_update
    return update_table_state(store_data, 'page_changed', page=active_page)


def on_page_size_change(page_size, store_data):
    if not page_size:
        return no_update
    return update_table_state(store_data, 'page_size_changed', page_size=page_size)


# --- Selection ---

def on_grid_selection(selected_rows, store_data):
    """
    Apply the grid's checkbox changes on the visible page to the selection.

    The grid only knows about the rendered page: each row there whose box
    disagrees with the stored selection is toggled, and ids on other pages
    keep their previous state.
    """
    state, view = _current_view(store_data)
    checked = {str(row['id']) for row in (selected_rows or []) if row and 'id' in row}
    if isinstance(state.selection, AllRows):
        selected = set(view.selected_ids)
    else:
        selected = state.selection.ids

    selection = state.selection
    for row in view.page_rows:
        if (row.id in checked) != (row.id in selected):
            selection = toggle(selection, row.id, view.filtered_rows)
    if selection == state.selection:
        return no_update
    return update_table_state(store_data, 'selection_changed', keys=selection_to_value(selection))


def on_select_all(n_clicks, store_data):
    if not n_clicks:
        return no_update
    return update_table_state(store_data, 'select_all')


def on_clear_selection(n_clicks, store_data):
    if not n_clicks:
        return no_update
    return update_table_state(store_data, 'clear_selection')


def export_selected(n_clicks, store_data):
    """Download the effective selection as CSV."""
    if not n_clicks:
        return no_update
    _, view = _current_view(store_data)
    if not view.selected_rows:
        logging.info("Export requested with an empty selection")
        return no_update
    filename = f"contacts_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return dcc.send_string(export_contacts_csv(view.selected_rows), filename)


# --- Saved views ---

def save_view(n_clicks, store_data):
    """Download the current query parameters as TOML."""
    if not n_clicks:
        return no_update
    state = get_table_state(store_data)
    filename = f"contacts_view_{datetime.now().strftime('%Y%m%d_%H%M%S')}.toml"
    return dcc.send_string(export_table_state_to_toml(state, app_version=__version__), filename)


def load_view(contents, filename, store_data):
    """
    Apply an uploaded TOML view to the table.

    Returns the new store data, a status alert and the values to push
    into the search, filter, sort, column and page-size controls.
    """
    no_controls = (no_update,) * 8
    if not contents:
        return (no_update, no_update) + no_controls

    try:
        _, content_string = contents.split(',', 1)
        text = base64.b64decode(content_string).decode('utf-8')
        state, errors = import_table_state_from_toml(text, base=get_table_state(store_data))
    except (ValueError, binascii.Error, UnicodeDecodeError) as e:
        logging.error(f"Could not read view file {filename}: {e}")
        return (no_update, dbc.Alert(f"Could not read {filename}", color="danger")) + no_controls
    except ValidationError as e:
        return (no_update, dbc.Alert(f"Could not load {filename}: {e.message}", color="danger")) + no_controls

    if errors:
        status = dbc.Alert([
            html.Strong(f"Loaded {filename} with warnings:"),
            html.Ul([html.Li(error) for error in errors]),
        ], color="warning", dismissable=True)
    else:
        status = dbc.Alert(f"Loaded view {filename}", color="success", dismissable=True, duration=4000)

    new_data = state.to_dict()
    return (new_data, status) + _control_values(state)


# --- Details drawer ---

def on_cell_clicked(cell, store_data):
    if not cell or cell.get('rowId') is None:
        return no_update
    return update_table_state(store_data, 'contact_opened', contact_id=cell['rowId'])


def on_details_toggled(is_open, store_data):
    if is_open or get_table_state(store_data).selected_contact_id is None:
        return no_update
    return update_table_state(store_data, 'contact_closed')


def locate_contact(n_clicks, store_data):
    """Geocode the open contact and draw a single pin."""
    if not n_clicks:
        return no_update, no_update
    state = get_table_state(store_data)
    contact = get_repository().get(state.selected_contact_id) if state.selected_contact_id else None
    if contact is None:
        return no_update, no_update

    match = smart_geocode(
        contact.address or '',
        contact.city or '',
        contact.country or '',
        config=get_config().geocoding,
    )
    if match is None:
        coordinates, label, color = DEFAULT_COORDINATES, "Location unknown (approximate)", "warning"
    elif match.is_approximate:
        coordinates, label, color = match.coordinates, "Approximate location (city)", "warning"
    else:
        coordinates, label, color = match.coordinates, "Precise location", "success"

    figure = go.Figure(go.Scattergeo(
        lat=[coordinates.lat],
        lon=[coordinates.lng],
        text=[contact.full_name],
        mode='markers',
        marker={'size': 12, 'color': 'crimson' if color == 'success' else 'orange'},
    ))
    figure.update_layout(margin={'l': 0, 'r': 0, 't': 0, 'b': 0}, template='plotly_dark')
    return dbc.Badge(label, color=color), figure


# --- Rendering ---

def render_table(store_data):
    """Render everything derived from the current state."""
    state, view = _current_view(store_data)
    repository = get_repository()

    contact = repository.get(state.selected_contact_id) if state.selected_contact_id else None
    selected = set(view.selected_ids)
    page_info = f"Page {view.page} of {view.total_pages} ({view.total_items} contacts)"

    records = ui.row_data(view.page_rows)

    return (
        records,
        [record for record in records if record['id'] in selected],
        ui.column_defs(view.header_columns),
        view.total_pages,
        view.page,
        page_info,
        ui.industry_options(view.industries),
        ui.country_options(view.countries),
        view.selection_summary(),
        ui.load_status_alert(state.load.status, state.load.error),
        contact is not None,
        ui.contact_details(contact),
    )


def _control_values(state):
    visible = visible_to_value(state.visible_columns)
    if visible == 'all':
        visible = list(COLUMN_KEYS)
    return (
        state.filters.search,
        state.filters.industry,
        state.filters.country,
        state.filters.date,
        state.sort.column,
        state.sort.direction,
        visible,
        state.pagination.page_size,
    )


def sync_controls(_, store_data):
    """Push stored state into the controls when the page mounts."""
    return _control_values(get_table_state(store_data))


CONTROL_IDS = (
    'contacts-search',
    'contacts-industry-filter',
    'contacts-country-filter',
    'contacts-date-filter',
    'contacts-sort-column',
    'contacts-sort-direction',
    'contacts-visible-columns',
    'contacts-page-size',
)


def _control_outputs(allow_duplicate=False):
    return [Output(control_id, 'value', allow_duplicate=allow_duplicate) for control_id in CONTROL_IDS]


def register_callbacks(app):
    """Attach the table callbacks to an app once; returns False if already attached."""
    if id(app) in _registered_apps:
        logging.debug("Contacts table callbacks already registered for this app")
        return False
    _registered_apps.add(id(app))

    store = State(STORE_ID, 'data')
    out = Output(STORE_ID, 'data', allow_duplicate=True)

    app.callback(
        Output(STORE_ID, 'data'),
        Input('contacts-load-status', 'id'),
        store,
    )(load_contacts_data)
    app.callback(
        [out, Output('contacts-import-status', 'children')],
        Input('contacts-import', 'contents'),
        [State('contacts-import', 'filename'), store],
        prevent_initial_call=True
    )(import_contacts)

    app.callback(out, Input('contacts-search', 'value'), store, prevent_initial_call=True)(on_search_change)
    app.callback(out, Input('contacts-industry-filter', 'value'), store, prevent_initial_call=True)(on_industry_change)
    app.callback(out, Input('contacts-country-filter', 'value'), store, prevent_initial_call=True)(on_country_change)
    app.callback(out, Input('contacts-date-filter', 'value'), store, prevent_initial_call=True)(on_date_change)
    app.callback(
        [out] + _control_outputs(allow_duplicate=True)[:4],
        Input('contacts-clear-filters', 'n_clicks'),
        store,
        prevent_initial_call=True
    )(on_clear_filters)

    app.callback(
        out,
        [Input('contacts-sort-column', 'value'), Input('contacts-sort-direction', 'value')],
        store,
        prevent_initial_call=True
    )(on_sort_change)
    app.callback(out, Input('contacts-visible-columns', 'value'), store, prevent_initial_call=True)(on_columns_change)
    app.callback(out, Input('contacts-pagination', 'active_page'), store, prevent_initial_call=True)(on_page_change)
    app.callback(out, Input('contacts-page-size', 'value'), store, prevent_initial_call=True)(on_page_size_change)

    app.callback(out, Input('contacts-grid', 'selectedRows'), store, prevent_initial_call=True)(on_grid_selection)
    app.callback(out, Input('contacts-select-all', 'n_clicks'), store, prevent_initial_call=True)(on_select_all)
    app.callback(out, Input('contacts-clear-selection', 'n_clicks'), store, prevent_initial_call=True)(on_clear_selection)
    app.callback(
        Output('contacts-download', 'data'),
        Input('contacts-export', 'n_clicks'),
        store,
        prevent_initial_call=True
    )(export_selected)

    app.callback(out, Input('contacts-grid', 'cellClicked'), store, prevent_initial_call=True)(on_cell_clicked)
    app.callback(out, Input('contacts-details', 'is_open'), store, prevent_initial_call=True)(on_details_toggled)
    app.callback(
        [Output('contacts-location-badge', 'children'), Output('contacts-location-map', 'figure')],
        Input('contacts-locate-button', 'n_clicks'),
        store,
        prevent_initial_call=True
    )(locate_contact)

    app.callback(
        [Output('contacts-grid', 'rowData'),
         Output('contacts-grid', 'selectedRows'),
         Output('contacts-grid', 'columnDefs'),
         Output('contacts-pagination', 'max_value'),
         Output('contacts-pagination', 'active_page'),
         Output('contacts-page-info', 'children'),
         Output('contacts-industry-filter', 'options'),
         Output('contacts-country-filter', 'options'),
         Output('contacts-selection-summary', 'children'),
         Output('contacts-load-status', 'children'),
         Output('contacts-details', 'is_open'),
         Output('contacts-details', 'children')],
        Input(STORE_ID, 'data')
    )(render_table)

    app.callback(
        Output('contacts-view-download', 'data'),
        Input('contacts-save-view', 'n_clicks'),
        store,
        prevent_initial_call=True
    )(save_view)
    app.callback(
        [out, Output('contacts-view-status', 'children')] + _control_outputs(allow_duplicate=True),
        Input('contacts-load-view', 'contents'),
        [State('contacts-load-view', 'filename'), store],
        prevent_initial_call=True
    )(load_view)

    app.callback(
        _control_outputs(),
        Input('contacts-load-status', 'id'),
        store
    )(sync_controls)

    logging.info("Registered contacts table callbacks")
    return True
