"""
UI components for the contacts table page.

Builders for the page's cards and controls, plus the small pure
helpers that turn a DerivedView into what the grid and dropdowns
expect (row data, column definitions, options).
"""

from typing import Any, Dict, List, Optional, Sequence

import dash_ag_grid as dag
import dash_bootstrap_components as dbc
from dash import dcc, html

from contacts.models import COLUMNS, Contact
from .facets import facet_options

DATE_FILTER_OPTIONS = [
    {'label': 'All dates', 'value': 'all'},
    {'label': 'Last 7 days', 'value': 'last7Days'},
    {'label': 'Last 30 days', 'value': 'last30Days'},
    {'label': 'Last 60 days', 'value': 'last60Days'},
]

SORT_DIRECTION_OPTIONS = [
    {'label': 'Ascending', 'value': 'ascending'},
    {'label': 'Descending', 'value': 'descending'},
]

# Columns the grid can render from row data ('actions' is UI-only)
DATA_COLUMNS = [c for c in COLUMNS if c['uid'] != 'actions']

AG_SORT = {'ascending': 'asc', 'descending': 'desc'}


# --- Render helpers ---

def row_data(rows: Sequence[Contact]) -> List[Dict[str, Any]]:
    """Grid records; list cells show the primary value first, comma-joined."""
    records = []
    for row in rows:
        record = row.to_dict()
        record['email'] = ', '.join(row.email)
        record['phone_number'] = ', '.join(row.phone_number)
        records.append(record)
    return records


def column_defs(headers: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """ag-grid column definitions for the visible header columns."""
    defs = []
    for header in headers:
        if header['uid'] == 'actions':
            continue
        col_def = {
            'field': header['uid'],
            'headerName': header['name'],
            # Rows arrive pre-sorted; the grid only shows the indicator
            'sortable': False,
        }
        if header.get('width'):
            col_def['width'] = header['width']
        if header.get('sort_direction'):
            col_def['sort'] = AG_SORT[header['sort_direction']]
        defs.append(col_def)

    if defs:
        defs[0]['checkboxSelection'] = True
        defs[0]['headerCheckboxSelection'] = True
    return defs


def sort_column_options() -> List[Dict[str, str]]:
    return [{'label': c['name'], 'value': c['uid']} for c in DATA_COLUMNS]


def visible_column_options() -> List[Dict[str, str]]:
    return [{'label': c['name'], 'value': c['uid']} for c in COLUMNS]


def industry_options(industries: Sequence[str]) -> List[Dict[str, str]]:
    return facet_options(industries, all_label='All industries')


def country_options(countries: Sequence[str]) -> List[Dict[str, str]]:
    return facet_options(countries, all_label='All countries')


def load_status_alert(status: str, error: Optional[str]) -> Optional[Any]:
    if status == 'pending':
        return dbc.Alert([dbc.Spinner(size="sm"), " Loading contacts..."], color="secondary")
    if status == 'failed':
        return dbc.Alert(f"Could not load contacts: {error}", color="danger")
    return None


def contact_details(contact: Optional[Contact]) -> List[Any]:
    """Body of the details drawer."""
    if contact is None:
        return [html.P("No contact selected.", className="text-muted")]

    def _line(label: str, value: Any) -> Any:
        return html.P([html.Strong(f"{label}: "), value or html.Span("n/a", className="text-muted")])

    location = ', '.join(part for part in (contact.city, contact.country) if part)
    return [
        html.H4(contact.full_name or contact.id),
        html.P(
            ' at '.join(part for part in (contact.job_title, contact.company_name) if part),
            className="text-muted"
        ),
        _line("Email", ', '.join(contact.email)),
        _line("Phone", ', '.join(contact.phone_number)),
        _line("Industry", contact.industry),
        _line("Address", contact.address),
        _line("Location", location),
        _line("Collected", contact.date_collected),
        dbc.Button("View on map", id='contacts-locate-button', color="info", size="sm", className="mt-2"),
        html.Div(id='contacts-location-badge', className="mt-2"),
        dcc.Graph(id='contacts-location-map', style={'height': '300px'}, config={'displayModeBar': False}),
    ]


# --- Component builders ---

def create_filters_card(page_size_options: Sequence[int], page_size: int) -> Any:
    """Search box, facet dropdowns and view controls."""
    return dbc.Card(dbc.CardBody([
        dbc.Row([
            dbc.Col(dbc.Input(
                id='contacts-search',
                type='search',
                placeholder="Search by name, company, title or email...",
                debounce=True,
                value='',
            ), md=4),
            dbc.Col(dcc.Dropdown(id='contacts-industry-filter', value='all', clearable=False), md=2),
            dbc.Col(dcc.Dropdown(id='contacts-country-filter', value='all', clearable=False), md=2),
            dbc.Col(dcc.Dropdown(
                id='contacts-date-filter', options=DATE_FILTER_OPTIONS, value='all', clearable=False
            ), md=2),
            dbc.Col(dbc.Button(
                "Clear filters", id='contacts-clear-filters', color="outline-secondary", size="sm"
            ), md=2, className="d-flex align-items-center"),
        ], className="mb-2"),
        dbc.Row([
            dbc.Col([
                dbc.Label("Sort by"),
                dcc.Dropdown(id='contacts-sort-column', options=sort_column_options(), clearable=False),
            ], md=3),
            dbc.Col([
                dbc.Label("Direction"),
                dbc.RadioItems(id='contacts-sort-direction', options=SORT_DIRECTION_OPTIONS, inline=True),
            ], md=3),
            dbc.Col([
                dbc.Label("Columns"),
                dcc.Dropdown(id='contacts-visible-columns', options=visible_column_options(), multi=True),
            ], md=4),
            dbc.Col([
                dbc.Label("Rows per page"),
                dcc.Dropdown(
                    id='contacts-page-size',
                    options=[{'label': str(s), 'value': s} for s in page_size_options],
                    value=page_size,
                    clearable=False,
                ),
            ], md=2),
        ]),
        dbc.Row([
            dbc.Col([
                dbc.Button("Save view", id='contacts-save-view', size="sm", color="outline-info", className="me-2"),
                dcc.Download(id='contacts-view-download'),
                dcc.Upload(
                    dbc.Button("Load view", size="sm", color="outline-info"),
                    id='contacts-load-view',
                    accept='.toml',
                    className="d-inline-block",
                ),
            ], md=6, className="d-flex align-items-center"),
            dbc.Col(html.Div(id='contacts-view-status'), md=6),
        ], className="mt-2"),
    ]), className="mb-3")


def create_table_card() -> Any:
    """Grid, selection actions and pagination."""
    return dbc.Card(dbc.CardBody([
        html.Div(id='contacts-load-status'),
        html.Div(id='contacts-import-status'),
        dbc.Row([
            dbc.Col(html.Div(id='contacts-selection-summary', className="text-muted"), md=6),
            dbc.Col([
                dbc.Button("Select all", id='contacts-select-all', size="sm", color="outline-primary", className="me-2"),
                dbc.Button("Clear selection", id='contacts-clear-selection', size="sm", color="outline-secondary", className="me-2"),
                dbc.Button("Export selected", id='contacts-export', size="sm", color="primary", className="me-2"),
                dcc.Download(id='contacts-download'),
                dcc.Upload(
                    dbc.Button("Import contacts", size="sm", color="outline-success"),
                    id='contacts-import',
                    accept='.csv,.json',
                    className="d-inline-block",
                ),
            ], md=6, className="d-flex justify-content-end"),
        ], className="mb-2"),
        dag.AgGrid(
            id='contacts-grid',
            rowData=[],
            columnDefs=[],
            getRowId="params.data.id",
            className="ag-theme-alpine-dark",
            style={'height': '500px'},
            dashGridOptions={
                'rowSelection': 'multiple',
                'suppressRowClickSelection': True,
                'domLayout': 'normal',
            },
        ),
        html.Div([
            dbc.Pagination(id='contacts-pagination', max_value=1, active_page=1, fully_expanded=False),
            html.Span(id='contacts-page-info', className="ms-3 text-muted"),
        ], className="d-flex align-items-center mt-2"),
    ]))


def create_details_drawer() -> Any:
    return dbc.Offcanvas(
        id='contacts-details',
        title="Contact details",
        placement="end",
        is_open=False,
        children=contact_details(None),
    )
