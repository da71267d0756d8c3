"""
Contact Map Page - contacts per country on a world map
"""

import logging

import dash
import dash_ag_grid as dag
import dash_bootstrap_components as dbc
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from dash import Input, Output, callback, dcc, html

from config_manager import get_config
from contacts.loader import get_repository, load_contacts
from core.exceptions import FileProcessingError
from geo.countries import analytics_metrics, continent_stats, country_stats, filter_country_stats

dash.register_page(__name__, path='/maps', title='Contact Map')

layout = dbc.Container([
    dbc.Row([
        dbc.Col([
            html.H2("Contacts by Country"),
            dbc.Button("Refresh", id='maps-refresh', size="sm", color="outline-info", className="mb-3"),
            html.Div(id='maps-status'),
        ], width=12)
    ]),
    dbc.Row(id='maps-metrics', className="mb-3"),
    dbc.Row([
        dbc.Col(dbc.Card(dbc.CardBody([
            dcc.Graph(id='maps-world', style={'height': '520px'}),
        ])), md=8),
        dbc.Col(dbc.Card(dbc.CardBody([
            html.H5("Countries", className="card-title"),
            dbc.Input(
                id='maps-country-search',
                type='search',
                placeholder="Search countries...",
                debounce=True,
                size="sm",
                className="mb-2",
            ),
            dag.AgGrid(
                id='maps-country-grid',
                rowData=[],
                columnDefs=[
                    {'field': 'flag', 'headerName': '', 'width': 60},
                    {'field': 'country', 'headerName': 'Country'},
                    {'field': 'contact_count', 'headerName': 'Contacts', 'width': 110},
                ],
                className="ag-theme-alpine-dark",
                style={'height': '430px'},
                dashGridOptions={'domLayout': 'normal'},
            ),
        ])), md=4),
    ]),
    dbc.Row([
        dbc.Col(dbc.Card(dbc.CardBody([
            html.H5("Contacts by Continent", className="card-title"),
            dcc.Graph(id='maps-continents', style={'height': '300px'}),
        ])), width=12),
    ], className="mt-3"),
], fluid=True)


def _metric_card(title, value):
    return dbc.Col(dbc.Card(dbc.CardBody([
        html.H6(title, className="card-subtitle text-muted"),
        html.H3(f"{value:,}", className="card-title mb-0"),
    ])), md=4)


def build_world_figure(stats: pd.DataFrame):
    """Bubble map of contact counts; countries without coordinates are left off."""
    located = stats.dropna(subset=['lat', 'lng'])
    if located.empty:
        figure = go.Figure(go.Scattergeo(lat=[], lon=[], mode='markers'))
    else:
        figure = px.scatter_geo(
            located,
            lat='lat',
            lon='lng',
            size='contact_count',
            hover_name='country',
            hover_data={'contact_count': True, 'lat': False, 'lng': False},
            projection='natural earth',
        )
    figure.update_layout(template='plotly_dark', margin={'l': 0, 'r': 0, 't': 0, 'b': 0})
    return figure


def build_continent_figure(stats: pd.DataFrame):
    totals = continent_stats(stats)
    figure = px.bar(totals, x='continent', y='contact_count', labels={'contact_count': 'Contacts', 'continent': ''})
    figure.update_layout(template='plotly_dark', margin={'l': 0, 'r': 0, 't': 10, 'b': 0})
    return figure


def _ensure_contacts_loaded():
    repository = get_repository()
    if len(repository) == 0:
        repository.replace(load_contacts(get_config().data.get_contacts_path()))
    return repository


@callback(
    [Output('maps-world', 'figure'),
     Output('maps-country-grid', 'rowData'),
     Output('maps-metrics', 'children'),
     Output('maps-continents', 'figure'),
     Output('maps-status', 'children')],
    [Input('maps-refresh', 'n_clicks'),
     Input('maps-country-search', 'value')]
)
def update_country_map(n_clicks, search):
    try:
        contacts = _ensure_contacts_loaded().all()
    except FileProcessingError as e:
        logging.error(f"Map page could not load contacts: {e}")
        empty = country_stats([])
        alert = dbc.Alert(f"Could not load contacts: {e}", color="danger")
        return build_world_figure(empty), [], [], build_continent_figure(empty), alert

    stats = country_stats(contacts)
    metrics = analytics_metrics(contacts)
    cards = [
        _metric_card("Contacts", metrics['total_contacts']),
        _metric_card("Countries", metrics['total_countries']),
        _metric_card("With a country", metrics['contacts_with_country']),
    ]
    matching = filter_country_stats(stats, search)
    records = matching[['flag', 'country', 'contact_count']].to_dict('records')
    return build_world_figure(matching), records, cards, build_continent_figure(stats), None
