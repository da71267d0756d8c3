import logging

import dash
import dash_bootstrap_components as dbc
from dash import dcc, html

from config_manager import get_config
from table.callbacks import STORE_ID, register_callbacks
from table.state.helpers import initial_store_data
from table.ui import create_details_drawer, create_filters_card, create_table_card

dash.register_page(__name__, path='/', title='Contacts')

# Register table callbacks with the running app instance
try:
    register_callbacks(dash.get_app())
except Exception as e:
    logging.warning(f"Contacts table callback registration failed: {e}")


def layout(**kwargs):
    # Fresh config on every page load to pick up edits to config.toml
    config = get_config()
    return dbc.Container([
        dcc.Store(id=STORE_ID, storage_type='memory', data=initial_store_data(config)),
        dbc.Row([
            dbc.Col(html.H2("Contacts"), width=12),
        ], className="mb-2"),
        dbc.Row([
            dbc.Col(create_filters_card(config.table.page_size_options, config.table.page_size), width=12),
        ]),
        dbc.Row([
            dbc.Col(create_table_card(), width=12),
        ]),
        create_details_drawer(),
    ], fluid=True)
