import argparse
import logging
import threading
import time
import webbrowser

import dash
import dash_bootstrap_components as dbc
from dash import dcc, html

from config_manager import configure_logging_from_config
from core.session import SessionProvider, StaticSessionProvider, User

configure_logging_from_config()

# Demo session; swap in a real provider to put the dashboard behind a login
session_provider = StaticSessionProvider(User(id='demo', name='Demo User', email='demo@example.com'))


def create_navbar(provider: SessionProvider):
    """Top navigation bar with the signed-in user on the right."""
    user = provider.current_user()
    if user is not None:
        user_item = dbc.NavItem(
            dbc.Badge(user.initials, color="info", pill=True, className="p-2", title=f"{user.name} <{user.email}>"),
            className="d-flex align-items-center ms-3",
        )
    else:
        user_item = dbc.NavItem(html.Span("Not signed in", className="text-muted ms-3"))

    return dbc.Navbar(
        id='main-navbar',
        children=[
            dbc.Container([
                dbc.Row([
                    dbc.Col(
                        dbc.NavbarBrand("Contacts Dashboard", href="/", className="ms-2"),
                        width="auto",
                        className="d-flex align-items-center"
                    ),
                    dbc.Col(
                        dbc.Nav([
                            dbc.NavItem(dbc.NavLink("Contacts", href="/")),
                            dbc.NavItem(dbc.NavLink("Map", href="/maps")),
                            user_item,
                        ], className="ms-auto", navbar=True),
                        className="d-flex justify-content-end"
                    )
                ], className="w-100 align-items-center")
            ], fluid=True)
        ],
        color="dark",
        dark=True,
        className="mb-2",
    )


app = dash.Dash(__name__, use_pages=True, external_stylesheets=[dbc.themes.SLATE], suppress_callback_exceptions=True)

app.layout = dbc.Container([
    dcc.Location(id='global-location', refresh=False),
    create_navbar(session_provider),
    dash.page_container,
], fluid=True)


def open_browser(url, delay=1.5):
    """Open browser after a delay"""
    def _open():
        time.sleep(delay)
        try:
            webbrowser.open(url)
        except webbrowser.Error as e:
            logging.warning(f"Could not open browser automatically: {e}")

    threading.Thread(target=_open, daemon=True).start()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Contacts Dashboard - contact table and map browser')
    parser.add_argument('--no-browser', action='store_true',
                        help='Do not automatically open browser')
    parser.add_argument('--port', type=int, default=8050,
                        help='Port to serve on (default: 8050)')
    args = parser.parse_args()

    url = f"http://127.0.0.1:{args.port}"

    if not args.no_browser:
        open_browser(url)

    app.run(debug=True, port=args.port, use_reloader=False)
