"""
Helper utilities for the contacts table state store.

Callbacks receive the raw ``dcc.Store`` dict; these helpers turn it into
a TableState, run a reducer action and hand back the dict to store, so
no callback has to know the serialized layout.
"""

from typing import Any, Dict, Optional

from ..reducer import reduce
from .models import TableState, initial_state


def get_table_state(store_data: Optional[Dict[str, Any]]) -> TableState:
    """
    Get TableState instance from store data.

    Args:
        store_data: Raw data from the table state store

    Returns:
        TableState instance (defaults when the store is empty)
    """
    if not store_data:
        return TableState()
    return TableState.from_dict(store_data)


def update_table_state(store_data: Optional[Dict[str, Any]], action_name: str, **payload: Any) -> Dict[str, Any]:
    """
    Apply one reducer action to stored state.

    Args:
        store_data: Current store data
        action_name: Reducer action name
        **payload: Action payload

    Returns:
        Updated state dictionary for the store
    """
    state = get_table_state(store_data)
    return reduce(state, action_name, **payload).to_dict()


def initial_store_data(config=None) -> Dict[str, Any]:
    """Store contents at page mount, using the [table] config section when given."""
    if config is None:
        return initial_state().to_dict()
    return initial_state(
        page_size=config.table.page_size,
        sort_column=config.table.default_sort_column,
        sort_direction=config.table.default_sort_direction,
    ).to_dict()
