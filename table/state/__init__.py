"""
State management package for the contacts table.

This package provides the single, typed TableState value and helpers for
moving it through the Dash store.
"""

from .models import (
    LOAD_FAILED,
    LOAD_LOADED,
    LOAD_PENDING,
    FilterState,
    LoadState,
    TableState,
    initial_state,
)

__all__ = [
    'TableState',
    'FilterState',
    'LoadState',
    'initial_state',
    'LOAD_PENDING',
    'LOAD_LOADED',
    'LOAD_FAILED',
]
