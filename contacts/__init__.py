"""
Contact data module for the Contacts Dashboard.

This package provides the immutable Contact row model, the declared table
columns, and loading/export of the contact working set.
"""

from .models import COLUMN_KEYS, COLUMNS, INITIAL_VISIBLE_COLUMNS, LIST_ATTRIBUTES, Contact
from .loader import (
    ContactRepository,
    contacts_to_frame,
    export_contacts_csv,
    get_repository,
    load_contacts,
    parse_contacts,
    records_to_contacts,
    reset_repository,
    suggest_field,
)

__all__ = [
    'Contact',
    'COLUMNS',
    'COLUMN_KEYS',
    'INITIAL_VISIBLE_COLUMNS',
    'LIST_ATTRIBUTES',
    'ContactRepository',
    'get_repository',
    'reset_repository',
    'load_contacts',
    'parse_contacts',
    'suggest_field',
    'records_to_contacts',
    'contacts_to_frame',
    'export_contacts_csv',
]
