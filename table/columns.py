"""
Column visibility for the contacts table.

Visible columns are either ``AllColumns`` or an ``ExplicitColumns`` set of
column keys. ``header_columns`` resolves that against the declared
columns and marks the currently sorted column with its direction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Sequence, Union

from .sorting import SortDescriptor

ALL = 'all'


@dataclass(frozen=True)
class AllColumns:
    """Every declared column."""


@dataclass(frozen=True)
class ExplicitColumns:
    keys: FrozenSet[str] = field(default_factory=frozenset)


VisibleColumns = Union[AllColumns, ExplicitColumns]

ALL_COLUMNS = AllColumns()


def visible_from_value(value: Any) -> VisibleColumns:
    if value is None or value == ALL:
        return ALL_COLUMNS
    if isinstance(value, str):
        return ExplicitColumns(frozenset([value]))
    return ExplicitColumns(frozenset(str(v) for v in value))


def visible_to_value(visible: VisibleColumns) -> Union[str, List[str]]:
    if isinstance(visible, AllColumns):
        return ALL
    return sorted(visible.keys)


def is_visible(visible: VisibleColumns, key: str) -> bool:
    return isinstance(visible, AllColumns) or key in visible.keys


def header_columns(
    columns: Sequence[Dict[str, Any]],
    visible: VisibleColumns,
    sort: SortDescriptor,
) -> List[Dict[str, Any]]:
    """
    Visible column descriptors in declared order.

    The column matching the sort descriptor gets a ``sort_direction``
    entry; descriptors are copied, never mutated.
    """
    headers = []
    for column in columns:
        if not is_visible(visible, column['uid']):
            continue
        header = dict(column)
        if column['uid'] == sort.column:
            header['sort_direction'] = sort.direction
        headers.append(header)
    return headers


def toggle_column(visible: VisibleColumns, key: str, columns: Sequence[Dict[str, Any]]) -> VisibleColumns:
    """Show or hide one column; hiding from 'all' materializes the declared keys."""
    if isinstance(visible, AllColumns):
        keys = {column['uid'] for column in columns}
    else:
        keys = set(visible.keys)

    if key in keys:
        keys.discard(key)
    else:
        keys.add(key)
    return ExplicitColumns(frozenset(keys))
