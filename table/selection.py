"""
Row selection for the contacts table.

A selection is either ``AllRows`` or an ``ExplicitSet`` of row ids. The
stored selection is never rewritten when filters change; it is resolved
against the currently filtered rows every time it is read, so "all"
always means "all rows passing the filter right now".
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, List, Sequence, Union

from contacts.models import Contact

ALL = 'all'


@dataclass(frozen=True)
class AllRows:
    """Every row that currently passes the filters."""


@dataclass(frozen=True)
class ExplicitSet:
    """A fixed set of row ids."""
    ids: FrozenSet[str] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.ids)


Selection = Union[AllRows, ExplicitSet]

ALL_ROWS = AllRows()
EMPTY_SELECTION = ExplicitSet()


def select(keys: Union[str, Iterable[Any]]) -> Selection:
    """Selection from UI keys: the string 'all' or an iterable of ids."""
    if isinstance(keys, str):
        if keys == ALL:
            return ALL_ROWS
        return ExplicitSet(frozenset([keys]))
    return ExplicitSet(frozenset(str(key) for key in keys))


def select_all() -> Selection:
    return ALL_ROWS


def clear() -> Selection:
    return EMPTY_SELECTION


def toggle(selection: Selection, key: Any, filtered_rows: Sequence[Contact]) -> Selection:
    """
    Add or remove a single row id.

    Toggling while everything is selected materializes the current
    filtered ids first, then removes the toggled one.
    """
    key = str(key)
    if isinstance(selection, AllRows):
        ids = {row.id for row in filtered_rows}
    else:
        ids = set(selection.ids)

    if key in ids:
        ids.discard(key)
    else:
        ids.add(key)
    return ExplicitSet(frozenset(ids))


def effective_selection(selection: Selection, filtered_rows: Sequence[Contact]) -> List[str]:
    """Selected ids restricted to the filtered rows, in filtered order."""
    if isinstance(selection, AllRows):
        return [row.id for row in filtered_rows]
    return [row.id for row in filtered_rows if row.id in selection.ids]


def get_selected_rows(selection: Selection, filtered_rows: Sequence[Contact]) -> List[Contact]:
    """Row objects for the effective selection, in filtered order."""
    if isinstance(selection, AllRows):
        return list(filtered_rows)
    return [row for row in filtered_rows if row.id in selection.ids]


def selection_to_value(selection: Selection) -> Union[str, List[str]]:
    """JSON-friendly form: 'all' or a sorted id list."""
    if isinstance(selection, AllRows):
        return ALL
    return sorted(selection.ids)


def selection_from_value(value: Any) -> Selection:
    if value is None:
        return EMPTY_SELECTION
    return select(value)
