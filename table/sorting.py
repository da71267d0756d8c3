"""
Sort stage for the contacts table.

Sorting compares a single column with a three-way comparison. It is
stable, so rows that compare equal keep their input order in both
directions; there is no secondary key.

List-valued columns (email, phone_number) compare by their FIRST element
only (empty string when the list is empty). Full lists are never compared.
"""

import functools
from dataclasses import dataclass
from typing import Any, List, Sequence

from contacts.models import LIST_ATTRIBUTES, Contact

ASCENDING = 'ascending'
DESCENDING = 'descending'
DIRECTIONS = (ASCENDING, DESCENDING)


@dataclass(frozen=True)
class SortDescriptor:
    column: str = 'full_name'
    direction: str = ASCENDING

    def to_dict(self) -> dict:
        return {'column': self.column, 'direction': self.direction}

    @classmethod
    def from_dict(cls, data: dict) -> 'SortDescriptor':
        if not data:
            return cls()
        direction = data.get('direction', ASCENDING)
        return cls(
            column=data.get('column') or cls.column,
            direction=direction if direction in DIRECTIONS else ASCENDING,
        )


def sort_key(row: Contact, column: str) -> Any:
    """Value compared for a row; missing values compare as ''."""
    if column in LIST_ATTRIBUTES:
        values = row.get(column) or ()
        return values[0] if values else ''
    value = row.get(column)
    return '' if value is None else value


def compare_values(first: Any, second: Any) -> int:
    """Three-way comparison; mismatched types fall back to string comparison."""
    try:
        if first < second:
            return -1
        if first > second:
            return 1
        return 0
    except TypeError:
        return compare_values(str(first), str(second))


def sort_rows(rows: Sequence[Contact], descriptor: SortDescriptor) -> List[Contact]:
    """Return a new list sorted by the descriptor's column and direction."""
    sign = -1 if descriptor.direction == DESCENDING else 1

    def _compare(a: Contact, b: Contact) -> int:
        return sign * compare_values(sort_key(a, descriptor.column), sort_key(b, descriptor.column))

    # list.sort is stable, so negating the comparator keeps ties in input order
    return sorted(rows, key=functools.cmp_to_key(_compare))
