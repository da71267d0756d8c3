"""
Facet computation for the table filter dropdowns.

Facets are always computed over the FULL row collection, never the
filtered one, so a filter option does not disappear just because a
different filter currently excludes all of its rows.
"""

from typing import List, Sequence

from contacts.models import Contact


def distinct_values(rows: Sequence[Contact], attribute: str) -> List[str]:
    """Distinct non-empty values of an attribute, case kept as stored, sorted."""
    values = set()
    for row in rows:
        value = row.get(attribute)
        if isinstance(value, (tuple, list)):
            values.update(v for v in value if v)
        elif value:
            values.add(value)
    return sorted(values)


def unique_industries(rows: Sequence[Contact]) -> List[str]:
    return distinct_values(rows, 'industry')


def unique_countries(rows: Sequence[Contact]) -> List[str]:
    return distinct_values(rows, 'country')


def facet_options(values: Sequence[str], all_label: str = 'All') -> List[dict]:
    """Dropdown options with the leading 'all' entry."""
    return [{'label': all_label, 'value': 'all'}] + [{'label': v, 'value': v} for v in values]
