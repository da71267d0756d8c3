"""
State models for the contacts table.

All user-controlled query parameters live in one explicit TableState
value. It is immutable: the reducer returns a new state for every
action, and ``to_dict``/``from_dict`` move it in and out of a JSON
store (dcc.Store) between callbacks.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from typing_extensions import TypedDict

from ..columns import ALL_COLUMNS, VisibleColumns, visible_from_value, visible_to_value
from ..pagination import Pagination
from ..selection import EMPTY_SELECTION, Selection, selection_from_value, selection_to_value
from ..sorting import SortDescriptor

ALL = 'all'

LOAD_PENDING = 'pending'
LOAD_LOADED = 'loaded'
LOAD_FAILED = 'failed'
LOAD_STATUSES = (LOAD_PENDING, LOAD_LOADED, LOAD_FAILED)


# Serialized shapes, as stored in dcc.Store
class FiltersDict(TypedDict):
    search: str
    industry: str
    country: str
    date: str


class SortDict(TypedDict):
    column: str
    direction: str


class LoadDict(TypedDict):
    status: str
    error: Optional[str]
    token: int


class TableStateDict(TypedDict):
    filters: FiltersDict
    sort: SortDict
    selection: Union[str, List[str]]
    visible_columns: Union[str, List[str]]
    pagination: Dict[str, Any]
    load: LoadDict
    selected_contact_id: Optional[str]
    last_updated: Optional[str]


@dataclass(frozen=True)
class FilterState:
    """Search text plus categorical and date-bucket filters."""
    search: str = ''
    industry: str = ALL
    country: str = ALL
    date: str = ALL

    @property
    def is_active(self) -> bool:
        return self.search != '' or self.industry != ALL or self.country != ALL or self.date != ALL

    def to_dict(self) -> FiltersDict:
        return FiltersDict(search=self.search, industry=self.industry, country=self.country, date=self.date)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FilterState':
        if not data:
            return cls()
        return cls(
            search=data.get('search') or '',
            industry=data.get('industry') or ALL,
            country=data.get('country') or ALL,
            date=data.get('date') or ALL,
        )


@dataclass(frozen=True)
class LoadState:
    """Status of the single in-flight row load."""
    status: str = LOAD_PENDING
    error: Optional[str] = None
    # Incremented per load; results carrying an older token are stale
    token: int = 0

    def to_dict(self) -> LoadDict:
        return LoadDict(status=self.status, error=self.error, token=self.token)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'LoadState':
        if not data:
            return cls()
        status = data.get('status', LOAD_PENDING)
        return cls(
            status=status if status in LOAD_STATUSES else LOAD_PENDING,
            error=data.get('error'),
            token=int(data.get('token', 0)),
        )


@dataclass(frozen=True)
class TableState:
    """
    Consolidated query parameters for the contacts table.

    Created with defaults when the page mounts, replaced on every user
    action, and discarded with the page.
    """

    filters: FilterState = field(default_factory=FilterState)
    sort: SortDescriptor = field(default_factory=SortDescriptor)
    selection: Selection = EMPTY_SELECTION
    visible_columns: VisibleColumns = ALL_COLUMNS
    pagination: Pagination = field(default_factory=Pagination)
    load: LoadState = field(default_factory=LoadState)
    selected_contact_id: Optional[str] = None
    last_updated: Optional[str] = None

    @property
    def has_active_filters(self) -> bool:
        return self.filters.is_active

    def to_dict(self) -> TableStateDict:
        """Convert state to dictionary for storage in dcc.Store."""
        return TableStateDict(
            filters=self.filters.to_dict(),
            sort=SortDict(column=self.sort.column, direction=self.sort.direction),
            selection=selection_to_value(self.selection),
            visible_columns=visible_to_value(self.visible_columns),
            pagination=self.pagination.to_dict(),
            load=self.load.to_dict(),
            selected_contact_id=self.selected_contact_id,
            last_updated=self.last_updated,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TableState':
        """Create state instance from dictionary; missing sections fall back to defaults."""
        if not data:
            return cls()

        return cls(
            filters=FilterState.from_dict(data.get('filters')),
            sort=SortDescriptor.from_dict(data.get('sort')),
            selection=selection_from_value(data.get('selection')),
            visible_columns=visible_from_value(data.get('visible_columns', ALL)),
            pagination=Pagination.from_dict(data.get('pagination')),
            load=LoadState.from_dict(data.get('load')),
            selected_contact_id=data.get('selected_contact_id'),
            last_updated=data.get('last_updated'),
        )


def initial_state(
    page_size: int = 10,
    sort_column: str = 'full_name',
    sort_direction: str = 'ascending',
    visible_columns: Optional[List[str]] = None,
) -> TableState:
    """State at page mount, with configured defaults."""
    return TableState(
        sort=SortDescriptor(column=sort_column, direction=sort_direction),
        visible_columns=visible_from_value(visible_columns) if visible_columns else ALL_COLUMNS,
        pagination=Pagination(page_size=page_size),
    )
