"""
Pagination bookkeeping for the contacts table.

In client-side mode page counts come from the filtered rows. When the
data source paginates on the server, ``total_pages`` and ``total_items``
are plain counters set from the server response and the engine does
not derive them.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Sequence, TypeVar

T = TypeVar('T')

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_pages: int = 1
    total_items: int = 0
    server_paginated: bool = False

    def to_dict(self) -> dict:
        return {
            'page': self.page,
            'page_size': self.page_size,
            'total_pages': self.total_pages,
            'total_items': self.total_items,
            'server_paginated': self.server_paginated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Pagination':
        if not data:
            return cls()
        return cls(
            page=max(1, int(data.get('page', 1))),
            page_size=max(1, int(data.get('page_size', DEFAULT_PAGE_SIZE))),
            total_pages=max(1, int(data.get('total_pages', 1))),
            total_items=max(0, int(data.get('total_items', 0))),
            server_paginated=bool(data.get('server_paginated', False)),
        )


def page_count(total_items: int, page_size: int) -> int:
    """Number of pages, never less than 1."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(1, page), max(1, total_pages))


def page_slice(rows: Sequence[T], page: int, page_size: int) -> List[T]:
    """Rows on the given 1-based page."""
    start = (max(1, page) - 1) * page_size
    return list(rows[start:start + page_size])


def set_totals(pagination: Pagination, total_pages: int, total_items: int) -> Pagination:
    """Record counters reported by a server-paginated data source."""
    return replace(
        pagination,
        total_pages=max(1, int(total_pages)),
        total_items=max(0, int(total_items)),
        server_paginated=True,
    )
