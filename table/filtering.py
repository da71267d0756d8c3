"""
Search and filter stage for the contacts table.

Filtering is a pure, single pass over the row collection. All active
predicates (search, industry, country, date bucket) are combined with
AND. Bad or missing values never raise: a missing categorical value
does not match a concrete filter, and a missing or unparseable
collection date does not restrict the row at all.
"""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import pandas as pd

from contacts.models import Contact

ALL = 'all'

# Date bucket name -> maximum age in whole days
DATE_BUCKETS = {
    'last7Days': 7,
    'last30Days': 30,
    'last60Days': 60,
}

SEARCH_FIELDS = ('full_name', 'company_name', 'job_title')

SECONDS_PER_DAY = 24 * 60 * 60


def normalize_search(search: Optional[str]) -> str:
    return (search or '').strip().casefold()


def matches_search(row: Contact, search: Optional[str]) -> bool:
    """Case-insensitive substring match on name, company, job title or any email."""
    needle = normalize_search(search)
    if not needle:
        return True

    for name in SEARCH_FIELDS:
        value = row.get(name)
        if value and needle in value.casefold():
            return True
    return any(needle in email.casefold() for email in row.email)


def matches_category(value: Optional[str], wanted: Optional[str]) -> bool:
    """Case-folded equality; 'all' (or no filter) matches everything."""
    if not wanted or wanted == ALL:
        return True
    if not value:
        return False
    return value.casefold() == wanted.casefold()


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a collection date; None for missing or unparseable values."""
    if not value:
        return None
    parsed = pd.to_datetime(value, errors='coerce', utc=True)
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def days_since(value: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days between the collection date and now (floored), or None."""
    collected = parse_date(value)
    if collected is None:
        return None
    now = _utc(now or datetime.now(timezone.utc))
    return math.floor((now - collected).total_seconds() / SECONDS_PER_DAY)


def matches_date_bucket(value: Optional[str], bucket: Optional[str], now: Optional[datetime] = None) -> bool:
    """
    True when the row was collected within the bucket's day threshold.

    Rows with a missing or unparseable date pass, as do unknown bucket
    names.
    """
    if not bucket or bucket == ALL:
        return True

    threshold = DATE_BUCKETS.get(bucket)
    if threshold is None:
        logging.debug(f"Unknown date bucket '{bucket}', not restricting")
        return True

    age = days_since(value, now)
    if age is None:
        return True
    return age <= threshold


def filter_rows(
    rows: Sequence[Contact],
    search: str = '',
    industry: str = ALL,
    country: str = ALL,
    date: str = ALL,
    now: Optional[datetime] = None,
) -> List[Contact]:
    """
    Apply search and attribute filters, keeping input order.

    Args:
        rows: Full row collection
        search: Free-text search (trimmed and case-folded)
        industry: Industry value or 'all'
        country: Country value or 'all'
        date: Date bucket name ('last7Days', 'last30Days', 'last60Days') or 'all'
        now: Reference time for date buckets (defaults to the current UTC time)

    Returns:
        New list of the rows passing every predicate
    """
    now = now or datetime.now(timezone.utc)
    return [
        row for row in rows
        if matches_search(row, search)
        and matches_category(row.industry, industry)
        and matches_category(row.country, country)
        and matches_date_bucket(row.date_collected, date, now)
    ]


def has_active_filters(search: str = '', industry: str = ALL, country: str = ALL, date: str = ALL) -> bool:
    return search != '' or industry != ALL or country != ALL or date != ALL
