"""
Country lookups and per-country contact statistics.

Feeds the geographic analytics page: how many contacts each country
has, where to put the country's marker, and simple search/grouping
over the built-in country table.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from contacts.models import Contact


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    continent: str
    lat: float
    lng: float
    flag: str = '🏳️'


COUNTRIES: List[Country] = [
    Country('US', 'United States', 'North America', 39.8283, -98.5795, '🇺🇸'),
    Country('CA', 'Canada', 'North America', 56.1304, -106.3468, '🇨🇦'),
    Country('MX', 'Mexico', 'North America', 23.6345, -102.5528, '🇲🇽'),
    Country('BR', 'Brazil', 'South America', -14.235, -51.9253, '🇧🇷'),
    Country('AR', 'Argentina', 'South America', -38.4161, -63.6167, '🇦🇷'),
    Country('GB', 'United Kingdom', 'Europe', 55.3781, -3.436, '🇬🇧'),
    Country('DE', 'Germany', 'Europe', 51.1657, 10.4515, '🇩🇪'),
    Country('FR', 'France', 'Europe', 46.2276, 2.2137, '🇫🇷'),
    Country('ES', 'Spain', 'Europe', 40.4637, -3.7492, '🇪🇸'),
    Country('IT', 'Italy', 'Europe', 41.8719, 12.5674, '🇮🇹'),
    Country('NL', 'Netherlands', 'Europe', 52.1326, 5.2913, '🇳🇱'),
    Country('AT', 'Austria', 'Europe', 47.5162, 14.5501, '🇦🇹'),
    Country('SA', 'Saudi Arabia', 'Asia', 23.8859, 45.0792, '🇸🇦'),
    Country('AE', 'United Arab Emirates', 'Asia', 23.4241, 53.8478, '🇦🇪'),
    Country('IN', 'India', 'Asia', 20.5937, 78.9629, '🇮🇳'),
    Country('CN', 'China', 'Asia', 35.8617, 104.1954, '🇨🇳'),
    Country('JP', 'Japan', 'Asia', 36.2048, 138.2529, '🇯🇵'),
    Country('SG', 'Singapore', 'Asia', 1.3521, 103.8198, '🇸🇬'),
    Country('EG', 'Egypt', 'Africa', 26.8206, 30.8025, '🇪🇬'),
    Country('ZA', 'South Africa', 'Africa', -30.5595, 22.9375, '🇿🇦'),
    Country('AU', 'Australia', 'Oceania', -25.2744, 133.7751, '🇦🇺'),
]

STATS_COLUMNS = ['country', 'country_code', 'flag', 'contact_count', 'lat', 'lng']


def find_country_by_code(code: Optional[str], countries: Sequence[Country] = COUNTRIES) -> Optional[Country]:
    if not code:
        return None
    code = code.strip().upper()
    return next((c for c in countries if c.code == code), None)


def find_country_by_name(name: Optional[str], countries: Sequence[Country] = COUNTRIES) -> Optional[Country]:
    if not name:
        return None
    wanted = name.strip().lower()
    return next((c for c in countries if c.name.lower() == wanted), None)


def resolve_country(value: Optional[str], countries: Sequence[Country] = COUNTRIES) -> Optional[Country]:
    """Match a stored country value given either as a name or an ISO code."""
    return find_country_by_name(value, countries) or find_country_by_code(value, countries)


def search_countries(query: str, countries: Sequence[Country] = COUNTRIES) -> List[Country]:
    """Countries whose name or code contains the query; all of them for an empty query."""
    term = (query or '').strip().lower()
    if not term:
        return list(countries)
    return [c for c in countries if term in c.name.lower() or term in c.code.lower()]


def group_by_continent(countries: Sequence[Country] = COUNTRIES) -> Dict[str, List[Country]]:
    groups: Dict[str, List[Country]] = {}
    for country in countries:
        groups.setdefault(country.continent, []).append(country)
    return groups


def country_stats(contacts: Sequence[Contact]) -> pd.DataFrame:
    """
    Contact counts per country, largest first.

    Contacts without a country are skipped. Countries missing from the
    built-in table keep a row with no code and no coordinates.

    Returns:
        DataFrame with STATS_COLUMNS
    """
    names = [c.country.strip() for c in contacts if c.country and c.country.strip()]
    if not names:
        return pd.DataFrame(columns=STATS_COLUMNS)

    counts = (
        pd.Series(names, name='country')
        .value_counts(sort=False)
        .rename('contact_count')
        .reset_index()
    )
    counts.columns = ['country', 'contact_count']

    def _lookup(value: str, attr: str):
        match = resolve_country(value)
        return getattr(match, attr) if match else None

    counts['country_code'] = counts['country'].map(lambda v: _lookup(v, 'code'))
    counts['flag'] = counts['country'].map(lambda v: _lookup(v, 'flag') or '🏳️')
    counts['lat'] = counts['country'].map(lambda v: _lookup(v, 'lat'))
    counts['lng'] = counts['country'].map(lambda v: _lookup(v, 'lng'))

    unmatched = counts.loc[counts['country_code'].isna(), 'country'].tolist()
    if unmatched:
        logging.debug(f"No country table entry for: {unmatched}")

    # Stable sort keeps first-seen order among equal counts
    return (
        counts.sort_values('contact_count', ascending=False, kind='stable')
        .reset_index(drop=True)[STATS_COLUMNS]
    )


def analytics_metrics(contacts: Sequence[Contact]) -> Dict[str, int]:
    stats = country_stats(contacts)
    return {
        'total_contacts': len(contacts),
        'total_countries': len(stats),
        'contacts_with_country': int(stats['contact_count'].sum()) if not stats.empty else 0,
    }


def filter_country_stats(stats: pd.DataFrame, query: Optional[str], countries: Sequence[Country] = COUNTRIES) -> pd.DataFrame:
    """
    Rows of ``country_stats`` output matching a country search.

    A row matches when its code is among ``search_countries(query)`` or
    its stored country value contains the query.
    """
    term = (query or '').strip().lower()
    if not term or stats.empty:
        return stats
    codes = {c.code for c in search_countries(term, countries)}
    mask = stats['country_code'].isin(codes) | stats['country'].str.lower().str.contains(term, regex=False)
    return stats[mask].reset_index(drop=True)


def continent_stats(stats: pd.DataFrame, countries: Sequence[Country] = COUNTRIES) -> pd.DataFrame:
    """Contact counts per continent, largest first; countries outside the table are left out."""
    continent_of = {
        country.code: continent
        for continent, members in group_by_continent(countries).items()
        for country in members
    }
    located = stats.assign(continent=stats['country_code'].map(continent_of)).dropna(subset=['continent'])
    if located.empty:
        return pd.DataFrame(columns=['continent', 'contact_count'])
    totals = located.groupby('continent', sort=False)['contact_count'].sum().reset_index()
    return totals.sort_values('contact_count', ascending=False, kind='stable').reset_index(drop=True)
