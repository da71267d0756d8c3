"""
Tests for country lookups and per-country statistics.
"""
import os
import sys

import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from geo.countries import (
    COUNTRIES,
    STATS_COLUMNS,
    analytics_metrics,
    continent_stats,
    country_stats,
    filter_country_stats,
    find_country_by_code,
    find_country_by_name,
    group_by_continent,
    resolve_country,
    search_countries,
)
from tests.contact_fixtures import example_rows, larger_rows, make_contact


class TestLookups:

    def test_by_code(self):
        assert find_country_by_code(' fr ').name == 'France'
        assert find_country_by_code('XX') is None

    def test_by_name(self):
        assert find_country_by_name('japan').code == 'JP'

    def test_resolve_name_or_code(self):
        assert resolve_country('US').name == 'United States'
        assert resolve_country('United States').code == 'US'
        assert resolve_country(None) is None

    def test_search(self):
        names = [c.name for c in search_countries('united')]
        assert 'United Kingdom' in names
        assert 'United States' in names
        assert len(search_countries('')) == len(COUNTRIES)

    def test_group_by_continent(self):
        groups = group_by_continent()
        assert {c.code for c in groups['Oceania']} == {'AU'}
        assert sum(len(v) for v in groups.values()) == len(COUNTRIES)


class TestCountryStats:

    def test_counts_largest_first(self):
        stats = country_stats(example_rows())
        assert list(stats.columns) == STATS_COLUMNS
        assert stats.iloc[0]['country'] == 'US'
        assert stats.iloc[0]['contact_count'] == 2
        assert stats.iloc[0]['country_code'] == 'US'

    def test_unknown_country_has_no_coordinates(self):
        stats = country_stats([make_contact('1', country='Atlantis')])
        row = stats.iloc[0]
        assert pd.isna(row['country_code'])
        assert pd.isna(row['lat'])

    def test_missing_country_skipped(self):
        stats = country_stats([make_contact('1'), make_contact('2', country='  ')])
        assert stats.empty
        assert list(stats.columns) == STATS_COLUMNS

    def test_metrics(self):
        rows = example_rows() + [make_contact('4')]
        assert analytics_metrics(rows) == {
            'total_contacts': 4,
            'total_countries': 2,
            'contacts_with_country': 3,
        }


class TestCountrySearchAndContinents:

    def test_search_by_name_matches_code_rows(self):
        stats = country_stats(example_rows())
        assert filter_country_stats(stats, 'fran')['country'].tolist() == ['FR']

    def test_search_matches_raw_country_value(self):
        stats = country_stats([make_contact('1', country='Atlantis'), make_contact('2', country='US')])
        assert filter_country_stats(stats, 'atlan')['country'].tolist() == ['Atlantis']

    def test_empty_search_keeps_everything(self):
        stats = country_stats(example_rows())
        assert filter_country_stats(stats, '  ') is stats
        assert filter_country_stats(stats, None) is stats

    def test_continent_totals(self):
        # larger_rows cycles US, FR, Germany, Japan
        totals = continent_stats(country_stats(larger_rows(8)))
        assert totals.iloc[0]['continent'] == 'Europe'
        assert dict(zip(totals['continent'], totals['contact_count'])) == {
            'Europe': 4,
            'North America': 2,
            'Asia': 2,
        }

    def test_unknown_countries_left_out(self):
        totals = continent_stats(country_stats([make_contact('1', country='Atlantis')]))
        assert totals.empty
        assert list(totals.columns) == ['continent', 'contact_count']
