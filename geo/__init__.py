"""
Geographic helpers for the Contacts Dashboard: geocoding with a city
fallback table, and per-country contact statistics.
"""

from .countries import (
    COUNTRIES,
    Country,
    analytics_metrics,
    continent_stats,
    country_stats,
    filter_country_stats,
    find_country_by_code,
    find_country_by_name,
    group_by_continent,
    search_countries,
)
from .geocoding import (
    DEFAULT_COORDINATES,
    Coordinates,
    GeocodeMatch,
    GeocodingResult,
    RateLimiter,
    ThrottledSession,
    geocode_address,
    geocode_many,
    get_fallback_coordinates,
    smart_geocode,
)

__all__ = [
    'Coordinates',
    'GeocodingResult',
    'GeocodeMatch',
    'RateLimiter',
    'ThrottledSession',
    'DEFAULT_COORDINATES',
    'geocode_address',
    'geocode_many',
    'get_fallback_coordinates',
    'smart_geocode',
    'Country',
    'COUNTRIES',
    'country_stats',
    'analytics_metrics',
    'continent_stats',
    'filter_country_stats',
    'find_country_by_code',
    'find_country_by_name',
    'search_countries',
    'group_by_continent',
]
