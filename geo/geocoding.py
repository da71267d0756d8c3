"""
Geocoding utilities for the contacts map view.

Lookups go to the free OpenStreetMap Nominatim API (no API key). When
the API fails or finds nothing, a fixed table of well-known city
coordinates is used instead, and every answer reports its source so the
map can draw "approximate" pins differently from precise ones.

Nominatim's usage policy allows one request per second. Single
on-demand lookups are fine as they are; bulk lookups go through
``geocode_many``, which serializes requests with a RateLimiter.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from core.config import GeocodingConfig
from core.exceptions import GeocodingError

SOURCE_API = 'api'
SOURCE_FALLBACK = 'fallback'


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class GeocodingResult:
    coordinates: Coordinates
    display_name: str
    boundingbox: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GeocodeMatch:
    """A resolved location and where it came from ('api' or 'fallback')."""
    coordinates: Coordinates
    source: str

    @property
    def is_approximate(self) -> bool:
        return self.source != SOURCE_API


# Fallback coordinates for common cities, keyed by lower-cased name
CITY_COORDINATES: Dict[str, Coordinates] = {
    'new york': Coordinates(40.7128, -74.006),
    'london': Coordinates(51.5074, -0.1278),
    'paris': Coordinates(48.8566, 2.3522),
    'tokyo': Coordinates(35.6762, 139.6503),
    'berlin': Coordinates(52.52, 13.405),
    'madrid': Coordinates(40.4168, -3.7038),
    'rome': Coordinates(41.9028, 12.4964),
    'barcelona': Coordinates(41.3851, 2.1734),
    'amsterdam': Coordinates(52.3676, 4.9041),
    'vienna': Coordinates(48.2082, 16.3738),
    'dubai': Coordinates(25.2048, 55.2708),
    'singapore': Coordinates(1.3521, 103.8198),
    'sydney': Coordinates(-33.8688, 151.2093),
    'toronto': Coordinates(43.6532, -79.3832),
    'los angeles': Coordinates(34.0522, -118.2437),
    'san francisco': Coordinates(37.7749, -122.4194),
    'chicago': Coordinates(41.8781, -87.6298),
    'miami': Coordinates(25.7617, -80.1918),
}

# Used by callers when nothing resolves; always shown as approximate
DEFAULT_COORDINATES = Coordinates(20.0, 0.0)


class RateLimiter:
    """Blocks so that consecutive calls are at least ``min_interval`` seconds apart."""

    def __init__(self, min_interval: float = 1.0, clock=time.monotonic, sleep=time.sleep):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_call: Optional[float] = None

    def wait(self) -> None:
        with self._lock:
            now = self._clock()
            if self._last_call is not None:
                remaining = self.min_interval - (now - self._last_call)
                if remaining > 0:
                    self._sleep(remaining)
                    now = self._clock()
            self._last_call = now


class ThrottledSession:
    """Wraps a requests session so every GET waits on a RateLimiter first."""

    def __init__(self, session, limiter: RateLimiter):
        self.session = session
        self.limiter = limiter

    def get(self, *args, **kwargs):
        self.limiter.wait()
        return self.session.get(*args, **kwargs)


def _search_url(config: GeocodingConfig) -> str:
    return f"{config.base_url.rstrip('/')}/search"


def _request_geocode(address: str, config: GeocodingConfig, session: Optional[requests.Session]) -> List[Dict[str, Any]]:
    """
    Raw Nominatim search call.

    Raises:
        GeocodingError: On network errors, HTTP errors or a malformed payload
    """
    http = session or requests
    params = {'format': 'json', 'q': address, 'limit': 1, 'addressdetails': 1}
    headers = {'User-Agent': config.user_agent}

    try:
        response = http.get(_search_url(config), params=params, headers=headers, timeout=config.timeout_seconds)
    except requests.RequestException as e:
        raise GeocodingError(f"Geocoding request failed: {e}", query=address)

    if not response.ok:
        raise GeocodingError(f"Geocoding failed: {response.status_code}", query=address, status_code=response.status_code)

    try:
        payload = response.json()
    except ValueError as e:
        raise GeocodingError(f"Geocoding returned invalid JSON: {e}", query=address)

    if not isinstance(payload, list):
        raise GeocodingError("Geocoding returned an unexpected payload", query=address)
    return payload


def geocode_address(
    address: str,
    config: Optional[GeocodingConfig] = None,
    session: Optional[requests.Session] = None,
) -> Optional[GeocodingResult]:
    """
    Geocode an address with Nominatim.

    Returns:
        The first match, or None when nothing was found or the lookup failed
    """
    config = config or GeocodingConfig()
    if not config.enabled or not address or not address.strip():
        return None

    try:
        results = _request_geocode(address, config, session)
        if not results:
            return None
        first = results[0]
        return GeocodingResult(
            coordinates=Coordinates(lat=float(first['lat']), lng=float(first['lon'])),
            display_name=first.get('display_name', ''),
            boundingbox=tuple(first.get('boundingbox') or ()),
        )
    except GeocodingError as e:
        logging.error(f"Geocoding error: {e}")
        return None
    except (KeyError, TypeError, ValueError) as e:
        logging.error(f"Geocoding error: malformed result for '{address}': {e}")
        return None


def get_fallback_coordinates(city: Optional[str], country: Optional[str]) -> Optional[Coordinates]:
    """Coordinates from the fixed city table, or None."""
    if not city:
        return None
    search_key = city.strip().lower()
    if search_key in CITY_COORDINATES:
        return CITY_COORDINATES[search_key]

    country_key = f"{search_key}, {(country or '').strip().lower()}"
    return CITY_COORDINATES.get(country_key)


def smart_geocode(
    address: str,
    city: str,
    country: str,
    config: Optional[GeocodingConfig] = None,
    session: Optional[requests.Session] = None,
) -> Optional[GeocodeMatch]:
    """
    Resolve a contact's location, falling back step by step.

    Order: full address via the API, then the fallback city table, then
    "city, country" via the API. Never raises.

    Returns:
        GeocodeMatch with source 'api' or 'fallback', or None when all
        three steps fail
    """
    result = geocode_address(address, config, session)
    if result:
        return GeocodeMatch(coordinates=result.coordinates, source=SOURCE_API)
    logging.warning("API geocoding failed, trying fallback")

    fallback = get_fallback_coordinates(city, country)
    if fallback:
        return GeocodeMatch(coordinates=fallback, source=SOURCE_FALLBACK)

    if city:
        city_query = f"{city}, {country}" if country else city
        city_result = geocode_address(city_query, config, session)
        if city_result:
            return GeocodeMatch(coordinates=city_result.coordinates, source=SOURCE_API)
        logging.warning("City geocoding also failed")

    return None


def geocode_many(
    locations: Iterable[Tuple[str, str, str]],
    config: Optional[GeocodingConfig] = None,
    session: Optional[requests.Session] = None,
    limiter: Optional[RateLimiter] = None,
) -> List[Optional[GeocodeMatch]]:
    """
    Geocode several (address, city, country) triples, throttled.

    Each API request waits on the limiter; fallback-table hits do not.
    """
    config = config or GeocodingConfig()
    limiter = limiter or RateLimiter(config.min_interval_seconds)
    http = session or requests.Session()
    throttled = ThrottledSession(http, limiter)
    try:
        return [smart_geocode(address, city, country, config, throttled) for address, city, country in locations]
    finally:
        if session is None:
            http.close()
