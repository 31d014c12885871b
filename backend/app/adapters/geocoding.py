"""Geocoding adapter: Google Geocoding API first, Nominatim as fallback.

Results (including misses) are memoized by lower-cased query text. A batch
is capped at `max_items` names; when nothing resolves, the city itself is
looked up so the map still has a centre.
"""

import logging
import math
from typing import Any

import httpx

from backend.app.cache import Cache
from backend.app.models.geo import GeoLookupRequest, GeoLookupResponse, LookupItem, LookupResult
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"

GOOGLE_OK_STATUSES = frozenset({"OK", "ZERO_RESULTS"})
DEFAULT_MAX_ITEMS = 20


class GeocodingError(Exception):
    """Every provider failed at the transport or HTTP level."""


def build_query(name: str, city: str = "", country: str = "") -> str:
    """Join non-empty parts into one free-text query."""
    return " ".join(part for part in (name, city, country) if part)


def _finite(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


async def geocode_google(query: str, api_key: str, client: httpx.AsyncClient) -> LookupResult | None:
    """Look up a query with the Google Geocoding API.

    Returns:
        Found result, or None for no match or an unexpected status

    Raises:
        GeocodingError: On network or HTTP errors
    """
    params = {"address": query, "key": api_key, "language": "ko", "region": "kr"}
    try:
        response = await client.get(GOOGLE_GEOCODE_URL, params=params)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        metrics.inc_geocode_lookup("google", "error")
        raise GeocodingError(f"google: {type(e).__name__}") from e

    if data.get("status") not in GOOGLE_OK_STATUSES:
        logger.warning(f"Google geocoding status {data.get('status')!r} for {query!r}")
        metrics.inc_geocode_lookup("google", "rejected")
        return None

    results = data.get("results") or []
    first = results[0] if results else {}
    location = (first.get("geometry") or {}).get("location") or {}
    lat = _finite(location.get("lat"))
    lon = _finite(location.get("lng"))
    if lat is None or lon is None:
        metrics.inc_geocode_lookup("google", "not_found")
        return None

    metrics.inc_geocode_lookup("google", "found")
    return LookupResult(
        query=query, found=True, lat=lat, lon=lon, address=first.get("formatted_address")
    )


async def geocode_nominatim(
    query: str, user_agent: str, client: httpx.AsyncClient
) -> LookupResult | None:
    """Look up a query with OpenStreetMap Nominatim.

    Raises:
        GeocodingError: On network or HTTP errors
    """
    params = {"q": query, "format": "jsonv2", "limit": "1", "addressdetails": "0"}
    headers = {"User-Agent": user_agent, "Accept-Language": "ko,en"}
    try:
        response = await client.get(NOMINATIM_SEARCH_URL, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        metrics.inc_geocode_lookup("nominatim", "error")
        raise GeocodingError(f"nominatim: {type(e).__name__}") from e

    first = data[0] if isinstance(data, list) and data else None
    lat = _finite(first.get("lat")) if first else None
    lon = _finite(first.get("lon")) if first else None
    if lat is None or lon is None:
        metrics.inc_geocode_lookup("nominatim", "not_found")
        return None

    metrics.inc_geocode_lookup("nominatim", "found")
    return LookupResult(query=query, found=True, lat=lat, lon=lon, address=first.get("display_name"))


class Geocoder:
    """Batch place lookup with memoization."""

    def __init__(
        self,
        *,
        cache: Cache[LookupResult],
        google_api_key: str = "",
        user_agent: str = "trip-itinerary-planner/0.1",
        timeout_seconds: float = 8.0,
        max_items: int = DEFAULT_MAX_ITEMS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize geocoder.

        Args:
            cache: Memo for results keyed by lower-cased query
            google_api_key: Enables the Google provider when non-empty
            user_agent: User-Agent sent to Nominatim (required by its policy)
            timeout_seconds: Per-request timeout of the default client
            max_items: Maximum names looked up per batch
            client: Optional httpx client (for testing with mocks)
        """
        self._cache = cache
        self._google_api_key = google_api_key.strip()
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds
        self._max_items = max_items
        self._client = client

    @property
    def provider(self) -> str:
        return "google" if self._google_api_key else "nominatim"

    async def lookup_places(self, request: GeoLookupRequest) -> GeoLookupResponse:
        """Geocode the items of a request.

        Raises:
            ValueError: If the request names no place
            GeocodingError: If every provider failed for a query
        """
        items = request.lookup_items()
        if not items:
            raise ValueError("no place names to look up")

        city = request.city.strip()
        country = request.country.strip()

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_seconds)
            close_client = True

        try:
            results = [
                await self._lookup_item(client, item, city, country)
                for item in items[: self._max_items]
            ]
            not_found = sum(1 for result in results if not result.found)

            fallback: LookupResult | None = None
            city_query = build_query(city, country)
            if not_found == len(results) and city_query:
                fallback = await self._resolve_city(client, city_query, city or country)
        finally:
            if close_client:
                await client.aclose()

        return GeoLookupResponse(
            provider=self.provider,
            checked=len(results),
            not_found=not_found,
            results=results,
            fallback=fallback,
        )

    async def _lookup_item(
        self, client: httpx.AsyncClient, item: LookupItem, city: str, country: str
    ) -> LookupResult:
        meta = {"name": item.name, "day_num": item.day_num, "order": item.order, "section": item.section}
        query = build_query(item.name, city, country)
        cache_key = query.lower()

        cached = self._cache.get(cache_key)
        if cached is not None:
            metrics.inc_geocode_cache_hit()
            return cached.model_copy(update=meta)

        result = await self._resolve(client, [query, item.name])
        if result is None:
            result = LookupResult(query=item.name, found=False)
        self._cache.set(cache_key, result)
        return result.model_copy(update=meta)

    async def _resolve_city(
        self, client: httpx.AsyncClient, city_query: str, label: str
    ) -> LookupResult | None:
        try:
            result = await self._resolve(client, [city_query])
        except GeocodingError as e:
            logger.warning(f"City fallback lookup failed: {e}")
            return None
        if result is None:
            return None
        return result.model_copy(update={"query": label, "found": True})

    async def _resolve(self, client: httpx.AsyncClient, queries: list[str]) -> LookupResult | None:
        """Try each provider for each query, Google before Nominatim.

        Raises:
            GeocodingError: If no attempt completed without a transport error
        """
        attempts = []
        if self._google_api_key:
            attempts.extend(
                (geocode_google, query, self._google_api_key) for query in queries
            )
        attempts.extend((geocode_nominatim, query, self._user_agent) for query in queries)

        errors: list[GeocodingError] = []
        for lookup, query, credential in attempts:
            try:
                result = await lookup(query, credential, client)
            except GeocodingError as e:
                logger.warning(f"Geocoding attempt failed for {query!r}: {e}")
                errors.append(e)
                continue
            if result is not None:
                return result

        if errors and len(errors) == len(attempts):
            raise GeocodingError(f"all providers failed for {queries[0]!r}") from errors[-1]
        return None
