"""Geocoding endpoint - POST /geo/lookup."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.adapters.geocoding import Geocoder, GeocodingError
from backend.app.cache import MemoryCache
from backend.app.config import get_settings
from backend.app.models.geo import GeoLookupRequest, GeoLookupResponse, LookupResult

router = APIRouter(prefix="/geo", tags=["geo"])


@lru_cache
def get_geocode_cache() -> MemoryCache[LookupResult]:
    """Process-wide geocoding memo."""
    settings = get_settings()
    return MemoryCache(
        max_entries=settings.geocode_cache_max_entries,
        ttl_seconds=settings.geocode_cache_ttl_seconds,
    )


def get_geocoder() -> Geocoder:
    """Geocoder dependency configured from settings."""
    settings = get_settings()
    return Geocoder(
        cache=get_geocode_cache(),
        google_api_key=settings.google_maps_api_key,
        user_agent=settings.nominatim_user_agent,
        timeout_seconds=settings.geocode_timeout_seconds,
        max_items=settings.max_place_lookups,
    )


@router.post("/lookup", response_model=GeoLookupResponse)
async def lookup(
    request: GeoLookupRequest,
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
) -> GeoLookupResponse:
    """Geocode place names in the context of a city and country.

    Raises:
        HTTPException: 400 if no names are given, 502 if providers are unreachable
    """
    try:
        return await geocoder.lookup_places(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except GeocodingError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
