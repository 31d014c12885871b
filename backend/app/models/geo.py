"""Geocoding models - place candidates and lookup results."""

from typing import Annotated

from pydantic import Field, field_validator

from backend.app.models.common import CamelModel


class PlaceCandidate(CamelModel):
    """Place name extracted from an itinerary line, with its position."""

    name: str
    day_num: int
    order: int
    section: str | None = None


class LookupItem(CamelModel):
    """One place to geocode."""

    name: str
    day_num: int | None = None
    order: int | None = None
    section: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim whitespace around the place name."""
        return v.strip()


class GeoLookupRequest(CamelModel):
    """Body of POST /geo/lookup. `items` wins over bare `names`."""

    items: list[LookupItem] = Field(default_factory=list)
    names: list[str] = Field(default_factory=list)
    city: str = ""
    country: str = ""

    def lookup_items(self) -> list[LookupItem]:
        """Non-empty items, falling back to names when no item is given."""
        items = [item for item in self.items if item.name]
        if items:
            return items
        return [LookupItem(name=name.strip()) for name in self.names if name.strip()]


class LookupResult(CamelModel):
    """Geocoding outcome for one query."""

    query: str
    found: bool
    lat: float | None = None
    lon: float | None = None
    address: str | None = None
    name: str | None = None
    day_num: int | None = None
    order: int | None = None
    section: str | None = None


class GeoLookupResponse(CamelModel):
    """Batch lookup response."""

    provider: str
    checked: int
    not_found: Annotated[int, Field(ge=0)]
    results: list[LookupResult]
    fallback: LookupResult | None = None
