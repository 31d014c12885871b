"""Models package - re-exports for convenience."""

from backend.app.models.common import (
    TRAVEL_STYLES,
    BudgetMode,
    CamelModel,
    CompanionType,
    PaceMode,
)
from backend.app.models.geo import (
    GeoLookupRequest,
    GeoLookupResponse,
    LookupItem,
    LookupResult,
    PlaceCandidate,
)
from backend.app.models.intent import TripParameters
from backend.app.models.itinerary import (
    Activity,
    DayAnalysis,
    DayFeasibility,
    DayPlan,
    ItineraryAnalysis,
    ItineraryResponse,
    RenderedDay,
    RenderResponse,
    StructuredDayAnalysis,
)
from backend.app.models.share import (
    ShareCreateRequest,
    ShareCreateResponse,
    SharedItineraryResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "BudgetMode",
    "CompanionType",
    "PaceMode",
    "TRAVEL_STYLES",
    # Intent
    "TripParameters",
    # Itinerary
    "Activity",
    "DayPlan",
    "ItineraryResponse",
    "DayAnalysis",
    "DayFeasibility",
    "ItineraryAnalysis",
    "StructuredDayAnalysis",
    "RenderedDay",
    "RenderResponse",
    # Geo
    "PlaceCandidate",
    "LookupItem",
    "GeoLookupRequest",
    "LookupResult",
    "GeoLookupResponse",
    # Share
    "ShareCreateRequest",
    "ShareCreateResponse",
    "SharedItineraryResponse",
]
