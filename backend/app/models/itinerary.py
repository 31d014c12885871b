"""Itinerary models - structured plan and derived analyses."""

from typing import Annotated

from pydantic import ConfigDict, Field

from backend.app.models.common import CamelModel


class Activity(CamelModel):
    """Single activity of a structured day plan (already sanitized)."""

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(min_length=1)]
    type: Annotated[str, Field(min_length=1)]
    stay_minutes: Annotated[int, Field(ge=30, le=240)]
    move_minutes_to_next: Annotated[int, Field(ge=0, le=180)]
    lat: float | None = None
    lng: float | None = None


class DayPlan(CamelModel):
    """Structured plan for a single day."""

    day: int
    theme: str
    activities: list[Activity]


class ItineraryResponse(CamelModel):
    """Structured itinerary as returned by the JSON generation path."""

    days: list[DayPlan]


class DayAnalysis(CamelModel):
    """Text-pattern feasibility heuristics for one markdown day."""

    move_minutes: int
    item_count: int
    section_count: int
    warnings: list[str] = Field(default_factory=list)


class DayFeasibility(CamelModel):
    """Feasibility of one day, tagged with its number and title."""

    day_num: int
    title: str
    analysis: DayAnalysis


class ItineraryAnalysis(CamelModel):
    """Feasibility of every day plus the flattened warning list."""

    days: list[DayFeasibility]
    warnings: list[str]


class StructuredDayAnalysis(CamelModel):
    """Time totals and warnings computed from typed activity fields."""

    total_stay: int
    total_move: int
    total_minutes: int
    move_ratio: float
    warnings: list[str] = Field(default_factory=list)


class RenderedDay(CamelModel):
    """One sanitized day with its HTML rendering."""

    day_num: int
    title: str
    raw: str
    html: str


class RenderResponse(CamelModel):
    """Rendered days plus the whole document as one HTML fragment."""

    days: list[RenderedDay]
    html: str
