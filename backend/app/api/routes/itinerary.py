"""Itinerary document endpoints - render, analyze and structural edits.

All operations are pure: the client sends its current document and gets the
new one back. Nothing here is persisted.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, status
from pydantic import Field, field_validator

from backend.app.itinerary.budget import BudgetEstimate, estimate_budget
from backend.app.itinerary.document import parse_document
from backend.app.itinerary.extractors import (
    analyze_itinerary,
    extract_place_candidates,
    extract_place_candidates_with_meta,
)
from backend.app.itinerary.mutations import (
    append_day,
    append_note,
    edit_day,
    nights_from_markdown,
    rebuild_sequential,
    remove_day,
)
from backend.app.itinerary.render import render_itinerary
from backend.app.models.common import CamelModel
from backend.app.models.geo import PlaceCandidate
from backend.app.models.intent import TripParameters
from backend.app.models.itinerary import ItineraryAnalysis, RenderResponse

router = APIRouter(prefix="/itinerary", tags=["itinerary"])


class MarkdownRequest(CamelModel):
    """Request body carrying the client's current document."""

    markdown: str


class AnalyzeRequest(MarkdownRequest):
    """Request body for POST /itinerary/analyze."""

    params: TripParameters | None = None


class AnalyzeResponse(CamelModel):
    """Feasibility per day plus an optional budget estimate."""

    analysis: ItineraryAnalysis
    budget: BudgetEstimate | None = None


class PlacesResponse(CamelModel):
    """Place candidates for geocoding."""

    names: list[str]
    places: list[PlaceCandidate]


class NoteRequest(MarkdownRequest):
    """Request body for POST /itinerary/days/{n}/note."""

    note: str

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        """Reject blank notes."""
        if not v.strip():
            raise ValueError("note must not be blank")
        return v


class EditDayRequest(MarkdownRequest):
    """Request body for PUT /itinerary/days/{n}."""

    text: Annotated[str, Field(min_length=1)]


class EditResponse(CamelModel):
    """Edited document and the nights it now implies."""

    markdown: str
    nights: int
    changed: bool


def _require_day(markdown: str, day_number: int) -> None:
    if parse_document(markdown).day(day_number) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Day {day_number} not found in itinerary",
        )


def _edit_response(before: str, after: str) -> EditResponse:
    return EditResponse(markdown=after, nights=nights_from_markdown(after), changed=after != before)


@router.post("/render", response_model=RenderResponse)
async def render(request: MarkdownRequest) -> RenderResponse:
    """Sanitize days and render them to HTML."""
    return render_itinerary(request.markdown)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """Feasibility warnings per day, and a budget estimate when params are given.

    The budget covers the days present in the document, or the planned days
    when the document has none.
    """
    analysis = analyze_itinerary(request.markdown)
    budget = None
    if request.params is not None:
        days = len(analysis.days) or request.params.days
        budget = estimate_budget(request.params, days)
    return AnalyzeResponse(analysis=analysis, budget=budget)


@router.post("/places", response_model=PlacesResponse)
async def places(request: MarkdownRequest) -> PlacesResponse:
    """Place names to geocode, with day/section/order metadata."""
    return PlacesResponse(
        names=extract_place_candidates(request.markdown),
        places=extract_place_candidates_with_meta(request.markdown),
    )


@router.post("/days", response_model=EditResponse)
async def add_day(request: MarkdownRequest) -> EditResponse:
    """Append an empty template day."""
    return _edit_response(request.markdown, append_day(request.markdown))


@router.post("/days/{day_number}/clear", response_model=EditResponse)
async def clear_day(day_number: int, request: MarkdownRequest) -> EditResponse:
    """Reset a day to the empty template, keeping its title."""
    _require_day(request.markdown, day_number)
    return _edit_response(request.markdown, remove_day(request.markdown, day_number))


@router.delete("/days/{day_number}", response_model=EditResponse)
async def delete_day(day_number: int, request: MarkdownRequest) -> EditResponse:
    """Remove a day and renumber the rest from 1."""
    _require_day(request.markdown, day_number)
    return _edit_response(request.markdown, rebuild_sequential(request.markdown, day_number))


@router.post("/days/{day_number}/note", response_model=EditResponse)
async def add_note(day_number: int, request: NoteRequest) -> EditResponse:
    """Append a note section to a day."""
    _require_day(request.markdown, day_number)
    return _edit_response(request.markdown, append_note(request.markdown, day_number, request.note))


@router.put("/days/{day_number}", response_model=EditResponse)
async def update_day(day_number: int, request: EditDayRequest) -> EditResponse:
    """Replace a day's body with user-edited text."""
    _require_day(request.markdown, day_number)
    return _edit_response(request.markdown, edit_day(request.markdown, day_number, request.text))
