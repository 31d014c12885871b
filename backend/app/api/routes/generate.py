"""Generation endpoints - full itinerary, structured itinerary, partial regeneration."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, model_validator

from backend.app.itinerary.document import parse_document
from backend.app.itinerary.mutations import replace_day, replace_section
from backend.app.itinerary.structured import (
    analyze_structured_day,
    build_markdown_from_itinerary,
    parse_itinerary_response,
)
from backend.app.itinerary.vocabulary import SectionLabel
from backend.app.llm.client import (
    GenerationError,
    GenerationNotConfiguredError,
    ItineraryGenerator,
    get_llm_client,
)
from backend.app.middleware.ratelimit import rate_limit
from backend.app.models.common import CamelModel
from backend.app.models.intent import TripParameters
from backend.app.models.itinerary import ItineraryResponse, StructuredDayAnalysis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


class GenerateResponse(CamelModel):
    """Response for POST /generate."""

    markdown: str
    nights: int
    days: int


class StructuredGenerateResponse(CamelModel):
    """Response for POST /generate/structured."""

    markdown: str
    itinerary: ItineraryResponse
    analyses: list[StructuredDayAnalysis]


class RegenerateDayRequest(TripParameters):
    """Request body for POST /regenerate-day."""

    day_number: int
    existing_markdown: Annotated[str, Field(min_length=1)]

    @model_validator(mode="after")
    def validate_day_number(self) -> "RegenerateDayRequest":
        """Day must be within 1..nights+1."""
        if not 1 <= self.day_number <= self.days:
            raise ValueError(f"dayNumber must be between 1 and {self.days}")
        return self


class RegenerateSectionRequest(RegenerateDayRequest):
    """Request body for POST /regenerate-section."""

    section_title: SectionLabel


class RegenerateResponse(CamelModel):
    """Generated block and the document with it spliced in."""

    block: str
    markdown: str


def get_generator() -> ItineraryGenerator:
    """Generation client dependency.

    Raises:
        HTTPException: 503 if no generation backend is configured
    """
    try:
        return get_llm_client()
    except GenerationNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e


def _bad_gateway(e: GenerationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post(
    "/generate",
    response_model=GenerateResponse,
    dependencies=[Depends(rate_limit("generate"))],
)
async def generate(
    params: TripParameters,
    generator: Annotated[ItineraryGenerator, Depends(get_generator)],
) -> GenerateResponse:
    """Generate a complete markdown itinerary.

    Args:
        params: Trip parameters
        generator: Generation backend

    Returns:
        Markdown plus requested nights and the number of days it contains
    """
    try:
        markdown = await generator.generate_itinerary(params)
    except GenerationError as e:
        raise _bad_gateway(e) from e

    day_count = len(parse_document(markdown).days)
    if day_count != params.days:
        logger.warning(f"Generated {day_count} days for a {params.days}-day trip to {params.city}")

    return GenerateResponse(markdown=markdown, nights=params.nights, days=day_count)


@router.post(
    "/generate/structured",
    response_model=StructuredGenerateResponse,
    dependencies=[Depends(rate_limit("generate"))],
)
async def generate_structured(
    params: TripParameters,
    generator: Annotated[ItineraryGenerator, Depends(get_generator)],
) -> StructuredGenerateResponse:
    """Generate a typed itinerary and its markdown projection.

    Raises:
        HTTPException: 502 if the backend fails or returns an invalid itinerary
    """
    try:
        raw = await generator.generate_structured(params)
    except GenerationError as e:
        raise _bad_gateway(e) from e

    itinerary = parse_itinerary_response(raw)
    if itinerary is None or not itinerary.days:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="generated itinerary is not valid, try again",
        )

    return StructuredGenerateResponse(
        markdown=build_markdown_from_itinerary(itinerary),
        itinerary=itinerary,
        analyses=[analyze_structured_day(day) for day in itinerary.days],
    )


@router.post(
    "/regenerate-day",
    response_model=RegenerateResponse,
    dependencies=[Depends(rate_limit("regenerate-day"))],
)
async def regenerate_day(
    request: RegenerateDayRequest,
    generator: Annotated[ItineraryGenerator, Depends(get_generator)],
) -> RegenerateResponse:
    """Regenerate one day and splice it into the document.

    Raises:
        HTTPException: 404 if the day is not in the document, 502 on backend failure
    """
    if parse_document(request.existing_markdown).day(request.day_number) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Day {request.day_number} not found in itinerary",
        )

    try:
        block = await generator.regenerate_day(
            request, request.day_number, request.existing_markdown
        )
    except GenerationError as e:
        raise _bad_gateway(e) from e

    return RegenerateResponse(
        block=block,
        markdown=replace_day(request.existing_markdown, request.day_number, block),
    )


@router.post(
    "/regenerate-section",
    response_model=RegenerateResponse,
    dependencies=[Depends(rate_limit("regenerate-section"))],
)
async def regenerate_section(
    request: RegenerateSectionRequest,
    generator: Annotated[ItineraryGenerator, Depends(get_generator)],
) -> RegenerateResponse:
    """Regenerate one section of one day, keeping the rest of the day.

    Raises:
        HTTPException: 404 if the day is not in the document, 502 on backend failure
    """
    day = parse_document(request.existing_markdown).day(request.day_number)
    if day is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Day {request.day_number} not found in itinerary",
        )

    try:
        block = await generator.regenerate_section(
            request, request.day_number, request.section_title, day.raw
        )
    except GenerationError as e:
        raise _bad_gateway(e) from e

    return RegenerateResponse(
        block=block,
        markdown=replace_section(
            request.existing_markdown, request.day_number, request.section_title, block
        ),
    )
