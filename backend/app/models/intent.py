"""Trip parameter models - user input collected by the trip form."""

from typing import Annotated

from pydantic import ConfigDict, Field, field_validator, model_validator

from backend.app.models.common import BudgetMode, CamelModel, CompanionType, PaceMode


class TripParameters(CamelModel):
    """Parameters of one generation.

    Persisted unchanged next to the itinerary; only `nights` is recomputed
    when days are added or removed.
    """

    model_config = ConfigDict(frozen=True)

    country: Annotated[str, Field(min_length=1)]
    city: Annotated[str, Field(min_length=1)]
    nights: Annotated[int, Field(ge=1, le=14)]
    travel_styles: list[str] = Field(default_factory=list)
    budget_mode: BudgetMode = BudgetMode.standard
    companion_type: CompanionType = CompanionType.friends
    pace: PaceMode = PaceMode.standard
    day_start_hour: Annotated[int, Field(ge=0, le=23)] = 9
    day_end_hour: Annotated[int, Field(ge=1, le=24)] = 21
    city_lat: float | None = Field(default=None, ge=-90, le=90)
    city_lon: float | None = Field(default=None, ge=-180, le=180)
    city_en: str | None = None
    country_code: str | None = None

    @field_validator("country", "city")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip and reject blank place names."""
        v = v.strip()
        if not v:
            raise ValueError("country and city must not be blank")
        return v

    @field_validator("travel_styles")
    @classmethod
    def dedupe_styles(cls, v: list[str]) -> list[str]:
        """Drop blanks and duplicates, keeping first occurrence."""
        return list(dict.fromkeys(s.strip() for s in v if s.strip()))

    @model_validator(mode="after")
    def validate_hours(self) -> "TripParameters":
        """Ensure the day ends after it starts."""
        if self.day_end_hour <= self.day_start_hour:
            raise ValueError(
                f"day_end_hour ({self.day_end_hour}) must be after day_start_hour ({self.day_start_hour})"
            )
        return self

    @property
    def days(self) -> int:
        return self.nights + 1

    @property
    def style_list(self) -> str:
        return ", ".join(self.travel_styles) if self.travel_styles else "일반 관광"
