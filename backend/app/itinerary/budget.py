"""Rough trip budget estimate from trip parameters (KRW).

Base per-day ranges by budget mode, scaled by companion, pace, travel style
and active hours. This is an estimate shown next to the plan, not a quote.
"""

import math

from backend.app.models.common import BudgetMode, CamelModel, CompanionType, PaceMode
from backend.app.models.intent import TripParameters


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class CostRange(CamelModel):
    """Inclusive min/max amount in KRW."""

    min: int
    max: int

    def scaled(self, multiplier: float) -> "CostRange":
        return CostRange(min=_round_half_up(self.min * multiplier), max=_round_half_up(self.max * multiplier))


class CostCategories(CamelModel):
    """Per-day cost ranges by category."""

    lodging: CostRange
    food: CostRange
    transport: CostRange
    activities: CostRange


class BudgetEstimate(CamelModel):
    """Per-day and whole-trip cost ranges."""

    per_day: CostRange
    total: CostRange
    categories: CostCategories


BASE_RANGES: dict[BudgetMode, CostCategories] = {
    BudgetMode.budget: CostCategories(
        lodging=CostRange(min=40000, max=90000),
        food=CostRange(min=25000, max=60000),
        transport=CostRange(min=10000, max=25000),
        activities=CostRange(min=10000, max=30000),
    ),
    BudgetMode.standard: CostCategories(
        lodging=CostRange(min=80000, max=160000),
        food=CostRange(min=40000, max=90000),
        transport=CostRange(min=15000, max=40000),
        activities=CostRange(min=20000, max=60000),
    ),
    BudgetMode.premium: CostCategories(
        lodging=CostRange(min=180000, max=350000),
        food=CostRange(min=70000, max=150000),
        transport=CostRange(min=25000, max=70000),
        activities=CostRange(min=40000, max=120000),
    ),
}

COMPANION_MULTIPLIERS: dict[CompanionType, float] = {
    CompanionType.solo: 1.0,
    CompanionType.couple: 0.9,
    CompanionType.friends: 0.95,
    CompanionType.family: 1.05,
    CompanionType.with_children: 1.1,
}

PACE_MULTIPLIERS: dict[PaceMode, float] = {
    PaceMode.relaxed: 0.95,
    PaceMode.standard: 1.0,
    PaceMode.packed: 1.1,
}

BOOSTED_STYLES = frozenset({"쇼핑·라이프", "모험"})
RESTFUL_STYLE = "휴식"


def _style_multiplier(travel_styles: list[str]) -> float:
    if BOOSTED_STYLES.intersection(travel_styles):
        return 1.1
    if RESTFUL_STYLE in travel_styles:
        return 0.95
    return 1.0


def _food_multiplier(day_start_hour: int, day_end_hour: int) -> float:
    hours_multiplier = max(0.85, min(1.2, (day_end_hour - day_start_hour) / 10))
    if hours_multiplier >= 1.1:
        return 1.05
    if hours_multiplier <= 0.9:
        return 0.95
    return 1.0


def estimate_budget(params: TripParameters, days: int | None = None) -> BudgetEstimate:
    """Estimate cost ranges for the trip; `days` defaults to nights + 1."""
    day_count = params.days if days is None else days
    base = BASE_RANGES[params.budget_mode]
    companion = COMPANION_MULTIPLIERS[params.companion_type]
    pace = PACE_MULTIPLIERS[params.pace]

    categories = CostCategories(
        lodging=base.lodging.scaled(companion),
        food=base.food.scaled(companion * _food_multiplier(params.day_start_hour, params.day_end_hour)),
        transport=base.transport.scaled(companion * pace),
        activities=base.activities.scaled(companion * pace * _style_multiplier(params.travel_styles)),
    )
    ranges = (categories.lodging, categories.food, categories.transport, categories.activities)
    per_day = CostRange(min=sum(r.min for r in ranges), max=sum(r.max for r in ranges))

    return BudgetEstimate(
        per_day=per_day,
        total=CostRange(min=per_day.min * day_count, max=per_day.max * day_count),
        categories=categories,
    )


def format_manwon(value: int) -> str:
    """Format an amount in units of 10,000 won (`12.5만원`)."""
    man = value / 10000
    rounded = f"{man:.0f}" if man.is_integer() else f"{man:.1f}"
    return f"{rounded}만원"
