"""Tests for the trip budget estimate."""

import pytest

from backend.app.itinerary.budget import (
    BOOSTED_STYLES,
    RESTFUL_STYLE,
    CostRange,
    estimate_budget,
    format_manwon,
)
from backend.app.models.common import TRAVEL_STYLES, BudgetMode, CompanionType, PaceMode
from backend.app.models.intent import TripParameters


def make_params(**overrides) -> TripParameters:
    values = {"country": "대한민국", "city": "서울", "nights": 2}
    values.update(overrides)
    return TripParameters(**values)


def test_default_estimate() -> None:
    """Test standard budget for friends at standard pace over a 12-hour day."""
    estimate = estimate_budget(make_params())

    assert estimate.categories.lodging == CostRange(min=76000, max=152000)
    assert estimate.categories.food == CostRange(min=39900, max=89775)
    assert estimate.categories.transport == CostRange(min=14250, max=38000)
    assert estimate.categories.activities == CostRange(min=19000, max=57000)
    assert estimate.per_day == CostRange(min=149150, max=336775)
    assert estimate.total == CostRange(min=447450, max=1010325)


def test_budget_solo_relaxed_restful_short_day() -> None:
    """Test every multiplier below one applies."""
    params = make_params(
        budget_mode=BudgetMode.budget,
        companion_type=CompanionType.solo,
        pace=PaceMode.relaxed,
        travel_styles=["휴식"],
        day_start_hour=10,
        day_end_hour=18,
    )

    estimate = estimate_budget(params)

    assert estimate.categories.lodging == CostRange(min=40000, max=90000)
    assert estimate.categories.food == CostRange(min=23750, max=57000)
    assert estimate.categories.transport == CostRange(min=9500, max=23750)
    assert estimate.categories.activities == CostRange(min=9025, max=27075)
    assert estimate.per_day == CostRange(min=82275, max=197825)


def test_explicit_day_count() -> None:
    """Test the total follows the given day count instead of nights + 1."""
    estimate = estimate_budget(make_params(), days=5)

    assert estimate.total == CostRange(min=149150 * 5, max=336775 * 5)


def test_boosted_style_wins_over_restful() -> None:
    """Test shopping or adventure raises activities even alongside rest."""
    params = make_params(companion_type=CompanionType.solo, travel_styles=["휴식", "모험"])

    estimate = estimate_budget(params)

    assert estimate.categories.activities == CostRange(min=22000, max=66000)


def test_accepts_english_enum_names() -> None:
    """Test API callers may send member names instead of Korean values."""
    params = TripParameters.model_validate(
        {"country": "일본", "city": "도쿄", "nights": 1, "budgetMode": "premium", "companionType": "solo"}
    )

    assert estimate_budget(params).categories.lodging == CostRange(min=180000, max=350000)


@pytest.mark.parametrize(
    ("cost", "multiplier", "expected"),
    [
        (CostRange(min=10001, max=20003), 0.5, CostRange(min=5001, max=10002)),
        (CostRange(min=5, max=15), 0.5, CostRange(min=3, max=8)),
        (CostRange(min=2, max=6), 0.25, CostRange(min=1, max=2)),
        (CostRange(min=40000, max=90000), 0.95, CostRange(min=38000, max=85500)),
    ],
)
def test_cost_range_scaled_rounds_half_up(cost: CostRange, multiplier: float, expected: CostRange) -> None:
    """Test scaling rounds to whole won with halves rounded up."""
    assert cost.scaled(multiplier) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(150000, "15만원"), (125000, "12.5만원"), (0, "0만원"), (12000, "1.2만원")],
)
def test_format_manwon(value: int, expected: str) -> None:
    """Test amounts are shown in units of 10,000 won."""
    assert format_manwon(value) == expected


def test_style_names_come_from_the_style_vocabulary() -> None:
    """Test budget style adjustments reference selectable travel styles."""
    assert BOOSTED_STYLES <= set(TRAVEL_STYLES)
    assert RESTFUL_STYLE in TRAVEL_STYLES
