"""Structured (JSON) itinerary path.

The generation backend can return typed day/activity JSON instead of
markdown. Parsing is all-or-nothing: a single invalid field rejects the
whole payload. Valid payloads are clamped and projected onto the same
markdown layout the rest of the package edits.
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from backend.app.itinerary.vocabulary import (
    SECTION_LABELS,
    SUBSECTION_PREFIX,
    SectionLabel,
    format_day_header,
    placeholder_for,
)
from backend.app.models.itinerary import Activity, DayPlan, ItineraryResponse, StructuredDayAnalysis

logger = logging.getLogger(__name__)

STAY_MINUTES_RANGE = (30, 240)
MOVE_MINUTES_RANGE = (0, 180)

MAX_DAY_MINUTES = 720
MAX_MOVE_MINUTES = 240
MAX_MOVE_RATIO = 0.4
PACKED_ACTIVITY_COUNT = 10

WARN_DAY_TOO_LONG = "하루 총 일정이 12시간을 초과합니다."
WARN_MOVE_TOO_LONG = "하루 이동 시간이 과도합니다."
WARN_MOVE_RATIO = "이동 비율이 높아 일정이 비효율적일 수 있습니다."
WARN_TOO_MANY_ACTIVITIES = "활동 수가 많아 일정이 빡빡할 수 있습니다."

MEAL_KEYWORDS = ("food", "meal", "restaurant", "lunch", "dinner", "식사", "음식", "맛집", "식당")
DEFAULT_THEME = "자유 일정"

_NON_MEAL_ROTATION = (
    SectionLabel.morning.value,
    SectionLabel.afternoon.value,
    SectionLabel.night.value,
)
_MEAL_ROTATION = (SectionLabel.lunch.value, SectionLabel.dinner.value)
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def is_meal(activity_type: str) -> bool:
    """Whether an activity type names a meal."""
    lowered = activity_type.lower()
    return any(keyword in lowered for keyword in MEAL_KEYWORDS)


def sanitize_activity(raw: Mapping[str, Any], *, is_last: bool = False) -> Activity:
    """Clamp durations of a structurally valid activity.

    Stay is kept in [30, 240] and move in [0, 180], both rounded; the last
    activity of a day never has a move. Non-finite coordinates are dropped.
    """
    stay = _clamp(_round_half_up(raw["stayMinutes"]), *STAY_MINUTES_RANGE)
    move = 0 if is_last else _clamp(_round_half_up(raw["moveMinutesToNext"]), *MOVE_MINUTES_RANGE)
    lat = raw.get("lat")
    lng = raw.get("lng")
    return Activity(
        name=raw["name"].strip(),
        type=raw["type"].strip(),
        stay_minutes=stay,
        move_minutes_to_next=move,
        lat=float(lat) if _is_finite_number(lat) else None,
        lng=float(lng) if _is_finite_number(lng) else None,
    )


def _is_valid_activity(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and _is_non_empty_string(raw.get("name"))
        and _is_non_empty_string(raw.get("type"))
        and _is_finite_number(raw.get("stayMinutes"))
        and _is_finite_number(raw.get("moveMinutesToNext"))
    )


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def parse_itinerary_response(raw_json: str) -> ItineraryResponse | None:
    """Validate generated JSON into an ItineraryResponse.

    Returns None on any structural violation; no partial result is built.
    """
    try:
        data = json.loads(_strip_code_fence(raw_json))
    except (TypeError, ValueError, RecursionError):
        logger.warning("Structured itinerary is not valid JSON")
        return None

    if not isinstance(data, dict) or not isinstance(data.get("days"), list):
        logger.warning("Structured itinerary has no days array")
        return None

    days: list[DayPlan] = []
    for raw_day in data["days"]:
        if not isinstance(raw_day, dict):
            return None
        day_number = raw_day.get("day")
        theme = raw_day.get("theme")
        activities = raw_day.get("activities")
        if not _is_integer(day_number) or not isinstance(theme, str) or not isinstance(activities, list):
            logger.warning(f"Structured itinerary day rejected: {raw_day.get('day')!r}")
            return None
        if not all(_is_valid_activity(activity) for activity in activities):
            logger.warning(f"Structured itinerary activity rejected on day {day_number}")
            return None

        last = len(activities) - 1
        days.append(
            DayPlan(
                day=int(day_number),
                theme=theme,
                activities=[
                    sanitize_activity(activity, is_last=i == last)
                    for i, activity in enumerate(activities)
                ],
            )
        )

    return ItineraryResponse(days=days)


def _single_line(text: str) -> str:
    return " ".join(text.split())


def format_activity_line(activity: Activity) -> str:
    """List line for one activity; the bold name is what geocoding picks up."""
    name = _single_line(activity.name).replace("*", "")
    parts = [f"**{name}**", _single_line(activity.type), f"체류 {activity.stay_minutes}분"]
    if activity.move_minutes_to_next > 0:
        parts.append(f"이동 {activity.move_minutes_to_next}분")
    return "- " + " · ".join(parts)


def bucket_activities(day: DayPlan) -> dict[str, list[Activity]]:
    """Distribute a day's activities over the five sections.

    Meals alternate lunch, dinner; everything else rotates morning,
    afternoon, night, both in input order.
    """
    buckets: dict[str, list[Activity]] = {label: [] for label in SECTION_LABELS}
    meals = 0
    others = 0
    for activity in day.activities:
        if is_meal(activity.type):
            buckets[_MEAL_ROTATION[meals % 2]].append(activity)
            meals += 1
        else:
            buckets[_NON_MEAL_ROTATION[others % 3]].append(activity)
            others += 1
    return buckets


def build_markdown_from_itinerary(itinerary: ItineraryResponse) -> str:
    """Render a structured itinerary in the day/section markdown layout.

    Days are sorted by number. The four required sections always appear
    (with a placeholder when empty); night only when it has activities.
    """
    blocks: list[str] = []
    for day in sorted(itinerary.days, key=lambda d: d.day):
        buckets = bucket_activities(day)
        theme = _single_line(day.theme) or DEFAULT_THEME
        lines = [format_day_header(day.day, theme)]
        for label in SECTION_LABELS:
            activities = buckets[label]
            if label == SectionLabel.night.value and not activities:
                continue
            lines.append(f"{SUBSECTION_PREFIX}{label}")
            if activities:
                lines.extend(format_activity_line(activity) for activity in activities)
            else:
                lines.append(placeholder_for(label))
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def analyze_structured_day(day: DayPlan) -> StructuredDayAnalysis:
    """Time totals and feasibility warnings from typed fields."""
    total_stay = sum(activity.stay_minutes for activity in day.activities)
    total_move = sum(activity.move_minutes_to_next for activity in day.activities)
    total_minutes = total_stay + total_move
    move_ratio = total_move / total_minutes if total_minutes > 0 else 0.0

    warnings: list[str] = []
    if total_minutes > MAX_DAY_MINUTES:
        warnings.append(WARN_DAY_TOO_LONG)
    if total_move > MAX_MOVE_MINUTES:
        warnings.append(WARN_MOVE_TOO_LONG)
    if total_minutes > 0 and move_ratio > MAX_MOVE_RATIO:
        warnings.append(WARN_MOVE_RATIO)
    if len(day.activities) >= PACKED_ACTIVITY_COUNT:
        warnings.append(WARN_TOO_MANY_ACTIVITIES)

    return StructuredDayAnalysis(
        total_stay=total_stay,
        total_move=total_move,
        total_minutes=total_minutes,
        move_ratio=move_ratio,
        warnings=warnings,
    )
