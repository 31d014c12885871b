"""Data derived from itinerary markdown: place names and feasibility hints.

Everything here is pattern counting over text. Move times come from the
`이동 N분` annotations the generator is asked to write, not from real
travel-time data.
"""

import re

from backend.app.itinerary.document import extract_days
from backend.app.itinerary.sanitize import sanitize_day
from backend.app.itinerary.vocabulary import (
    BOLD_RE,
    BULLET_RE,
    LINK_RE,
    LIST_ITEM_RE,
    MEAL_PLACEHOLDER,
    MOVE_RE,
    PLACE_PLACEHOLDER,
    SUBSECTION_LINE_RE,
    subsection_title,
)
from backend.app.models.geo import PlaceCandidate
from backend.app.models.itinerary import DayAnalysis, DayFeasibility, ItineraryAnalysis

MAX_PLACE_CANDIDATES = 20

PACKED_ITEM_COUNT = 12
HEAVY_MOVE_MINUTES = 180
CROWDED_SECTION_COUNT = 6
CROWDED_ITEM_COUNT = 10
MISSING_MOVE_HINTS = 3

WARN_TOO_PACKED = "방문 장소가 많아 일정이 빡빡할 수 있어요."
WARN_TOO_MUCH_TRANSIT = "하루 총 이동 시간이 길어요."
WARN_TOO_MANY_SECTIONS = "섹션 수 대비 활동량이 많아요."
WARN_MISSING_MOVE_HINTS = "이동시간 표기가 부족해 현실성 판단이 어려워요."

_LINK_SPAN_RE = re.compile(r"\[.*?\]\(.*?\)")
_SEPARATOR_RE = re.compile(r"[.·|-]")
_PLACEHOLDERS = frozenset({PLACE_PLACEHOLDER, MEAL_PLACEHOLDER})


def place_name_from_line(line: str) -> str:
    """Best-effort place name of one list line.

    Prefers a bold span, then link text, then the text before the first
    separator once links and move annotations are removed.
    """
    trimmed = line.strip()
    bold = BOLD_RE.search(trimmed)
    if bold and bold.group(1).strip():
        return bold.group(1).strip()

    link = LINK_RE.search(trimmed)
    if link and link.group(1).strip():
        return link.group(1).strip()

    plain = BULLET_RE.sub("", trimmed)
    plain = _LINK_SPAN_RE.sub("", plain)
    plain = MOVE_RE.sub("", plain)
    return _SEPARATOR_RE.split(plain, maxsplit=1)[0].strip()


def extract_place_candidates(markdown: str) -> list[str]:
    """Unique place names of all list items, capped for one geocoding batch."""
    names: list[str] = []
    for line in markdown.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith("- ") or trimmed in _PLACEHOLDERS:
            continue
        name = place_name_from_line(trimmed)
        if name:
            names.append(name)
    return list(dict.fromkeys(names))[:MAX_PLACE_CANDIDATES]


def extract_place_candidates_with_meta(markdown: str) -> list[PlaceCandidate]:
    """Place names tagged with day, section and a per-day running order.

    The order counts across all sections of a day so map markers can be
    re-attached after lookup.
    """
    candidates: list[PlaceCandidate] = []
    for day in extract_days(markdown):
        section: str | None = None
        order = 0
        for line in day.raw.split("\n")[1:]:
            trimmed = line.strip()
            title = subsection_title(trimmed)
            if title is not None:
                section = title
                continue
            if trimmed.startswith("#") or trimmed in _PLACEHOLDERS:
                continue
            if not BULLET_RE.match(trimmed) and not BOLD_RE.search(trimmed):
                continue

            name = place_name_from_line(trimmed)
            if not name:
                continue
            order += 1
            candidates.append(
                PlaceCandidate(name=name, day_num=day.number, order=order, section=section)
            )
    return candidates


def analyze_day(raw: str) -> DayAnalysis:
    """Feasibility heuristics for one day's text."""
    move_hints = [int(m.group(1)) for m in MOVE_RE.finditer(raw)]
    move_minutes = sum(move_hints)
    item_count = len(LIST_ITEM_RE.findall(raw))
    section_count = len(SUBSECTION_LINE_RE.findall(raw))
    missing_move_hints = item_count - len(move_hints)

    warnings: list[str] = []
    if item_count >= PACKED_ITEM_COUNT:
        warnings.append(WARN_TOO_PACKED)
    if move_minutes >= HEAVY_MOVE_MINUTES:
        warnings.append(WARN_TOO_MUCH_TRANSIT)
    if section_count >= CROWDED_SECTION_COUNT and item_count >= CROWDED_ITEM_COUNT:
        warnings.append(WARN_TOO_MANY_SECTIONS)
    if missing_move_hints >= MISSING_MOVE_HINTS:
        warnings.append(WARN_MISSING_MOVE_HINTS)

    return DayAnalysis(
        move_minutes=move_minutes,
        item_count=item_count,
        section_count=section_count,
        warnings=warnings,
    )


def analyze_itinerary(markdown: str) -> ItineraryAnalysis:
    """Analyze every sanitized day and flatten warnings as `Day N: ...`."""
    days = [
        DayFeasibility(
            day_num=day.number,
            title=day.title,
            analysis=analyze_day(sanitize_day(day.raw, day.number)),
        )
        for day in extract_days(markdown)
    ]
    warnings = [
        f"Day {day.day_num}: {warning}" for day in days for warning in day.analysis.warnings
    ]
    return ItineraryAnalysis(days=days, warnings=warnings)
