"""Section vocabulary and structural patterns for itinerary markdown.

Generated itineraries follow a fixed layout:

    ## Day 1 - Title
    ### 오전
    - **Place** short note **이동 15분**
    ### 점심
    ...

Every parser in this package matches against the patterns defined here.
"""

import re
from enum import Enum


class SectionLabel(str, Enum):
    """Recognized day subsections, in canonical order."""

    morning = "오전"
    lunch = "점심"
    afternoon = "오후"
    dinner = "저녁"
    night = "밤"


SECTION_LABELS: tuple[str, ...] = tuple(label.value for label in SectionLabel)

# night is optional and left out of empty days
TEMPLATE_ORDER: tuple[str, ...] = (
    SectionLabel.morning.value,
    SectionLabel.lunch.value,
    SectionLabel.afternoon.value,
    SectionLabel.dinner.value,
)

MEAL_SECTIONS: frozenset[str] = frozenset({SectionLabel.lunch.value, SectionLabel.dinner.value})

NOTES_LABEL = "메모"
NEW_DAY_TITLE = "새 일정"

PLACE_PLACEHOLDER = "- 장소를 입력하세요"
MEAL_PLACEHOLDER = "- 식사할 곳을 입력하세요"

# Day header must stay compatible with stored documents.
DAY_HEADER_RE = re.compile(r"^## Day (\d+)\s*(?:-|–|—|·)\s*(.+)$", re.MULTILINE)
DAY_HEADER_LINE_RE = re.compile(r"^## Day \d+\s*(?:-|[–—·])\s*[^\n]+\n?")
DAY_HEADER_PREFIX = "## Day "
SUBSECTION_PREFIX = "### "

LIST_ITEM_RE = re.compile(r"^- ", re.MULTILINE)
SUBSECTION_LINE_RE = re.compile(r"^### ", re.MULTILINE)
BULLET_RE = re.compile(r"^[-*•]\s+")
BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
MOVE_RE = re.compile(r"이동\s*(\d+)\s*분")

_LABEL_TRAILER_RE = re.compile(r"[:：\-–—]+$")


def is_section_label(text: str) -> bool:
    """Return True when text is exactly one of the vocabulary labels."""
    return text in SECTION_LABELS


def placeholder_for(label: str) -> str:
    """Placeholder body for a section that has no content."""
    return MEAL_PLACEHOLDER if label in MEAL_SECTIONS else PLACE_PLACEHOLDER


def subsection_title(line: str) -> str | None:
    """Return the title of a `### ` header line, or None."""
    trimmed = line.strip()
    if not trimmed.startswith(SUBSECTION_PREFIX):
        return None
    return trimmed[len(SUBSECTION_PREFIX) :].strip()


def label_line_title(line: str) -> str | None:
    """Return the vocabulary label a line stands for, marked or bare.

    Recognizes `### 점심`, bare `점심` and `점심:` style lines.
    """
    title = subsection_title(line)
    if title is not None:
        return title if is_section_label(title) else None

    trimmed = line.strip()
    normalized = _LABEL_TRAILER_RE.sub("", trimmed).strip()
    if is_section_label(normalized):
        return normalized
    return None


def label_tail_glyphs(extra_label: str | None = None) -> frozenset[str]:
    """Last characters of multi-character labels.

    Generators sometimes leak the final glyph of a label (점심 -> 심) onto
    its own line right below the header.
    """
    tails = {label[-1] for label in SECTION_LABELS if len(label) > 1}
    if extra_label and len(extra_label) > 1:
        tails.add(extra_label[-1])
    return frozenset(tails)


def format_day_header(day_number: int, title: str) -> str:
    """Canonical day header line."""
    return f"{DAY_HEADER_PREFIX}{day_number} - {title}"
