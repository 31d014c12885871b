"""Tests for the day repair pass."""

import pytest

from backend.app.itinerary.document import extract_subsections
from backend.app.itinerary.sanitize import (
    clean_section_body,
    dedupe_sections,
    empty_day_block,
    normalize_bare_labels,
    sanitize_day,
    strip_label_tail_artifacts,
)

MESSY_DAYS = [
    "## Day 1 - A\n### 오전\n- old\n### 점심\n- lunch\n### 오전\n- new",
    "## Day 1 - A\n점심\n- 국밥\n오후:\n- 공원",
    "## Day 1 - A\n### 점심\n심\n- 국밥\n### 저녁\n녁\n\n- 회",
    "## Day 1 - A\r\n### 오전\r\n- a\r\n\r\n\r\n### 밤\r\n",
    "## Day 1 - A\n오늘은 비가 와요.\n### 오전\n### 쇼핑 팁\n- 면세점\n### 오후\n- 박물관",
    "## Day 1 - A",
    "### 오전\n- 헤더 없는 날",
    "",
]


def test_normalize_bare_labels() -> None:
    """Test bare label lines get a section marker."""
    assert normalize_bare_labels("## Day 1 - A\n점심\n- 국밥") == "## Day 1 - A\n### 점심\n- 국밥"
    assert normalize_bare_labels("- 점심 뭐 먹지") == "- 점심 뭐 먹지"


def test_dedupe_sections_keeps_last_occurrence() -> None:
    """Test a repeated label keeps only its last body."""
    sections = extract_subsections("### 오전\n- old\n### 점심\n- lunch\n### 오전\n- new\n### 메모\n- a\n### 메모\n- b")

    deduped = dedupe_sections(sections)

    assert [(s.label, s.body) for s in deduped] == [
        ("점심", "- lunch"),
        ("오전", "- new"),
        ("메모", "- a"),
        ("메모", "- b"),
    ]


def test_sanitize_day_last_duplicate_wins_in_first_position() -> None:
    """Test deduped sections stay in first-appearance order."""
    result = sanitize_day(MESSY_DAYS[0], 1)

    assert result == "## Day 1 - A\n\n### 오전\n- new\n\n### 점심\n- lunch"


def test_sanitize_day_promotes_bare_labels() -> None:
    """Test an exact bare label line becomes a section header."""
    result = sanitize_day("## Day 1 - A\n점심\n- 국밥", 1)

    assert result == "## Day 1 - A\n\n### 점심\n- 국밥"


def test_sanitize_day_drops_colon_suffixed_label_lines() -> None:
    """Test a `label:` line is removed and its items stay in the enclosing section."""
    result = sanitize_day("## Day 1 - A\n### 오전\n- a\n오후:\n- b", 1)

    assert result == "## Day 1 - A\n\n### 오전\n- a\n- b"


def test_sanitize_day_fills_empty_sections_with_placeholders() -> None:
    """Test empty sections get meal or place placeholders."""
    result = sanitize_day("## Day 1 - A\n### 오전\n### 점심", 1)

    assert result == "## Day 1 - A\n\n### 오전\n- 장소를 입력하세요\n\n### 점심\n- 식사할 곳을 입력하세요"


def test_sanitize_day_drops_leaked_label_glyphs() -> None:
    """Test a single leaked label glyph below a header is removed."""
    result = sanitize_day(MESSY_DAYS[2], 1)

    assert result == "## Day 1 - A\n\n### 점심\n- 국밥\n\n### 저녁\n- 회"


def test_sanitize_day_keeps_preamble_and_unrecognized_sections_last() -> None:
    """Test free text stays after the header and unknown sections move to the end."""
    result = sanitize_day(MESSY_DAYS[4], 1)

    assert result == (
        "## Day 1 - A\n\n오늘은 비가 와요.\n\n"
        "### 오전\n- 장소를 입력하세요\n\n"
        "### 오후\n- 박물관\n\n"
        "### 쇼핑 팁\n- 면세점"
    )


def test_sanitize_day_without_sections_uses_template() -> None:
    """Test a day with no sections gets the four template sections."""
    assert sanitize_day("## Day 1 - A", 1) == empty_day_block(1, "A")


def test_empty_day_block() -> None:
    """Test the empty template layout."""
    assert empty_day_block(3, "새 일정") == (
        "## Day 3 - 새 일정\n\n"
        "### 오전\n- 장소를 입력하세요\n\n"
        "### 점심\n- 식사할 곳을 입력하세요\n\n"
        "### 오후\n- 장소를 입력하세요\n\n"
        "### 저녁\n- 식사할 곳을 입력하세요"
    )


@pytest.mark.parametrize("raw", MESSY_DAYS)
def test_sanitize_day_is_idempotent(raw: str) -> None:
    """Test sanitizing twice equals sanitizing once."""
    once = sanitize_day(raw, 1)

    assert sanitize_day(once, 1) == once


@pytest.mark.parametrize("raw", MESSY_DAYS)
def test_sanitize_day_has_unique_recognized_labels(raw: str) -> None:
    """Test every recognized label appears at most once after sanitizing."""
    labels = [s.label for s in extract_subsections(sanitize_day(raw, 1)) if s.is_recognized]

    assert len(labels) == len(set(labels))


def test_strip_label_tail_artifacts_only_before_content() -> None:
    """Test glyphs are dropped only before the first content line."""
    lines = ["심", "- 국밥", "심"]

    assert strip_label_tail_artifacts(lines, "점심") == ["- 국밥", "심"]


def test_strip_label_tail_artifacts_uses_extra_label() -> None:
    """Test the tail of a non-vocabulary label is also recognized."""
    assert strip_label_tail_artifacts(["팁", "- 면세점"], "쇼핑 팁") == ["- 면세점"]


def test_clean_section_body_removes_label_lines() -> None:
    """Test label lines repeated inside a body are removed."""
    assert clean_section_body("### 점심\n- 국밥\n점심:", "점심") == "- 국밥"
