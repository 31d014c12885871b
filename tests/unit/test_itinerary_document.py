"""Tests for parsing itinerary markdown into a document tree."""

from backend.app.itinerary.document import (
    extract_days,
    extract_subsections,
    find_day_range,
    parse_document,
    preamble_lines,
    try_parse,
)

SAMPLE = """## Day 1 - 도착과 시내 산책
### 오전
- **경복궁** 궁궐 산책 **이동 15분**
### 점심
- **토속촌 삼계탕** 점심 식사
### 오후
- **북촌 한옥마을** 골목 산책 **이동 20분**
### 저녁
- **광장시장** 빈대떡

## Day 2 - 남산과 명동
### 오전
- **남산타워** 전망대
### 점심
- **명동교자** 칼국수
### 오후
- **명동 거리** 쇼핑
### 저녁
- **을지로 노가리 골목** 맥주
"""


def test_serialize_reproduces_source_exactly() -> None:
    """Test an unmodified document serializes back byte for byte."""
    assert parse_document(SAMPLE).serialize() == SAMPLE


def test_serialize_keeps_prefix_and_irregular_spacing() -> None:
    """Test prefix text and uneven gaps between days survive a round trip."""
    markdown = "# 서울 여행\n\n메모입니다.\n\n" + SAMPLE.replace("\n\n## Day 2", "\n\n\n\n## Day 2")

    document = parse_document(markdown)

    assert document.prefix == "# 서울 여행\n\n메모입니다.\n\n"
    assert document.serialize() == markdown


def test_days_carry_number_and_title() -> None:
    """Test day headers are read into number and title."""
    days = extract_days(SAMPLE)

    assert [day.number for day in days] == [1, 2]
    assert [day.title for day in days] == ["도착과 시내 산책", "남산과 명동"]
    assert days[0].header_line == "## Day 1 - 도착과 시내 산책"
    assert days[0].raw.endswith("- **광장시장** 빈대떡")


def test_header_accepts_dash_variants() -> None:
    """Test en dash, em dash and middle dot separators are recognized."""
    markdown = "## Day 1 – 하나\n- a\n\n## Day 2 — 둘\n- b\n\n## Day 3 · 셋\n- c"

    days = extract_days(markdown)

    assert [(day.number, day.title) for day in days] == [(1, "하나"), (2, "둘"), (3, "셋")]


def test_header_without_title_is_not_a_day() -> None:
    """Test a header with no title is treated as plain text."""
    assert extract_days("## Day 1\n### 오전\n- a") == []


def test_try_parse_reports_unstructured_text() -> None:
    """Test text without day headers parses as prefix only."""
    result = try_parse("그냥 메모입니다.")

    assert result.ok is False
    assert result.document.days == ()
    assert result.document.prefix == "그냥 메모입니다."


def test_find_day_range() -> None:
    """Test a day's span is located by number."""
    day_range = find_day_range(SAMPLE, 2)

    assert day_range is not None
    assert SAMPLE[day_range.start :].startswith("## Day 2 - 남산과 명동")
    assert day_range.end == len(SAMPLE)
    assert day_range.raw == SAMPLE[day_range.start :].rstrip()


def test_find_day_range_missing_day() -> None:
    """Test an absent day number yields None."""
    assert find_day_range(SAMPLE, 3) is None
    assert find_day_range("", 1) is None


def test_day_lookup_by_number() -> None:
    """Test index and day lookups by day number."""
    document = parse_document(SAMPLE)

    assert document.index_of(2) == 1
    assert document.index_of(7) is None
    assert document.day(1) is not None
    assert document.day(7) is None
    assert document.day_numbers == [1, 2]


def test_extract_subsections() -> None:
    """Test a day splits into its `###` sections."""
    day = extract_days(SAMPLE)[0]

    sections = extract_subsections(day.raw)

    assert [section.label for section in sections] == ["오전", "점심", "오후", "저녁"]
    assert sections[0].body == "- **경복궁** 궁궐 산책 **이동 15분**"
    assert sections[0].raw == "### 오전\n- **경복궁** 궁궐 산책 **이동 15분**"
    assert all(section.is_recognized for section in sections)
    assert day.sections == tuple(sections)


def test_unrecognized_subsection_is_kept() -> None:
    """Test sections outside the vocabulary are parsed but flagged."""
    sections = extract_subsections("## Day 1 - A\n### 오전\n- a\n### 쇼핑 팁\n- 면세점")

    assert [section.label for section in sections] == ["오전", "쇼핑 팁"]
    assert sections[1].is_recognized is False


def test_preamble_lines() -> None:
    """Test lines between header and first section are the preamble."""
    raw = "## Day 1 - A\n오늘은 비 예보가 있어요.\n### 오전\n- a"

    assert preamble_lines(raw) == ["오늘은 비 예보가 있어요."]
