"""Tests for the structured (JSON) itinerary path."""

import json

import pytest

from backend.app.itinerary.document import extract_days
from backend.app.itinerary.structured import (
    WARN_DAY_TOO_LONG,
    WARN_MOVE_RATIO,
    WARN_MOVE_TOO_LONG,
    WARN_TOO_MANY_ACTIVITIES,
    analyze_structured_day,
    bucket_activities,
    build_markdown_from_itinerary,
    format_activity_line,
    is_meal,
    parse_itinerary_response,
)
from backend.app.models.itinerary import Activity, DayPlan, ItineraryResponse


def activity_json(name: str, type_: str = "관광", stay: float = 60, move: float = 10, **extra) -> dict:
    return {"name": name, "type": type_, "stayMinutes": stay, "moveMinutesToNext": move, **extra}


def payload(*days: dict) -> str:
    return json.dumps({"days": list(days)}, ensure_ascii=False)


def make_activity(name: str, type_: str = "관광", stay: int = 60, move: int = 10) -> Activity:
    return Activity(name=name, type=type_, stay_minutes=stay, move_minutes_to_next=move)


class TestParseItineraryResponse:
    """Test parse_itinerary_response."""

    def test_valid_payload_is_clamped(self) -> None:
        """Test durations are rounded and clamped, and the last move is zeroed."""
        raw = payload(
            {
                "day": 1,
                "theme": "시내",
                "activities": [
                    activity_json(" 경복궁 ", stay=20, move=200),
                    activity_json("토속촌", "식사", stay=90.4, move=15),
                ],
            }
        )

        itinerary = parse_itinerary_response(raw)

        assert itinerary is not None
        first, last = itinerary.days[0].activities
        assert (first.name, first.stay_minutes, first.move_minutes_to_next) == ("경복궁", 30, 180)
        assert (last.stay_minutes, last.move_minutes_to_next) == (90, 0)

    def test_rounds_half_up(self) -> None:
        """Test .5 minutes round up."""
        raw = payload(
            {
                "day": 1,
                "theme": "",
                "activities": [activity_json("a", stay=60.5, move=12.5), activity_json("b")],
            }
        )

        activity = parse_itinerary_response(raw).days[0].activities[0]

        assert (activity.stay_minutes, activity.move_minutes_to_next) == (61, 13)

    def test_accepts_code_fence(self) -> None:
        """Test a fenced JSON block is unwrapped."""
        raw = "```json\n" + payload({"day": 2.0, "theme": "t", "activities": []}) + "\n```"

        itinerary = parse_itinerary_response(raw)

        assert itinerary is not None
        assert itinerary.days[0].day == 2

    def test_coordinates(self) -> None:
        """Test finite coordinates are kept and others dropped."""
        raw = payload(
            {
                "day": 1,
                "theme": "t",
                "activities": [
                    activity_json("a", lat=37.57, lng=126.97),
                    activity_json("b", lat="37.5", lng=None),
                ],
            }
        )

        first, second = parse_itinerary_response(raw).days[0].activities

        assert (first.lat, first.lng) == (37.57, 126.97)
        assert (second.lat, second.lng) == (None, None)

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            "[" * 100000,
            '{"days": ' + "[" * 100000 + "]" * 100000 + "}",
            '{"days": {}}',
            payload("day one"),
            payload({"day": "1", "theme": "t", "activities": []}),
            payload({"day": 1.5, "theme": "t", "activities": []}),
            payload({"day": True, "theme": "t", "activities": []}),
            payload({"day": 1, "theme": None, "activities": []}),
            payload({"day": 1, "theme": "t", "activities": {}}),
            payload({"day": 1, "theme": "t", "activities": [activity_json("  ")]}),
            payload({"day": 1, "theme": "t", "activities": [activity_json("a", type_="")]}),
            payload({"day": 1, "theme": "t", "activities": [activity_json("a", stay=True)]}),
            payload({"day": 1, "theme": "t", "activities": [activity_json("a", move="10")]}),
            '{"days": [{"day": 1, "theme": "t", "activities": '
            '[{"name": "a", "type": "b", "stayMinutes": NaN, "moveMinutesToNext": 0}]}]}',
        ],
    )
    def test_rejects_invalid_payloads(self, raw: str) -> None:
        """Test any structural violation rejects the whole payload."""
        assert parse_itinerary_response(raw) is None

    def test_one_bad_day_rejects_all(self) -> None:
        """Test no partial itinerary is returned."""
        raw = payload(
            {"day": 1, "theme": "ok", "activities": [activity_json("a")]},
            {"day": 2, "theme": "bad", "activities": [{"name": "b"}]},
        )

        assert parse_itinerary_response(raw) is None


@pytest.mark.parametrize(
    ("activity_type", "expected"),
    [("식사", True), ("Lunch", True), ("맛집 탐방", True), ("관광", False), ("shopping", False)],
)
def test_is_meal(activity_type: str, expected: bool) -> None:
    """Test meal keyword matching is case-insensitive."""
    assert is_meal(activity_type) is expected


def test_bucket_activities_rotation() -> None:
    """Test meals alternate lunch/dinner and other activities rotate."""
    day = DayPlan(
        day=1,
        theme="t",
        activities=[
            make_activity("A"),
            make_activity("B", "식사"),
            make_activity("C"),
            make_activity("D", "식사"),
            make_activity("E"),
            make_activity("F"),
        ],
    )

    buckets = bucket_activities(day)

    assert {label: [a.name for a in acts] for label, acts in buckets.items()} == {
        "오전": ["A", "F"],
        "점심": ["B"],
        "오후": ["C"],
        "저녁": ["D"],
        "밤": ["E"],
    }


def test_format_activity_line() -> None:
    """Test the line layout and the omitted zero move."""
    assert format_activity_line(make_activity("A")) == "- **A** · 관광 · 체류 60분 · 이동 10분"
    assert format_activity_line(make_activity("B*\n", move=0)) == "- **B** · 관광 · 체류 60분"


class TestBuildMarkdown:
    """Test build_markdown_from_itinerary."""

    def test_empty_day_uses_placeholders(self) -> None:
        """Test required sections get placeholders and night is omitted."""
        itinerary = ItineraryResponse(days=[DayPlan(day=1, theme=" ", activities=[])])

        assert build_markdown_from_itinerary(itinerary) == (
            "## Day 1 - 자유 일정\n"
            "### 오전\n- 장소를 입력하세요\n"
            "### 점심\n- 식사할 곳을 입력하세요\n"
            "### 오후\n- 장소를 입력하세요\n"
            "### 저녁\n- 식사할 곳을 입력하세요"
        )

    def test_days_sorted_and_night_included(self) -> None:
        """Test days are sorted and night appears when it has activities."""
        itinerary = ItineraryResponse(
            days=[
                DayPlan(
                    day=2,
                    theme="둘째 날",
                    activities=[make_activity("A"), make_activity("C"), make_activity("E", move=0)],
                ),
                DayPlan(day=1, theme="첫째 날", activities=[]),
            ]
        )

        markdown = build_markdown_from_itinerary(itinerary)

        assert markdown.startswith("## Day 1 - 첫째 날\n")
        second = markdown.split("\n\n")[1]
        assert second.startswith("## Day 2 - 둘째 날\n### 오전\n- **A** · 관광 · 체류 60분 · 이동 10분")
        assert second.endswith("### 밤\n- **E** · 관광 · 체류 60분")

    def test_markdown_keeps_every_day_in_order(self) -> None:
        """Test the projection parses back to the same days, ascending."""
        itinerary = ItineraryResponse(
            days=[
                DayPlan(day=3, theme="바다\n산책", activities=[make_activity("해변")]),
                DayPlan(day=1, theme="", activities=[make_activity("## Day 7 - 가짜\n명소")]),
                DayPlan(day=2, theme="시장 ## Day 8 - 가짜", activities=[]),
            ]
        )

        days = extract_days(build_markdown_from_itinerary(itinerary))

        assert [day.number for day in days] == [1, 2, 3]
        assert [day.title for day in days] == ["자유 일정", "시장 ## Day 8 - 가짜", "바다 산책"]
        assert "- **## Day 7 - 가짜 명소** · 관광" in days[0].raw


class TestAnalyzeStructuredDay:
    """Test analyze_structured_day."""

    def test_totals(self) -> None:
        """Test totals and ratio for a balanced day."""
        day = DayPlan(
            day=1,
            theme="t",
            activities=[make_activity("a", stay=90, move=30), make_activity("b", stay=90, move=0)],
        )

        analysis = analyze_structured_day(day)

        assert (analysis.total_stay, analysis.total_move, analysis.total_minutes) == (180, 30, 210)
        assert analysis.move_ratio == pytest.approx(30 / 210)
        assert analysis.warnings == []

    def test_empty_day(self) -> None:
        """Test an empty day has a zero ratio and no warnings."""
        analysis = analyze_structured_day(DayPlan(day=1, theme="t", activities=[]))

        assert analysis.total_minutes == 0
        assert analysis.move_ratio == 0.0
        assert analysis.warnings == []

    def test_long_day(self) -> None:
        """Test over twelve hours and excessive moves are flagged."""
        activities = [make_activity(str(i), stay=200, move=60) for i in range(5)]

        warnings = analyze_structured_day(DayPlan(day=1, theme="t", activities=activities)).warnings

        assert warnings == [WARN_DAY_TOO_LONG, WARN_MOVE_TOO_LONG]

    def test_long_day_with_moderate_moves(self) -> None:
        """Test ten hours of stays and 200 minutes of moves flag only the day length."""
        day = DayPlan(
            day=1,
            theme="t",
            activities=[
                make_activity("a", stay=200, move=100),
                make_activity("b", stay=200, move=100),
                make_activity("c", stay=200, move=0),
            ],
        )

        analysis = analyze_structured_day(day)

        assert (analysis.total_stay, analysis.total_move, analysis.total_minutes) == (600, 200, 800)
        assert analysis.warnings == [WARN_DAY_TOO_LONG]

    def test_move_ratio(self) -> None:
        """Test a high share of moving time is flagged."""
        day = DayPlan(
            day=1,
            theme="t",
            activities=[make_activity("a", stay=30, move=60), make_activity("b", stay=30, move=0)],
        )

        assert analyze_structured_day(day).warnings == [WARN_MOVE_RATIO]

    def test_many_activities(self) -> None:
        """Test ten activities are flagged as packed."""
        activities = [make_activity(str(i), stay=30, move=5) for i in range(10)]

        assert analyze_structured_day(DayPlan(day=1, theme="t", activities=activities)).warnings == [
            WARN_TOO_MANY_ACTIVITIES
        ]
