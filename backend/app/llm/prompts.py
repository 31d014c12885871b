"""Prompt builders for itinerary generation.

The generated text is parsed by `backend.app.itinerary`, so every prompt
pins the `## Day N - 제목` / `### 오전` layout and the `이동 N분` hint.
"""

from backend.app.itinerary.vocabulary import SectionLabel
from backend.app.models.common import BudgetMode, CompanionType, PaceMode
from backend.app.models.intent import TripParameters

MAX_CONTEXT_CHARS = 3000

FULL_SYSTEM_PROMPT = (
    "여행 일정은 마크다운으로만 출력합니다. 서두나 결론 문장은 쓰지 않습니다. 한국어로 작성합니다."
)
DAY_SYSTEM_PROMPT = (
    "여행 일정은 해당 Day 블록만 마크다운으로 출력합니다. 서두나 결론은 쓰지 않고 한국어로 작성합니다."
)
SECTION_SYSTEM_PROMPT = (
    "요청한 섹션만 마크다운으로 출력합니다. 서두나 결론은 쓰지 않고 한국어로 작성합니다."
)
STRUCTURED_SYSTEM_PROMPT = (
    "여행 일정을 JSON 객체 하나로만 출력합니다. 코드 블록이나 설명 문장은 쓰지 않습니다. "
    "문자열 값은 한국어로 작성합니다."
)

MAPS_SEARCH_HINT = "https://www.google.com/maps/search/?api=1&query=장소명+도시"


def _depth_instruction(nights: int) -> str:
    if nights <= 2:
        return "핵심 명소 위주로 구성하고, 이동 동선을 짧게 유지해 주세요."
    if nights <= 4:
        return "주요 관광지 외에 숨은 명소를 1~2개 포함해 주세요."
    return "근교 또는 당일치기 추천을 최소 1개 포함해 주세요."


def _pace_instruction(pace: PaceMode) -> str:
    if pace is PaceMode.relaxed:
        return "여유로운 이동과 휴식 시간을 충분히 포함."
    if pace is PaceMode.packed:
        return "핵심 명소를 더 촘촘히 구성하되 현실적인 이동 시간은 반드시 반영."
    return "관광과 휴식을 균형 있게 배치."


def _budget_instruction(budget_mode: BudgetMode) -> str:
    if budget_mode is BudgetMode.budget:
        return "무료/저비용 명소와 합리적 식당 비중을 높이세요."
    if budget_mode is BudgetMode.premium:
        return "예약 가치가 있는 시그니처 장소/식당을 일부 포함하세요."
    return "중간 가격대 중심으로 구성하세요."


def _companion_instruction(companion_type: CompanionType) -> str:
    if companion_type is CompanionType.with_children:
        return "아이 동반 기준으로 이동/대기 부담이 적고 화장실/휴식 포인트를 고려."
    return "동행 유형에 맞는 분위기와 활동 강도를 반영."


def _trip_facts(params: TripParameters) -> str:
    return "\n".join(
        [
            f"**목적지:** {params.city}, {params.country}",
            f"**여행 스타일:** {params.style_list}",
            f"**예산 모드:** {params.budget_mode.value}",
            f"**동행 유형:** {params.companion_type.value}",
            f"**일정 템포:** {params.pace.value}",
            f"**희망 활동 시간:** {params.day_start_hour}:00 ~ {params.day_end_hour}:00",
        ]
    )


def build_itinerary_prompt(params: TripParameters) -> str:
    """Prompt for a complete multi-day markdown itinerary."""
    return f"""당신은 전문 여행 플래너입니다. 날짜별 일정을 마크다운으로 작성해 주세요. **전체 응답은 반드시 한국어로 작성**해 주세요.

{_trip_facts(params)}
**일수:** {params.days}일 ({params.nights}박)

**작성 규칙:**
- 출력은 반드시 유효한 마크다운만. 서두나 요약 문장 없이 본문부터 시작.
- 각 날짜는 다음 섹션으로 구성: ## Day N - [테마/제목], 이후 ### 오전, ### 점심, ### 오후, ### 저녁, ### 밤(선택).
- 각 활동은: 장소명, 짧은 설명, 다음 이동지까지 **예상 이동 시간**을 포함.
- 각 섹션에는 **구체적인 장소 2~3곳**을 포함해 주세요. (점심/저녁은 1~2곳)
- 각 장소에는 **권장 체류 시간** 또는 **방문 팁(베스트 타임/예약 팁)** 중 하나를 포함해 주세요.
- {_depth_instruction(params.nights)}
- 하루 일정은 위 활동 시간 범위 안에서 무리하지 않게 구성.
- {_pace_instruction(params.pace)}
- {_budget_instruction(params.budget_mode)}
- {_companion_instruction(params.companion_type)}
- 장소는 지리적으로 묶어 이동을 최소화.
- 식사, 관광, 자유 시간을 균형 있게 구성.
- 링크는 반드시 **실제 유효한 URL**만 사용하고, https:// 로 시작해야 합니다. 추측이 필요한 경우에는 Google Maps 검색 링크를 사용하세요. (예: {MAPS_SEARCH_HINT})

형식 예시:
## Day 1 - 바다 산책과 미식
### 오전
- **해변 산책로** 아침 산책과 뷰 포인트. [Google 지도](https://maps.google.com/...) **이동 15분**
### 점심
- **현지 맛집** 대표 메뉴 소개. [공식 사이트](https://...)
### 오후
...
"""


def build_day_prompt(params: TripParameters, day_number: int, existing_markdown: str) -> str:
    """Prompt for regenerating a single day block."""
    context = existing_markdown[:MAX_CONTEXT_CHARS]
    return f"""당신은 전문 여행 플래너입니다. 아래 일정 중 **Day {day_number}** 부분만 새로 작성해 주세요.

{_trip_facts(params)}

**기존 일정 (참고용 / Day {day_number}만 새로 작성):**
```
{context}
```

**요청:** Day {day_number}의 일정만 마크다운으로 출력해 주세요. 반드시 "## Day {day_number} - ..."로 시작하고, ### 오전, ### 점심, ### 오후, ### 저녁, ### 밤(선택) 형식을 지켜 주세요.
- 각 섹션에 **구체적인 장소 2~3곳**을 포함해 주세요. (점심/저녁은 1~2곳)
- 각 장소에는 **권장 체류 시간** 또는 **방문 팁**을 포함해 주세요.
- 활동 시간 범위를 크게 벗어나지 않도록 현실적으로 구성해 주세요.
- 링크는 반드시 **실제 유효한 URL**만 사용하고, https:// 로 시작해야 합니다. 추측이 필요한 경우에는 Google Maps 검색 링크를 사용하세요.
  (예: {MAPS_SEARCH_HINT})
  장소에는 [텍스트](URL) 형태의 링크를 포함하고, 한국어로만 작성해 주세요.
다른 설명 없이 해당 Day 블록만 출력하세요."""


def build_section_prompt(
    params: TripParameters, day_number: int, label: SectionLabel, day_markdown: str
) -> str:
    """Prompt for regenerating one section of one day."""
    context = day_markdown[:MAX_CONTEXT_CHARS]
    return f"""당신은 전문 여행 플래너입니다. 아래 일정 중 **Day {day_number}**의 **### {label.value}** 섹션만 새로 작성해 주세요.

{_trip_facts(params)}

**기존 Day {day_number} 일정 (참고용):**
```
{context}
```

**요청:** 아래 규칙을 지켜 **### {label.value}** 섹션만 마크다운으로 출력해 주세요.
- 반드시 "### {label.value}"로 시작
- 각 섹션에 구체적인 장소 2~3곳 (점심/저녁 1~2곳)
- 각 장소에는 **권장 체류 시간** 또는 **방문 팁** 포함
- 이동 시간은 간단히 포함
- 링크는 반드시 https:// 로 시작하는 실제 URL만 사용
  (필요 시 {MAPS_SEARCH_HINT})
다른 설명 없이 해당 섹션만 출력하세요."""


def build_structured_prompt(params: TripParameters) -> str:
    """Prompt for the typed JSON itinerary."""
    return f"""당신은 전문 여행 플래너입니다. 아래 조건으로 {params.days}일 일정을 JSON으로 작성해 주세요.

{_trip_facts(params)}
**일수:** {params.days}일 ({params.nights}박)

**출력 형식 (JSON 객체 하나만):**
{{"days": [{{"day": 1, "theme": "테마", "activities": [{{"name": "장소명", "type": "관광|식사|쇼핑|휴식", "stayMinutes": 90, "moveMinutesToNext": 20, "lat": 0.0, "lng": 0.0}}]}}]}}

**작성 규칙:**
- day는 1부터 {params.days}까지 순서대로.
- 식사 활동의 type은 "식사"로 표기하고 하루 1~2회 포함.
- stayMinutes는 30~240, moveMinutesToNext는 0~180 사이의 정수.
- 마지막 활동의 moveMinutesToNext는 0.
- 좌표를 모르면 lat, lng를 생략.
- {_depth_instruction(params.nights)}
- {_pace_instruction(params.pace)}
- {_budget_instruction(params.budget_mode)}
- {_companion_instruction(params.companion_type)}
"""
