"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, the web client's format."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AliasedEnum(str, Enum):
    """String enum that also accepts its member names as input.

    Stored payloads carry the Korean values; API callers may send the
    English names instead, snake_case (`with_children`) or camelCase
    (`withChildren`).
    """

    @classmethod
    def _missing_(cls, value: object) -> "AliasedEnum | None":
        if not isinstance(value, str):
            return None
        if value in cls.__members__:
            return cls.__members__[value]
        for name, member in cls.__members__.items():
            if to_camel(name) == value:
                return member
        return None


class BudgetMode(AliasedEnum):
    """Spending level."""

    budget = "가성비"
    standard = "보통"
    premium = "프리미엄"


class CompanionType(AliasedEnum):
    """Who is travelling."""

    solo = "혼자"
    couple = "커플"
    friends = "친구"
    family = "가족"
    with_children = "아이동반"


class PaceMode(AliasedEnum):
    """How densely days are packed."""

    relaxed = "여유"
    standard = "보통"
    packed = "빡빡"


TRAVEL_STYLES: tuple[str, ...] = (
    "문화·역사",
    "맛집·음식",
    "자연·아웃도어",
    "쇼핑·라이프",
    "휴식",
    "바다",
    "모험",
    "사진·인생샷",
)
