"""
Core value types shared by the response pipeline.

UserProfile defaults are resolved once, in ``UserProfile.from_raw``; nothing
downstream re-checks for missing nicknames or unknown age groups.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

DEFAULT_NICKNAME = "sweetheart"


class EmotionLabel(str, Enum):
    NEUTRAL  = "neutral"
    SAD      = "sad"
    STRESSED = "stressed"
    ANGRY    = "angry"
    HAPPY    = "happy"
    LONELY   = "lonely"
    ANXIOUS  = "anxious"
    CRISIS   = "crisis"


class ResponseCategory(str, Enum):
    GENERAL_CHAT   = "general_chat"
    COMFORT_JOKE   = "comfort_joke"
    ADVICE         = "advice"
    CRISIS_SUPPORT = "crisis_support"
    CELEBRATION    = "celebration"


class AgeGroup(str, Enum):
    CHILD   = "child"
    TEEN    = "teen"
    ADULT   = "adult"
    MIDLIFE = "midlife"
    SENIOR  = "senior"

    @classmethod
    def parse(cls, value: Any) -> "AgeGroup":
        """Unknown, empty or missing values resolve to ADULT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.ADULT


@dataclass(frozen=True)
class UserProfile:
    nickname:  str = DEFAULT_NICKNAME
    age_group: AgeGroup = AgeGroup.ADULT

    @classmethod
    def from_raw(cls, raw: Optional[Any] = None,
                 default_nickname: str = DEFAULT_NICKNAME) -> "UserProfile":
        """Build a profile from a mapping, an existing profile, any object with
        ``nickname`` / ``age_group`` attributes, or None."""
        if isinstance(raw, cls):
            nickname, age_group = raw.nickname, raw.age_group
        elif isinstance(raw, Mapping):
            nickname, age_group = raw.get("nickname"), raw.get("age_group")
        else:
            nickname = getattr(raw, "nickname", None)
            age_group = getattr(raw, "age_group", None)

        nickname = nickname.strip() if isinstance(nickname, str) else ""
        return cls(
            nickname=nickname or default_nickname,
            age_group=AgeGroup.parse(age_group),
        )


@dataclass(frozen=True)
class ConversationTurn:
    role:    str   # "user" | "assistant"
    content: str


@dataclass(frozen=True)
class EngineResult:
    text:     str
    category: ResponseCategory
    emotion:  EmotionLabel = EmotionLabel.NEUTRAL
