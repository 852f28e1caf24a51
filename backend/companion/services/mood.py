"""
Records handed to the caller's storage collaborator after each turn.

Storage itself is not implemented here: anything with ``save_turn`` and
``save_mood`` methods (sync or async) can be passed to ResponseEngine.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Awaitable, Optional, Protocol, Tuple, Union

from companion.models.types import EmotionLabel, ResponseCategory

# "excited" is not produced by the classifier but may arrive from manual
# check-ins recorded through the same store.
MOOD_SCORES = {
    "happy":    8,
    "excited":  9,
    "neutral":  5,
    "sad":      3,
    "stressed": 3,
    "anxious":  2,
    "angry":    2,
    "lonely":   2,
    "crisis":   1,
}
DEFAULT_MOOD_SCORE = 5
NOTE_LIMIT = 50


def mood_score(emotion: Union[EmotionLabel, str]) -> int:
    key = emotion.value if isinstance(emotion, EmotionLabel) else str(emotion)
    return MOOD_SCORES.get(key, DEFAULT_MOOD_SCORE)


def truncate_note(message: str, limit: int = NOTE_LIMIT) -> str:
    return message[:limit] + "..." if len(message) > limit else message


@dataclass(frozen=True)
class ConversationRecord:
    user_message:     str
    detected_emotion: EmotionLabel
    response_type:    ResponseCategory
    response_text:    str
    session_id:       Optional[str] = None


@dataclass(frozen=True)
class MoodEntry:
    mood_score:      int
    primary_emotion: EmotionLabel
    notes:           str
    checkin_type:    str = "conversation"


class PersistenceStore(Protocol):
    def save_turn(self, record: ConversationRecord) -> Optional[Awaitable[None]]:
        ...

    def save_mood(self, entry: MoodEntry) -> Optional[Awaitable[None]]:
        ...


def build_records(message: str, emotion: EmotionLabel, category: ResponseCategory,
                  response_text: str, session_id: Optional[str] = None,
                  ) -> Tuple[ConversationRecord, Optional[MoodEntry]]:
    """Per-turn record, plus a mood entry unless the turn was neutral."""
    record = ConversationRecord(
        user_message=message,
        detected_emotion=emotion,
        response_type=category,
        response_text=response_text,
        session_id=session_id,
    )
    if emotion is EmotionLabel.NEUTRAL:
        return record, None
    entry = MoodEntry(
        mood_score=mood_score(emotion),
        primary_emotion=emotion,
        notes=truncate_note(message),
    )
    return record, entry
