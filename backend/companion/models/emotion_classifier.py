"""
Emotion Classifier — weighted keyword lexicon, replaceable interface.

Design contract:
  scores(text: str)   → Dict[EmotionLabel, int]   (ordered, see EMOTION_ORDER)
  classify(text: str) → EmotionLabel

Each emotion owns three keyword tiers weighted 3 / 2 / 1. A keyword counts
once if it appears anywhere in the lower-cased text (plain substring, no word
boundaries). The highest total wins; ties go to the emotion listed first in
EMOTION_ORDER; an all-zero score is NEUTRAL.

Crisis language is never scored here. CrisisDetector runs first.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from companion.models.types import EmotionLabel

# Tie-break order. Changing it changes observable results.
EMOTION_ORDER: Tuple[EmotionLabel, ...] = (
    EmotionLabel.SAD,
    EmotionLabel.STRESSED,
    EmotionLabel.ANGRY,
    EmotionLabel.HAPPY,
    EmotionLabel.LONELY,
    EmotionLabel.ANXIOUS,
)

TIER_WEIGHTS: Tuple[int, int, int] = (3, 2, 1)   # primary, secondary, context


# ── Keyword lexicon ───────────────────────────────────────────────────────────
# (primary, secondary, context) per emotion. A keyword may appear under more
# than one emotion ("upset", "empty", "alone", "worried", "anxious").
_LEXICON: Dict[EmotionLabel, Tuple[Tuple[str, ...], ...]] = {
    EmotionLabel.SAD: (
        ("sad", "depressed", "crying", "heartbroken", "devastated", "miserable", "hopeless"),
        ("down", "blue", "upset", "hurt", "disappointed", "broken", "empty", "low"),
        ("lost", "miss", "gone", "left", "alone", "rejected"),
    ),
    EmotionLabel.STRESSED: (
        ("stressed", "overwhelmed", "anxious", "panic", "worried", "pressure"),
        ("busy", "exhausted", "tired", "can't cope", "too much", "burden"),
        ("deadline", "work", "school", "exam", "bills", "money", "responsibility"),
    ),
    EmotionLabel.ANGRY: (
        ("angry", "mad", "furious", "rage", "hate", "irritated"),
        ("annoyed", "frustrated", "upset", "pissed", "livid"),
        ("unfair", "stupid", "ridiculous", "can't believe", "so annoying"),
    ),
    EmotionLabel.HAPPY: (
        ("happy", "joy", "excited", "thrilled", "elated", "amazing", "wonderful"),
        ("good", "great", "awesome", "fantastic", "perfect", "love"),
        ("celebration", "achievement", "success", "proud", "accomplished"),
    ),
    EmotionLabel.LONELY: (
        ("lonely", "alone", "isolated", "disconnected"),
        ("nobody", "no one", "by myself", "empty"),
        ("friends", "family", "relationships", "social", "connection"),
    ),
    EmotionLabel.ANXIOUS: (
        ("anxious", "nervous", "worried", "scared", "afraid"),
        ("uncertain", "unsure", "doubt", "fear"),
        ("future", "tomorrow", "what if", "might happen", "unknown"),
    ),
}

LEXICON: Mapping[EmotionLabel, Tuple[Tuple[str, ...], ...]] = MappingProxyType(_LEXICON)


class EmotionClassifier:
    """Rule-based text emotion classifier over the fixed LEXICON."""

    def __init__(self, lexicon: Mapping[EmotionLabel, Tuple[Tuple[str, ...], ...]] = LEXICON):
        self._lexicon = lexicon

    def scores(self, text: str) -> Dict[EmotionLabel, int]:
        text_lower = text.lower()
        totals: Dict[EmotionLabel, int] = {}
        for emotion in EMOTION_ORDER:
            total = 0
            for weight, tier in zip(TIER_WEIGHTS, self._lexicon.get(emotion, ())):
                total += sum(weight for kw in tier if kw in text_lower)
            totals[emotion] = total
        return totals

    def classify(self, text: str) -> EmotionLabel:
        totals = self.scores(text)
        best, best_score = EmotionLabel.NEUTRAL, 0
        # Strict ">" keeps the earliest emotion on ties.
        for emotion in EMOTION_ORDER:
            if totals[emotion] > best_score:
                best, best_score = emotion, totals[emotion]
        return best
