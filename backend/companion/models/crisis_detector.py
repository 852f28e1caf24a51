"""
Crisis screen — runs before emotion classification and overrides it.

Plain lower-cased substring containment, no tokenization or word
boundaries: benign context such as "vitamin pills" still matches.
"""
from __future__ import annotations
from typing import FrozenSet, Iterable

CRISIS_KEYWORDS: FrozenSet[str] = frozenset({
    "suicide",
    "suicidal",
    "kill myself",
    "end my life",
    "end it all",
    "want to die",
    "better off dead",
    "no reason to live",
    "hurt myself",
    "cut myself",
    "cutting",
    "jump off",
    "hanging",
    "self harm",
    "self-harm",
    "overdose",
    "pills",
})


class CrisisDetector:
    def __init__(self, keywords: Iterable[str] = CRISIS_KEYWORDS):
        self._keywords = frozenset(kw.lower() for kw in keywords)

    def detect(self, message: str) -> bool:
        text_lower = message.lower()
        return any(kw in text_lower for kw in self._keywords)
