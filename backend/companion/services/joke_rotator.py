"""
Per-conversation joke rotation.

Selects uniformly at random from a small canned bank without repeating a
joke until the whole bank has been served, then starts over. One rotator
belongs to one ResponseEngine (one conversation); it is never shared.
"""
from __future__ import annotations
import random
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Set, Tuple

from companion.models.types import EmotionLabel

_JOKES: Dict[EmotionLabel, Tuple[str, ...]] = {
    EmotionLabel.SAD: (
        "Here's something to warm your heart: Why don't scientists trust atoms? Because they "
        "make up everything... just like how you matter more than you know! 💕",
        "Let me share a gentle smile with you: What do you call a bear with no teeth? "
        "A gummy bear! Your smile is even sweeter though 🐻",
        "To brighten your day: Why did the coffee file a police report? It got mugged! "
        "But unlike coffee, your feelings are safe with me ☕💙",
    ),
    EmotionLabel.STRESSED: (
        "Here's a calming thought: What's the best thing about Switzerland? I don't know, "
        "but the flag is a big plus! Just like you're a big plus in this world 🇨🇭",
        "Let's breathe and smile: Why don't eggs tell jokes? They'd crack each other up! "
        "Take a moment to crack a smile too 🥚😊",
    ),
}

JOKE_BANKS: Mapping[EmotionLabel, Tuple[str, ...]] = MappingProxyType(_JOKES)
_FALLBACK_BANK = EmotionLabel.SAD


class JokeRotator:
    def __init__(self,
                 banks: Mapping[EmotionLabel, Tuple[str, ...]] = JOKE_BANKS,
                 rng: Optional[random.Random] = None):
        self._banks = banks
        self._rng   = rng or random.Random()
        # One used-set per bank, so a set never outgrows the bank it tracks.
        self._used: Dict[Tuple[str, ...], Set[str]] = {}

    def used(self, emotion: EmotionLabel) -> frozenset:
        return frozenset(self._used.get(self.bank_for(emotion), ()))

    def bank_for(self, emotion: EmotionLabel) -> Tuple[str, ...]:
        """Registered bank for ``emotion``; anything else uses the sad bank."""
        return self._banks.get(emotion) or self._banks[_FALLBACK_BANK]

    def next(self, emotion: EmotionLabel) -> str:
        bank = self.bank_for(emotion)
        used = self._used.setdefault(bank, set())
        # Ordered list keeps rng-driven choices reproducible under a seed.
        available = [j for j in bank if j not in used]
        if not available:
            used.clear()
            available = list(bank)

        joke = self._rng.choice(available)
        used.add(joke)
        return joke
