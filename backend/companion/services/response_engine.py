"""
Response Engine — one instance per conversation.

Pipeline per message:
  text → CrisisDetector ──crisis──────────────────────────→ canned safety text
                         └─ EmotionClassifier → ResponseDispatcher (jokes)
                              → prompt → GenerativeTextClient → text
                                                   └─ failure → fallback text

The generative call is the only await point. Callers must not overlap
``respond`` calls on the same instance; the joke history is per instance.
"""
from __future__ import annotations
import inspect
import random
import time
from typing import Any, Optional, Sequence

from companion.config import settings
from companion.models.crisis_detector import CrisisDetector
from companion.models.emotion_classifier import EmotionClassifier
from companion.models.types import (
    ConversationTurn, EmotionLabel, EngineResult, ResponseCategory, UserProfile,
)
from companion.services import prompts
from companion.services.joke_rotator import JokeRotator
from companion.services.llm_service import GenerationFailure, GenerativeTextClient
from companion.services.mood import PersistenceStore, build_records
from companion.services.response_dispatcher import ResponseDispatcher
from companion.utils.logging import logger
from companion.utils.metrics import MetricsTracker, TurnMetrics


class ResponseEngine:
    def __init__(
        self,
        client: GenerativeTextClient,
        store: Optional[PersistenceStore] = None,
        metrics: Optional[MetricsTracker] = None,
        session_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
        allow_internet_context: Optional[bool] = None,
    ):
        self.client     = client
        self.store      = store
        self.metrics    = metrics
        self.session_id = session_id
        self._rng       = rng or random.Random()
        self._allow_internet = (settings.ALLOW_INTERNET_CONTEXT
                                if allow_internet_context is None else allow_internet_context)

        self.crisis     = CrisisDetector()
        self.classifier = EmotionClassifier()
        self.dispatcher = ResponseDispatcher(jokes=JokeRotator(rng=self._rng))

    # ── Public API ────────────────────────────────────────────────────────────

    def greet(self, profile: Any = None) -> str:
        """Welcome line for a first conversation."""
        return greeting(profile, self._rng)

    async def respond(
        self,
        message: str,
        profile: Any = None,
        history: Optional[Sequence[ConversationTurn]] = None,
    ) -> EngineResult:
        """
        Classify ``message`` and produce the reply for it. Never raises for
        generation problems; those degrade to the fallback text.

        ``history`` is accepted so callers can pass the running conversation,
        but classification and dispatch deliberately ignore it.
        """
        t0 = time.perf_counter()
        user = UserProfile.from_raw(profile)
        message = message or ""
        turn = TurnMetrics(session_id=self.session_id)

        if self.crisis.detect(message):
            logger.warning("Crisis language detected", extra={"session_id": self.session_id})
            emotion = EmotionLabel.CRISIS
            decision = self.dispatcher.dispatch(emotion, message, user)
            result = EngineResult(decision.content, decision.category, emotion)
        else:
            emotion = self.classifier.classify(message)
            decision = self.dispatcher.dispatch(emotion, message, user)
            turn.classify_ms = (time.perf_counter() - t0) * 1000
            logger.info(f"Emotion: {emotion.value} → {decision.category.value}",
                        extra={"session_id": self.session_id, "emotion": emotion.value,
                               "category": decision.category.value})

            t_gen = time.perf_counter()
            text = await self._generate(decision.content)
            turn.generation_ms = (time.perf_counter() - t_gen) * 1000
            if text is None:
                turn.fallback = True
                result = EngineResult(prompts.fallback_text(user.nickname),
                                      ResponseCategory.GENERAL_CHAT, emotion)
            else:
                result = EngineResult(text, decision.category, emotion)

        turn.category = result.category.value
        turn.emotion = emotion.value
        turn.total_ms = (time.perf_counter() - t0) * 1000
        if self.metrics is not None:
            self.metrics.record(turn)

        await self._persist(message, result)
        return result

    # ── Internals ─────────────────────────────────────────────────────────────

    async def _generate(self, prompt: str) -> Optional[str]:
        """Generated text, or None when the client failed in any way."""
        try:
            text = await self.client.generate(prompt, allow_internet_context=self._allow_internet)
            if not isinstance(text, str) or not text.strip():
                raise GenerationFailure("empty response")
            return text.strip()
        except Exception as e:
            # Any collaborator failure, not only GenerationFailure, ends here.
            logger.warning(f"LLM: generation failed, using fallback — {e}",
                           extra={"session_id": self.session_id})
            return None

    async def _persist(self, message: str, result: EngineResult) -> None:
        if self.store is None:
            return
        record, entry = build_records(message, result.emotion, result.category,
                                      result.text, session_id=self.session_id)
        try:
            await _maybe_await(self.store.save_turn(record))
            if entry is not None:
                await _maybe_await(self.store.save_mood(entry))
        except Exception:
            logger.exception("Store: failed to save turn", extra={"session_id": self.session_id})


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value


def greeting(profile: Any = None, rng: Optional[random.Random] = None) -> str:
    """Welcome line; needs no per-conversation state."""
    nickname = UserProfile.from_raw(profile, default_nickname=prompts.WELCOME_NICKNAME).nickname
    return prompts.welcome_message(nickname, rng)
