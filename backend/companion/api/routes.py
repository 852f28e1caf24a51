"""
HTTP REST endpoints.

POST   /api/respond              → classify + reply (session-scoped engine)
POST   /api/classify             → crisis flag + emotion scores, no generation
GET    /api/greeting             → welcome message for a first conversation
DELETE /api/sessions/{session_id} → drop a conversation's engine
GET    /api/metrics              → per-turn latency history
"""
from __future__ import annotations
import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from companion.config import settings
from companion.models.crisis_detector import CrisisDetector
from companion.models.emotion_classifier import EmotionClassifier
from companion.models.types import ConversationTurn
from companion.services.llm_service import GenerativeTextClient, default_client
from companion.services.response_engine import ResponseEngine, greeting as welcome_text
from companion.utils.metrics import MetricsTracker
from companion.utils.logging import logger

router = APIRouter()

# ── Lazy service singletons ──────────────────────────────────────────────────
_client:  Optional[GenerativeTextClient] = None
_metrics: Optional[MetricsTracker]       = None
_sessions: "OrderedDict[str, ResponseEngine]" = OrderedDict()

_crisis     = CrisisDetector()
_classifier = EmotionClassifier()


def _get_client()  -> GenerativeTextClient:
    global _client;  _client  = _client  or default_client();                           return _client
def _get_metrics() -> MetricsTracker:
    global _metrics; _metrics = _metrics or MetricsTracker(settings.METRICS_LOG_PATH);  return _metrics


def _get_engine(session_id: str) -> ResponseEngine:
    """
    One engine per conversation, so joke history never crosses sessions.
    At most settings.MAX_SESSIONS engines are kept, least recently used first out.
    """
    engine = _sessions.get(session_id)
    if engine is not None:
        _sessions.move_to_end(session_id)
        return engine

    engine = ResponseEngine(_get_client(), metrics=_get_metrics(), session_id=session_id)
    _sessions[session_id] = engine
    logger.info(f"Session: started {session_id}")
    while len(_sessions) > max(settings.MAX_SESSIONS, 1):
        evicted, _ = _sessions.popitem(last=False)
        logger.info(f"Session: evicted {evicted}")
    return engine


# ── Schemas ──────────────────────────────────────────────────────────────────

class ProfileSchema(BaseModel):
    nickname:  Optional[str] = None
    age_group: Optional[str] = Field(None, description="child | teen | adult | midlife | senior")


class TurnSchema(BaseModel):
    role:    str
    content: str


class RespondRequest(BaseModel):
    message:    str                 = Field(..., min_length=1)
    session_id: Optional[str]       = None
    profile:    ProfileSchema       = Field(default_factory=ProfileSchema)
    history:    List[TurnSchema]    = Field(default_factory=list)


class RespondResponse(BaseModel):
    text:       str
    category:   str
    emotion:    str
    session_id: str


class ClassifyRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ClassifyResponse(BaseModel):
    emotion_label: str
    crisis:        bool
    scores:        Dict[str, int]


# ── POST /api/respond ────────────────────────────────────────────────────────

@router.post("/respond", response_model=RespondResponse, summary="Emotion-aware reply")
async def respond(req: RespondRequest):
    """
    Crisis screen → emotion → response category → generated reply.
    Generation failures come back as a normal 200 with the fallback text.
    """
    session_id = req.session_id or uuid.uuid4().hex
    engine = _get_engine(session_id)
    history = [ConversationTurn(t.role, t.content) for t in req.history]

    result = await engine.respond(req.message, req.profile, history)
    return RespondResponse(
        text=result.text,
        category=result.category.value,
        emotion=result.emotion.value,
        session_id=session_id,
    )


# ── POST /api/classify ───────────────────────────────────────────────────────

@router.post("/classify", response_model=ClassifyResponse, summary="Emotion Analysis")
async def classify(req: ClassifyRequest):
    """Keyword scores per emotion; crisis language overrides the label."""
    crisis = _crisis.detect(req.message)
    scores = _classifier.scores(req.message)
    label = "crisis" if crisis else _classifier.classify(req.message).value
    return ClassifyResponse(
        emotion_label=label,
        crisis=crisis,
        scores={e.value: s for e, s in scores.items()},
    )


# ── GET /api/greeting ────────────────────────────────────────────────────────

@router.get("/greeting", summary="Welcome message")
async def greeting(nickname: Optional[str] = None, session_id: Optional[str] = None):
    """Only an explicit session_id touches the session map."""
    profile = {"nickname": nickname}
    if session_id:
        text = _get_engine(session_id).greet(profile)
    else:
        session_id = uuid.uuid4().hex
        text = welcome_text(profile)
    return {"text": text, "category": "general_chat", "session_id": session_id}


# ── DELETE /api/sessions/{session_id} ────────────────────────────────────────

@router.delete("/sessions/{session_id}", summary="End a conversation")
async def end_session(session_id: str):
    if _sessions.pop(session_id, None) is None:
        raise HTTPException(404, f"Unknown session: {session_id}")
    logger.info(f"Session: ended {session_id}")
    return {"status": "ended", "session_id": session_id}


# ── GET /api/metrics ─────────────────────────────────────────────────────────

@router.get("/metrics", summary="Turn Latency History")
async def get_metrics():
    """Return accumulated turn metrics (from settings.METRICS_LOG_PATH)."""
    tracker = _get_metrics()
    return {
        "history": tracker.load_history(),
        "stats":   tracker.summary_stats(),
    }
