"""
Emotion-aware companion response engine — FastAPI entry point.

Start:
    uvicorn companion.main:app --reload --host 0.0.0.0 --port 8000
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion.config import settings
from companion.api.routes import router
from companion.utils.logging import setup_logging

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title       = "Emotion-Aware Companion",
    version     = "0.1.0",
    description = (
        "Pipeline: Message → Crisis Screen → Emotion Classification → "
        "Response Category + Tone-Adapted Prompt → Generated Reply (with safe fallback)"
    ),
    docs_url    = "/docs",
    redoc_url   = "/redoc",
)

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins     = settings.ALLOWED_ORIGINS,
    allow_credentials = True,
    allow_methods     = ["*"],
    allow_headers     = ["*"],
)

# ── Routes ────────────────────────────────────────────────────────────────────
app.include_router(router, prefix="/api", tags=["Conversation"])


# ── Health ───────────────────────────────────────────────────────────────────
@app.get("/health", tags=["System"])
async def health():
    return {
        "status": "ok",
        "ollama_model": settings.OLLAMA_MODEL,
        "anthropic": bool(settings.ANTHROPIC_API_KEY),
        "internet_context": settings.ALLOW_INTERNET_CONTEXT,
    }
