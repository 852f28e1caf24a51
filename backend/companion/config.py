"""
Global configuration — override via environment variables or .env file.
"""
from __future__ import annotations
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Server ──────────────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080", "*"]
    LOG_LEVEL: str = "INFO"

    # ── Generation: Ollama (local) ──────────────────────────────────────────
    OLLAMA_URL: str = "http://localhost:11434/api/chat"
    OLLAMA_MODEL: str = "qwen2.5:1.5b"
    OLLAMA_TIMEOUT_S: float = 90.0
    OLLAMA_NUM_PREDICT: int = 120   # 2-3 sentences ≈ 80-120 tokens

    # ── Generation: Anthropic (used only when the key is set) ───────────────
    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-haiku-4-5-20251001"
    ANTHROPIC_TIMEOUT_S: float = 20.0
    ANTHROPIC_MAX_TOKENS: int = 200

    # ── Internet context (DuckDuckGo instant answers) ───────────────────────
    ALLOW_INTERNET_CONTEXT: bool = False
    WEB_SEARCH_TIMEOUT_S: float = 6.0

    # ── Safety ──────────────────────────────────────────────────────────────
    CRISIS_HOTLINE: str = "988"
    CRISIS_TEXT_LINE: str = "741741"

    # ── Sessions ────────────────────────────────────────────────────────────
    MAX_SESSIONS: int = 1000        # least recently used engines are dropped beyond this

    # ── Metrics ─────────────────────────────────────────────────────────────
    METRICS_LOG_PATH: str = "logs/metrics.jsonl"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
