"""
Generative text clients.

Fallback chain (ChainedClient):
  1. Ollama  (settings.OLLAMA_URL)  — free, local
  2. Anthropic Claude API           — only if ANTHROPIC_API_KEY is set

Every client exposes the same coroutine:

    await client.generate(prompt, allow_internet_context=False) -> str

and raises GenerationFailure on timeout, transport error or an empty reply.
The canned fallback text lives in ResponseEngine, not here.
"""
from __future__ import annotations

import os
from typing import List, Optional, Protocol, Sequence

import httpx

from companion.config import settings
from companion.services.web_search import search_context
from companion.utils.logging import logger


class GenerationFailure(Exception):
    """The generative backend produced no usable text."""


class GenerativeTextClient(Protocol):
    async def generate(self, prompt: str, allow_internet_context: bool = False) -> str:
        ...


async def _with_context(prompt: str, allow_internet_context: bool) -> str:
    if not allow_internet_context:
        return prompt
    context = await search_context(prompt)
    if context:
        logger.info("Web: injected search result into prompt")
        return f"{prompt}\n[Background from the web] {context}"
    return prompt


def _require_text(text: Optional[str], backend: str) -> str:
    text = (text or "").strip()
    if not text:
        raise GenerationFailure(f"{backend} returned an empty response")
    return text


# ── Backends ──────────────────────────────────────────────────────────────────

class OllamaClient:
    def __init__(self, url: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.url     = url or settings.OLLAMA_URL
        self.model   = model or settings.OLLAMA_MODEL
        self.timeout = timeout or settings.OLLAMA_TIMEOUT_S

    async def generate(self, prompt: str, allow_internet_context: bool = False) -> str:
        prompt = await _with_context(prompt, allow_internet_context)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.url,
                    json={
                        "model":      self.model,
                        "messages":   [{"role": "user", "content": prompt}],
                        "stream":     False,
                        "keep_alive": -1,
                        "options": {
                            "num_predict": settings.OLLAMA_NUM_PREDICT,
                            "temperature": 0.7,
                        },
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationFailure(f"Ollama request failed: {e}") from e

        text = _require_text(data.get("message", {}).get("content"), "Ollama")
        logger.info(f"LLM: Ollama response ({len(text)} chars)")
        return text


class AnthropicClient:
    def __init__(self, api_key: str, model: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.api_key = api_key
        self.model   = model or settings.ANTHROPIC_MODEL
        self.timeout = timeout or settings.ANTHROPIC_TIMEOUT_S

    async def generate(self, prompt: str, allow_internet_context: bool = False) -> str:
        prompt = await _with_context(prompt, allow_internet_context)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    "https://api.anthropic.com/v1/messages",
                    headers={
                        "x-api-key": self.api_key,
                        "anthropic-version": "2023-06-01",
                        "content-type": "application/json",
                    },
                    json={
                        "model": self.model,
                        "max_tokens": settings.ANTHROPIC_MAX_TOKENS,
                        "messages": [{"role": "user", "content": prompt}],
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationFailure(f"Anthropic request failed: {e}") from e

        try:
            raw = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationFailure(f"Anthropic response malformed: {e}") from e
        text = _require_text(raw, "Anthropic")
        logger.info(f"LLM: Anthropic response ({len(text)} chars)")
        return text


class ChainedClient:
    """Tries each backend in order; fails only when all of them fail."""

    def __init__(self, backends: Sequence[GenerativeTextClient]):
        self.backends: List[GenerativeTextClient] = list(backends)

    async def generate(self, prompt: str, allow_internet_context: bool = False) -> str:
        # Context is fetched once here, not once per backend attempt.
        prompt = await _with_context(prompt, allow_internet_context)
        errors: List[str] = []
        for backend in self.backends:
            name = type(backend).__name__
            try:
                return await backend.generate(prompt, allow_internet_context=False)
            except GenerationFailure as e:
                logger.debug(f"LLM: {name} unavailable — {e}")
                errors.append(f"{name}: {e}")
        raise GenerationFailure("; ".join(errors) or "no generation backend configured")


def default_client() -> ChainedClient:
    """Ollama first, then Anthropic when a key is configured."""
    backends: List[GenerativeTextClient] = [OllamaClient()]
    api_key = (settings.ANTHROPIC_API_KEY or os.environ.get("ANTHROPIC_API_KEY", "")).strip()
    if api_key:
        backends.append(AnthropicClient(api_key))
    return ChainedClient(backends)
