"""Shared fixtures: a scripted generative client and a recording store."""
import random
from typing import List, Optional

import pytest

from companion.services.llm_service import GenerationFailure
from companion.services.response_engine import ResponseEngine


class ScriptedClient:
    """Returns ``reply`` (or raises ``error``) and records every prompt."""

    def __init__(self, reply: Optional[str] = "Generated reply.",
                 error: Optional[BaseException] = None):
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def generate(self, prompt: str, allow_internet_context: bool = False) -> str:
        self.calls.append({"prompt": prompt, "allow_internet_context": allow_internet_context})
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingStore:
    def __init__(self, fail: bool = False):
        self.turns: list = []
        self.moods: list = []
        self.fail = fail

    def save_turn(self, record):
        if self.fail:
            raise RuntimeError("database offline")
        self.turns.append(record)

    async def save_mood(self, entry):
        self.moods.append(entry)


@pytest.fixture
def client():
    return ScriptedClient()


@pytest.fixture
def failing_client():
    return ScriptedClient(error=GenerationFailure("timed out"))


@pytest.fixture
def engine(client):
    return ResponseEngine(client, rng=random.Random(7))
