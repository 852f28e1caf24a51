import asyncio
import random

from conftest import RecordingStore, ScriptedClient

from companion.models.types import (
    AgeGroup, ConversationTurn, EmotionLabel, ResponseCategory, UserProfile,
)
from companion.services import prompts
from companion.services.response_engine import ResponseEngine
from companion.utils.metrics import MetricsTracker


def run(coro):
    return asyncio.run(coro)


class TestCrisisOverride:
    def test_kill_myself(self, engine, client):
        result = run(engine.respond("I want to kill myself", {"nickname": "Sam"}, []))
        assert result.category is ResponseCategory.CRISIS_SUPPORT
        assert result.emotion is EmotionLabel.CRISIS
        assert "988" in result.text and "741741" in result.text
        assert "Sam" in result.text
        assert client.calls == []

    def test_crisis_beats_emotion_keywords(self, engine, client):
        result = run(engine.respond("I'm so happy I could overdose on cake", None, []))
        assert result.category is ResponseCategory.CRISIS_SUPPORT
        assert client.calls == []

    def test_crisis_even_when_client_is_broken(self, failing_client):
        engine = ResponseEngine(failing_client)
        result = run(engine.respond("thinking about SUICIDE", None))
        assert result.category is ResponseCategory.CRISIS_SUPPORT
        assert failing_client.calls == []


class TestGeneration:
    def test_sad_and_lonely_teen(self, engine, client):
        result = run(engine.respond("I'm so sad and lonely today",
                                    {"nickname": "Sam", "age_group": "teen"}, []))
        assert result.emotion is EmotionLabel.SAD
        assert result.category is ResponseCategory.COMFORT_JOKE
        assert result.text == "Generated reply."

        prompt = client.calls[0]["prompt"]
        assert prompts.AGE_TONES[AgeGroup.TEEN] in prompt
        assert "Sam" in prompt

    def test_neutral_is_general_chat(self, engine):
        result = run(engine.respond("nothing in particular", {}, []))
        assert result.emotion is EmotionLabel.NEUTRAL
        assert result.category is ResponseCategory.GENERAL_CHAT

    def test_unset_age_group_uses_adult_tone(self, engine, client):
        run(engine.respond("hello", {"nickname": "Ana"}, []))
        assert prompts.AGE_TONES[AgeGroup.ADULT] in client.calls[0]["prompt"]

    def test_internet_context_flag_passed_through(self, client):
        engine = ResponseEngine(client, allow_internet_context=True)
        run(engine.respond("hello"))
        assert client.calls[0]["allow_internet_context"] is True

    def test_history_is_not_consulted(self, client):
        history = [ConversationTurn("user", "I am furious and sad"),
                   ConversationTurn("assistant", "I hear you.")]
        a = ResponseEngine(client, rng=random.Random(1))
        b = ResponseEngine(client, rng=random.Random(1))
        first = run(a.respond("nothing in particular", None, history))
        second = run(b.respond("nothing in particular", None, []))
        assert first == second
        assert client.calls[0]["prompt"] == client.calls[1]["prompt"]

    def test_jokes_rotate_within_a_session(self, client):
        engine = ResponseEngine(client, rng=random.Random(4))
        bank_size = len(engine.dispatcher.jokes.bank_for(EmotionLabel.SAD))
        for _ in range(bank_size):
            run(engine.respond("I'm sad"))
        assert len(engine.dispatcher.jokes.used(EmotionLabel.SAD)) == bank_size


class TestFallback:
    def test_generation_failure(self, failing_client):
        engine = ResponseEngine(failing_client)
        result = run(engine.respond("I'm furious", {"nickname": "Sam"}, []))
        assert result.category is ResponseCategory.GENERAL_CHAT
        assert result.text == prompts.fallback_text("Sam")
        assert result.emotion is EmotionLabel.ANGRY

    def test_fallback_wording(self, failing_client):
        result = run(ResponseEngine(failing_client).respond("hello", {"nickname": "Sam"}))
        assert result.text.startswith(
            "I can feel that you're sharing something important with me, Sam."
        )

    def test_unexpected_exception(self):
        engine = ResponseEngine(ScriptedClient(error=ConnectionResetError("boom")))
        result = run(engine.respond("hello"))
        assert result.text == prompts.fallback_text("sweetheart")

    def test_empty_reply(self):
        engine = ResponseEngine(ScriptedClient(reply="   "))
        result = run(engine.respond("I'm so happy", {"nickname": "Jo"}))
        assert result.category is ResponseCategory.GENERAL_CHAT
        assert result.text == prompts.fallback_text("Jo")

    def test_none_message_still_resolves(self, engine):
        result = run(engine.respond(None))
        assert result.category is ResponseCategory.GENERAL_CHAT


class TestCollaborators:
    def test_store_receives_turn_and_mood(self, client):
        store = RecordingStore()
        engine = ResponseEngine(client, store=store, session_id="s1")
        run(engine.respond("I'm furious about this", {"nickname": "Sam"}))

        assert len(store.turns) == 1
        assert store.turns[0].detected_emotion is EmotionLabel.ANGRY
        assert store.turns[0].session_id == "s1"
        assert store.moods[0].mood_score == 2

    def test_neutral_turn_has_no_mood_entry(self, client):
        store = RecordingStore()
        run(ResponseEngine(client, store=store).respond("nothing in particular"))
        assert len(store.turns) == 1
        assert store.moods == []

    def test_store_failure_does_not_change_result(self, client):
        engine = ResponseEngine(client, store=RecordingStore(fail=True))
        result = run(engine.respond("I'm so happy"))
        assert result.category is ResponseCategory.CELEBRATION

    def test_metrics_recorded(self, client, failing_client, tmp_path):
        tracker = MetricsTracker(str(tmp_path / "metrics.jsonl"))
        run(ResponseEngine(client, metrics=tracker).respond("I'm so happy"))
        run(ResponseEngine(failing_client, metrics=tracker).respond("I'm so happy"))

        history = tracker.load_history()
        assert [h["category"] for h in history] == ["celebration", "general_chat"]
        assert [h["fallback"] for h in history] == [False, True]
        assert tracker.summary_stats()["fallback_rate"] == 0.5


class TestGreeting:
    def test_uses_nickname(self, engine):
        assert "Sam" in engine.greet(UserProfile(nickname="Sam"))

    def test_defaults_to_dear(self, engine):
        assert "dear" in engine.greet({})
