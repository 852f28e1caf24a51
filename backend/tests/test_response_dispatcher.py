import random

import pytest

from companion.models.types import AgeGroup, EmotionLabel, ResponseCategory, UserProfile
from companion.services import prompts
from companion.services.joke_rotator import JOKE_BANKS, JokeRotator
from companion.services.response_dispatcher import ResponseDispatcher


@pytest.fixture
def dispatcher():
    return ResponseDispatcher(jokes=JokeRotator(rng=random.Random(11)))


SAM_TEEN = UserProfile(nickname="Sam", age_group=AgeGroup.TEEN)


class TestCategories:
    @pytest.mark.parametrize("emotion, category", [
        (EmotionLabel.SAD,      ResponseCategory.COMFORT_JOKE),
        (EmotionLabel.LONELY,   ResponseCategory.COMFORT_JOKE),
        (EmotionLabel.STRESSED, ResponseCategory.ADVICE),
        (EmotionLabel.ANXIOUS,  ResponseCategory.ADVICE),
        (EmotionLabel.ANGRY,    ResponseCategory.ADVICE),
        (EmotionLabel.HAPPY,    ResponseCategory.CELEBRATION),
        (EmotionLabel.NEUTRAL,  ResponseCategory.GENERAL_CHAT),
    ])
    def test_generative_paths(self, dispatcher, emotion, category):
        d = dispatcher.dispatch(emotion, "hi there", UserProfile())
        assert d.category is category
        assert d.terminal is False

    def test_stressed_and_anxious_share_prompt(self, dispatcher):
        a = dispatcher.dispatch(EmotionLabel.STRESSED, "msg", SAM_TEEN).content
        b = dispatcher.dispatch(EmotionLabel.ANXIOUS, "msg", SAM_TEEN).content
        assert a == b

    def test_angry_prompt_differs_from_stress(self, dispatcher):
        a = dispatcher.dispatch(EmotionLabel.ANGRY, "msg", SAM_TEEN).content
        b = dispatcher.dispatch(EmotionLabel.STRESSED, "msg", SAM_TEEN).content
        assert a != b


class TestCrisis:
    def test_terminal_safety_text(self, dispatcher):
        d = dispatcher.dispatch(EmotionLabel.CRISIS, "anything", SAM_TEEN)
        assert d.category is ResponseCategory.CRISIS_SUPPORT
        assert d.terminal is True
        assert "Sam" in d.content
        assert "988" in d.content
        assert "741741" in d.content

    def test_no_joke_drawn(self, dispatcher):
        dispatcher.dispatch(EmotionLabel.CRISIS, "anything", SAM_TEEN)
        assert dispatcher.jokes.used(EmotionLabel.SAD) == frozenset()


class TestPromptAssembly:
    def test_prompt_parts(self, dispatcher):
        message = "I'm so sad and lonely today"
        prompt = dispatcher.dispatch(EmotionLabel.SAD, message, SAM_TEEN).content
        assert prompt.startswith(prompts.PERSONA_PREAMBLE)
        assert "2-3 sentences" in prompt
        assert prompts.AGE_TONES[AgeGroup.TEEN] in prompt
        assert "Sam" in prompt
        assert message in prompt

    def test_sad_prompt_embeds_joke(self, dispatcher):
        prompt = dispatcher.dispatch(EmotionLabel.SAD, "msg", SAM_TEEN).content
        assert any(joke in prompt for joke in JOKE_BANKS[EmotionLabel.SAD])

    def test_lonely_prompt_embeds_sad_bank_joke(self, dispatcher):
        prompt = dispatcher.dispatch(EmotionLabel.LONELY, "msg", SAM_TEEN).content
        assert any(joke in prompt for joke in JOKE_BANKS[EmotionLabel.SAD])

    def test_missing_age_group_uses_adult_tone(self, dispatcher):
        profile = UserProfile.from_raw({"nickname": "Ana"})
        prompt = dispatcher.dispatch(EmotionLabel.NEUTRAL, "hello", profile).content
        assert prompts.AGE_TONES[AgeGroup.ADULT] in prompt
        for group in (AgeGroup.CHILD, AgeGroup.TEEN, AgeGroup.MIDLIFE, AgeGroup.SENIOR):
            assert prompts.AGE_TONES[group] not in prompt

    def test_message_with_braces_is_kept_verbatim(self, dispatcher):
        message = "my code prints {nickname} and {0}"
        prompt = dispatcher.dispatch(EmotionLabel.NEUTRAL, message, SAM_TEEN).content
        assert message in prompt

    def test_senior_tone_centres_on_companionship(self, dispatcher):
        profile = UserProfile(nickname="Ruth", age_group=AgeGroup.SENIOR)
        prompt = dispatcher.dispatch(EmotionLabel.NEUTRAL, "hello", profile).content
        assert "User context: Ruth, " in prompt
        assert "loneliness, life reflection" in prompt
