"""
Emotion label → response category + prompt.

  crisis            → crisis_support   canned safety text, terminal
  sad               → comfort_joke     joke from the sad bank
  lonely            → comfort_joke     joke (lonely resolves to the sad bank)
  stressed, anxious → advice           coping strategies
  angry             → advice           anger validation
  happy             → celebration      joy amplification
  neutral / other   → general_chat     open-ended
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from companion.config import settings
from companion.models.types import EmotionLabel, ResponseCategory, UserProfile
from companion.services import prompts
from companion.services.joke_rotator import JokeRotator


@dataclass(frozen=True)
class Dispatch:
    """
    ``terminal`` dispatches carry finished text; the others carry a prompt
    that still has to go through the generative client.
    """
    content:  str
    category: ResponseCategory
    terminal: bool = False


class ResponseDispatcher:
    def __init__(self, jokes: Optional[JokeRotator] = None,
                 hotline: Optional[str] = None, text_line: Optional[str] = None):
        self.jokes      = jokes or JokeRotator()
        self._hotline   = hotline or settings.CRISIS_HOTLINE
        self._text_line = text_line or settings.CRISIS_TEXT_LINE

    def crisis_text(self, nickname: str) -> str:
        return prompts.CRISIS_TEMPLATE.format(
            nickname=nickname, hotline=self._hotline, text_line=self._text_line,
        )

    def dispatch(self, emotion: EmotionLabel, message: str, profile: UserProfile) -> Dispatch:
        if emotion is EmotionLabel.CRISIS:
            return Dispatch(self.crisis_text(profile.nickname),
                            ResponseCategory.CRISIS_SUPPORT, terminal=True)

        joke = ""
        if emotion is EmotionLabel.SAD:
            template, category = prompts.SAD_TEMPLATE, ResponseCategory.COMFORT_JOKE
            joke = self.jokes.next(EmotionLabel.SAD)
        elif emotion is EmotionLabel.LONELY:
            template, category = prompts.LONELY_TEMPLATE, ResponseCategory.COMFORT_JOKE
            joke = self.jokes.next(EmotionLabel.LONELY)
        elif emotion in (EmotionLabel.STRESSED, EmotionLabel.ANXIOUS):
            template, category = prompts.STRESS_TEMPLATE, ResponseCategory.ADVICE
        elif emotion is EmotionLabel.ANGRY:
            template, category = prompts.ANGER_TEMPLATE, ResponseCategory.ADVICE
        elif emotion is EmotionLabel.HAPPY:
            template, category = prompts.CELEBRATION_TEMPLATE, ResponseCategory.CELEBRATION
        else:
            template, category = prompts.GENERAL_TEMPLATE, ResponseCategory.GENERAL_CHAT

        prompt = prompts.build_prompt(template, profile.nickname, profile.age_group,
                                      message, joke=joke)
        return Dispatch(prompt, category)
