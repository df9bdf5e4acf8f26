"""Canned responses used by the Demo adapter."""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from enum import Enum

from ..schema import MessagesRequest
from .utils import extract_text

DEFAULT_USER_MESSAGE = "Hello"


class ResponseCategory(str, Enum):
    """Template families selected from the user's last message."""

    GREETING = "greeting"
    TEST = "test"
    STORY = "story"
    DEFAULT = "default"


TEMPLATES: Mapping[ResponseCategory, Sequence[str]] = {
    ResponseCategory.GREETING: (
        "Hello! I'm {model}, a demo version of Gemini running through the Claude API proxy. "
        "How can I help you today?",
        "Hi there! This is {model} responding through the Gemini-Claude proxy in demo mode. "
        "What would you like to know?",
        "Greetings! I'm {model} (demo mode) accessible via Claude API format. "
        "How may I assist you?",
    ),
    ResponseCategory.TEST: (
        "Gemini-Claude Proxy Test OK! This response is from {model} in demo mode.",
        "Test successful! {model} is working correctly through the Claude API proxy.",
        "Demo test passed! {model} responding via Gemini-Claude proxy.",
    ),
    ResponseCategory.STORY: (
        "Once upon a time, in a digital realm where APIs spoke different languages, there was "
        "a clever proxy that could translate between Gemini and Claude formats. This proxy, "
        "powered by {model}, made it possible for applications to use Gemini's capabilities "
        "through Claude's familiar interface. And they all lived efficiently ever after!",
        "Here's a short story: A developer wanted to use Gemini models in their "
        "Claude-compatible application. Thanks to the Gemini-Claude proxy running {model}, "
        "they could seamlessly access Gemini's power without changing their existing code. "
        "The end!",
    ),
    ResponseCategory.DEFAULT: (
        'This is {model} responding in demo mode through the Gemini-Claude proxy. Your message '
        'was: "{message}". This demonstrates how Gemini models can be accessed using Claude '
        "API format!",
        "Hello from {model}! I'm running in demo mode to showcase the Gemini-Claude proxy "
        'functionality. You said: "{message}". Pretty cool how this works, right?',
        '{model} here (demo version)! I received your message: "{message}". This proxy allows '
        "you to use Gemini models through Claude's API format - no authentication needed in "
        "demo mode!",
    ),
}

_KEYWORDS: Sequence[tuple[ResponseCategory, tuple[str, ...]]] = (
    (ResponseCategory.GREETING, ("hello", "hi", "greet")),
    (ResponseCategory.TEST, ("test",)),
    (ResponseCategory.STORY, ("story", "tale")),
)


def classify_message(text: str) -> ResponseCategory:
    """Pick a category by case-insensitive substring match; first match wins."""

    lowered = text.lower()
    for category, keywords in _KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ResponseCategory.DEFAULT


def extract_user_message(request: MessagesRequest) -> str:
    """Return the text of the last message, or ``"Hello"`` when there is none."""

    if not request.messages:
        return DEFAULT_USER_MESSAGE
    text = extract_text(request.messages[-1].content)
    return text or DEFAULT_USER_MESSAGE


class MockResponseGenerator:
    """Choose a response template at random from the message's category.

    Pass a seeded :class:`random.Random` to make the choice reproducible.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def candidates(self, message: str, model: str) -> list[str]:
        category = classify_message(message)
        return [
            template.format(model=model, message=message)
            for template in TEMPLATES[category]
        ]

    def generate(self, message: str, model: str) -> str:
        return self._rng.choice(self.candidates(message, model))


__all__ = [
    "DEFAULT_USER_MESSAGE",
    "MockResponseGenerator",
    "ResponseCategory",
    "TEMPLATES",
    "classify_message",
    "extract_user_message",
]
