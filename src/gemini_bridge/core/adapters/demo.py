"""Network-free adapter that fabricates Gemini-style answers locally."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, List

from ..errors import BridgeError, normalize_demo_error
from ..schema import AssistantMessage, ModelInfo, ModelList, TextBlock, Usage
from .base import ModelAdapter, RequestLike, coerce_request
from .mock import MockResponseGenerator, extract_user_message
from .stream import (
    BaseEventStream,
    ContentBlockDeltaEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStopEvent,
    StreamEvent,
    message_start_event,
)
from .utils import new_message_id

LOGGER = logging.getLogger(__name__)

RESPONSE_DELAY = 0.5
WORD_DELAY = 0.05
DEMO_INPUT_TOKENS = 10

DEMO_MODELS = (
    ModelInfo(
        name="models/gemini-2.0-flash-exp",
        display_name="Gemini 2.0 Flash Experimental",
        description="Latest experimental version with enhanced capabilities",
    ),
    ModelInfo(
        name="models/gemini-1.5-pro",
        display_name="Gemini 1.5 Pro",
        description="High-performance model for complex tasks",
    ),
    ModelInfo(
        name="models/gemini-1.5-flash",
        display_name="Gemini 1.5 Flash",
        description="Fast and efficient model for everyday use",
    ),
    ModelInfo(
        name="models/gemini-1.0-pro",
        display_name="Gemini 1.0 Pro",
        description="Stable and reliable model",
    ),
)


class DemoAdapter(ModelAdapter):
    """Stand-in for :class:`GeminiAdapter` with simulated latency."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        generator: MockResponseGenerator | None = None,
        response_delay: float = RESPONSE_DELAY,
        word_delay: float = WORD_DELAY,
        logger: logging.Logger | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        if response_delay < 0 or word_delay < 0:
            msg = "demo delays cannot be negative"
            raise ValueError(msg)
        self._generator = generator or MockResponseGenerator(rng)
        self._response_delay = response_delay
        self._word_delay = word_delay
        self._logger = logger or LOGGER
        self._id_factory = id_factory or new_message_id
        self._initialized = True
        self._logger.info("demo adapter ready models=%s", len(DEMO_MODELS))

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        self._initialized = True

    async def generate_content(self, model: str, request: RequestLike) -> AssistantMessage:
        self._logger.info("generate_content model=%s mode=demo", model)
        try:
            await asyncio.sleep(self._response_delay)
            user_message = extract_user_message(coerce_request(request))
            text = self._generator.generate(user_message, model)
            message = AssistantMessage(
                id=self._id_factory(),
                content=[TextBlock(text=text)],
                model=model,
                stop_reason="end_turn",
                usage=Usage(
                    input_tokens=DEMO_INPUT_TOKENS,
                    output_tokens=len(text.split()),
                ),
            )
        except Exception as exc:
            error = normalize_demo_error(exc)
            self._logger.error("generate_content failed message=%s", error.message)
            raise BridgeError(error) from exc
        return message

    def generate_content_stream(self, model: str, request: RequestLike) -> DemoEventStream:
        return DemoEventStream(
            model,
            request,
            generator=self._generator,
            message_id=self._id_factory(),
            word_delay=self._word_delay,
            logger=self._logger,
        )

    async def list_models(self) -> ModelList:
        self._logger.info("list_models count=%s mode=demo", len(DEMO_MODELS))
        return ModelList(models=list(DEMO_MODELS))

    async def refresh_token(self) -> None:
        self._logger.info("refresh_token skipped mode=demo")


class DemoEventStream(BaseEventStream):
    """Replays a canned response one word at a time."""

    def __init__(
        self,
        model: str,
        request: RequestLike,
        *,
        generator: MockResponseGenerator,
        message_id: str,
        word_delay: float = WORD_DELAY,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__()
        self.message_id = message_id
        self._model = model
        self._request = request
        self._generator = generator
        self._word_delay = word_delay
        self._logger = logger or LOGGER
        self._words: List[str] | None = None
        self._position = 0

    async def _produce(self) -> List[StreamEvent]:
        try:
            return await self._next_events()
        except Exception as exc:
            error = normalize_demo_error(exc)
            self._logger.error(
                "generate_content_stream failed message_id=%s message=%s",
                self.message_id,
                error.message,
            )
            return [ErrorEvent(error=error)]

    async def _next_events(self) -> List[StreamEvent]:
        if self._words is None:
            self._logger.info(
                "generate_content_stream model=%s message_id=%s mode=demo",
                self._model,
                self.message_id,
            )
            user_message = extract_user_message(coerce_request(self._request))
            self._words = self._generator.generate(user_message, self._model).split()
            return [message_start_event(self.message_id, self._model)]

        words = self._words
        if self._position < len(words):
            await asyncio.sleep(self._word_delay)
            index = self._position
            self._position += 1
            text = words[index] if index == len(words) - 1 else words[index] + " "
            return [ContentBlockDeltaEvent(text=text, index=0)]

        return [
            MessageDeltaEvent(stop_reason="end_turn", output_tokens=len(words)),
            MessageStopEvent(),
        ]


__all__ = ["DEMO_MODELS", "DemoAdapter", "DemoEventStream"]
