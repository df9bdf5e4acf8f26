"""Adapter interfaces and the Live and Demo implementations."""

from __future__ import annotations

from .base import ModelAdapter, RequestLike, coerce_request
from .demo import DEMO_MODELS, DemoAdapter, DemoEventStream
from .gemini import GeminiAdapter, GeminiBackend, GeminiEventStream
from .mock import MockResponseGenerator, ResponseCategory, classify_message, extract_user_message
from .stream import (
    BaseEventStream,
    ChunkTranslator,
    ContentBlockDeltaEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    MessageStopEvent,
    StreamEvent,
    StreamState,
    replay_stream,
)
from .utils import map_finish_reason, to_claude_message, to_gemini_request

__all__ = [
    "BaseEventStream",
    "ChunkTranslator",
    "ContentBlockDeltaEvent",
    "DEMO_MODELS",
    "DemoAdapter",
    "DemoEventStream",
    "ErrorEvent",
    "GeminiAdapter",
    "GeminiBackend",
    "GeminiEventStream",
    "MessageDeltaEvent",
    "MessageStartEvent",
    "MessageStopEvent",
    "MockResponseGenerator",
    "ModelAdapter",
    "RequestLike",
    "ResponseCategory",
    "StreamEvent",
    "StreamState",
    "classify_message",
    "coerce_request",
    "extract_user_message",
    "map_finish_reason",
    "replay_stream",
    "to_claude_message",
    "to_gemini_request",
]
