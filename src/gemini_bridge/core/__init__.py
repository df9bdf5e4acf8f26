"""Core data structures and adapter interfaces for gemini-bridge."""

from __future__ import annotations

from .errors import BridgeError, ErrorKind, NormalizedError, normalize_error
from .schema import AssistantMessage, MessagesRequest, ModelInfo, ModelList

__all__ = [
    "AssistantMessage",
    "BridgeError",
    "ErrorKind",
    "MessagesRequest",
    "ModelInfo",
    "ModelList",
    "NormalizedError",
    "normalize_error",
]
