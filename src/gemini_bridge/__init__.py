"""Serve Claude Messages clients from Gemini models.

The package translates Claude requests into Gemini calls and converts the
answers back, both for one-shot responses and for streamed events. A Demo
adapter fabricates answers locally so callers can be exercised without network
access or credentials.
"""

from __future__ import annotations

from .config import BridgeConfig
from .core.adapters import DemoAdapter, GeminiAdapter, GeminiBackend, ModelAdapter
from .core.errors import BridgeError, ErrorKind, NormalizedError
from .factory import create_adapter

__all__ = [
    "BridgeConfig",
    "BridgeError",
    "DemoAdapter",
    "ErrorKind",
    "GeminiAdapter",
    "GeminiBackend",
    "ModelAdapter",
    "NormalizedError",
    "create_adapter",
]

__version__ = "0.1.0"
