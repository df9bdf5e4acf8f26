"""Adapter interface shared by the Live and Demo implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Union

from ..schema import AssistantMessage, MessagesRequest, ModelList
from .stream import BaseEventStream

RequestLike = Union[MessagesRequest, Mapping[str, Any]]


class ModelAdapter(ABC):
    """Abstract capability set exposed to Claude-speaking callers."""

    @property
    @abstractmethod
    def initialized(self) -> bool:
        """Whether the adapter is ready to serve requests."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the adapter. Repeated calls must be harmless."""

    @abstractmethod
    async def generate_content(self, model: str, request: RequestLike) -> AssistantMessage:
        """Return a complete assistant message or raise ``BridgeError``."""

    @abstractmethod
    def generate_content_stream(self, model: str, request: RequestLike) -> BaseEventStream:
        """Return a lazy, single-pass stream of Claude events.

        Failures are reported as a terminal ``ErrorEvent`` rather than raised.
        """

    @abstractmethod
    async def list_models(self) -> ModelList:
        """List the models reachable through this adapter."""

    @abstractmethod
    async def refresh_token(self) -> None:
        """Refresh backend credentials. Errors propagate untranslated."""


def coerce_request(request: RequestLike) -> MessagesRequest:
    """Validate a raw request mapping into :class:`MessagesRequest`."""

    if isinstance(request, MessagesRequest):
        return request
    return MessagesRequest.model_validate(request)


__all__ = ["ModelAdapter", "RequestLike", "coerce_request"]
