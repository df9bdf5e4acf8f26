"""Claude streaming events, the Gemini chunk translator and event streams."""

from __future__ import annotations

import abc
import asyncio
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, ClassVar, Deque, List, Union

from ..errors import ChunkTranslationError, NormalizedError
from ..schema import AssistantMessage, Usage
from .utils import map_finish_reason


@dataclass(frozen=True, slots=True)
class MessageStartEvent:
    """Opens a stream with an empty assistant message."""

    type: ClassVar[str] = "message_start"

    message: AssistantMessage

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "message": self.message.model_dump()}


@dataclass(frozen=True, slots=True)
class ContentBlockDeltaEvent:
    """Incremental text appended to the single content block."""

    type: ClassVar[str] = "content_block_delta"

    text: str
    index: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "index": self.index,
            "delta": {"type": "text_delta", "text": self.text},
        }


@dataclass(frozen=True, slots=True)
class MessageDeltaEvent:
    """Carries the stop reason and output token count."""

    type: ClassVar[str] = "message_delta"

    stop_reason: str
    output_tokens: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "delta": {"stop_reason": self.stop_reason, "stop_sequence": None},
            "usage": {"output_tokens": self.output_tokens},
        }


@dataclass(frozen=True, slots=True)
class MessageStopEvent:
    """Terminal event of a successful stream."""

    type: ClassVar[str] = "message_stop"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    """Terminal event of a failed stream. No ``message_stop`` follows it."""

    type: ClassVar[str] = "error"

    error: NormalizedError

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "error": self.error.to_dict()}


StreamEvent = Union[
    MessageStartEvent,
    ContentBlockDeltaEvent,
    MessageDeltaEvent,
    MessageStopEvent,
    ErrorEvent,
]


def message_start_event(message_id: str, model: str) -> MessageStartEvent:
    """Build the opening event with empty content and zero usage."""

    message = AssistantMessage(
        id=message_id,
        content=[],
        model=model,
        stop_reason=None,
        usage=Usage(input_tokens=0, output_tokens=0),
    )
    return MessageStartEvent(message=message)


def is_terminal(event: StreamEvent) -> bool:
    return isinstance(event, (MessageStopEvent, ErrorEvent))


class StreamState(str, Enum):
    """Lifecycle of a single translated stream."""

    NOT_STARTED = "not_started"
    STREAMING = "streaming"
    FINISHED = "finished"


class ChunkTranslator:
    """Convert a sequence of Gemini stream chunks into Claude stream events.

    The first chunk carrying candidates only opens the stream: it produces the
    ``message_start`` event and its own text or finish reason is not forwarded.
    Every later chunk yields at most one event. The translator never performs
    I/O so a fresh instance is created for each streamed call.
    """

    def __init__(self, *, message_id: str, model: str) -> None:
        self.message_id = message_id
        self.model = model
        self._state = StreamState.NOT_STARTED

    @property
    def state(self) -> StreamState:
        return self._state

    def translate(self, chunk: Any) -> List[StreamEvent]:
        if self._state is StreamState.FINISHED:
            msg = "cannot translate chunks after the stream finished"
            raise RuntimeError(msg)

        mapping = _ensure_mapping(chunk, path="chunk")
        candidate = _first_candidate(mapping)
        if candidate is None:
            return []

        if self._state is StreamState.NOT_STARTED:
            self._state = StreamState.STREAMING
            return [message_start_event(self.message_id, self.model)]

        text = _candidate_text(candidate)
        if text:
            return [ContentBlockDeltaEvent(text=text, index=0)]

        finish_reason = candidate.get("finishReason")
        if finish_reason:
            if not isinstance(finish_reason, str):
                msg = "candidates[0].finishReason must be a string"
                raise ChunkTranslationError(msg)
            return [
                MessageDeltaEvent(
                    stop_reason=map_finish_reason(finish_reason),
                    output_tokens=_output_tokens(mapping),
                )
            ]

        return []

    def finish(self) -> List[StreamEvent]:
        """Close a source that was exhausted without error."""

        events: List[StreamEvent] = []
        if self._state is StreamState.NOT_STARTED:
            events.append(message_start_event(self.message_id, self.model))
        self._state = StreamState.FINISHED
        events.append(MessageStopEvent())
        return events

    def fail(self, error: NormalizedError) -> List[StreamEvent]:
        """Close a source that raised before exhaustion."""

        self._state = StreamState.FINISHED
        return [ErrorEvent(error=error)]


def _first_candidate(chunk: Mapping[str, Any]) -> Mapping[str, Any] | None:
    candidates = chunk.get("candidates")
    if candidates is None:
        return None
    if not isinstance(candidates, Sequence) or isinstance(candidates, (str, bytes)):
        msg = "chunk candidates must be a sequence"
        raise ChunkTranslationError(msg)
    if not candidates:
        return None
    return _ensure_mapping(candidates[0], path="candidates[0]")


def _candidate_text(candidate: Mapping[str, Any]) -> str:
    content = candidate.get("content")
    if content is None:
        return ""
    content = _ensure_mapping(content, path="candidates[0].content")

    parts = content.get("parts")
    if parts is None:
        return ""
    if not isinstance(parts, Sequence) or isinstance(parts, (str, bytes)):
        msg = "candidates[0].content.parts must be a sequence"
        raise ChunkTranslationError(msg)

    fragments: list[str] = []
    for index, part in enumerate(parts):
        mapping = _ensure_mapping(part, path=f"candidates[0].content.parts[{index}]")
        text = mapping.get("text")
        if text is None:
            continue
        if not isinstance(text, str):
            msg = f"candidates[0].content.parts[{index}].text must be a string"
            raise ChunkTranslationError(msg)
        fragments.append(text)
    return "".join(fragments)


def _output_tokens(chunk: Mapping[str, Any]) -> int:
    usage = chunk.get("usageMetadata")
    if usage is None:
        return 0
    usage = _ensure_mapping(usage, path="usageMetadata")
    count = usage.get("candidatesTokenCount")
    if count is None:
        return 0
    if isinstance(count, bool) or not isinstance(count, int):
        msg = "usageMetadata.candidatesTokenCount must be an integer"
        raise ChunkTranslationError(msg)
    return count


def _ensure_mapping(value: Any, *, path: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    if hasattr(value, "model_dump"):
        payload = value.model_dump()
        if isinstance(payload, Mapping):
            return payload
    if hasattr(value, "to_dict"):
        payload = value.to_dict()
        if isinstance(payload, Mapping):
            return payload
    msg = f"{path} must be a mapping"
    raise ChunkTranslationError(msg)


class BaseEventStream(AsyncIterator[StreamEvent], metaclass=abc.ABCMeta):
    """Pull-based async iterator of Claude stream events.

    Subclasses implement :meth:`_produce`, which is awaited only when the
    consumer asks for the next event, so no work happens before the first
    ``__anext__``. A batch containing ``message_stop`` or ``error`` ends the
    stream. Consumers that stop early must call :meth:`aclose` (or use the
    stream as an async context manager) so :meth:`_on_close` can release the
    underlying source.
    """

    def __init__(self) -> None:
        self._buffer: Deque[StreamEvent] = deque()
        self._closed = False
        self._finished = False
        self._close_lock = asyncio.Lock()

    def __aiter__(self) -> BaseEventStream:
        return self

    async def __anext__(self) -> StreamEvent:
        while True:
            buffered = self._pop_buffered_event()
            if buffered is not None:
                if self._finished and not self._buffer:
                    await self.aclose()
                return buffered

            if self._closed or self._finished:
                await self.aclose()
                raise StopAsyncIteration

            events = await self._produce()
            if any(is_terminal(event) for event in events):
                self._finished = True
            self._buffer.extend(events)

    async def __aenter__(self) -> BaseEventStream:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Stop the stream and release its source. Safe to call repeatedly."""

        async with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._buffer.clear()
            await self._on_close()

    async def close(self) -> None:
        await self.aclose()

    def _pop_buffered_event(self) -> StreamEvent | None:
        if not self._buffer:
            return None
        return self._buffer.popleft()

    @abc.abstractmethod
    async def _produce(self) -> List[StreamEvent]:
        """Return the next batch of events, possibly empty."""

    async def _on_close(self) -> None:
        """Allow subclasses to dispose source resources when closing."""


async def replay_stream(stream: BaseEventStream) -> List[StreamEvent]:
    """Collect all events emitted by a stream and close it."""

    events: List[StreamEvent] = []
    try:
        async for event in stream:
            events.append(event)
    finally:
        await stream.aclose()
    return events


__all__ = [
    "BaseEventStream",
    "ChunkTranslator",
    "ContentBlockDeltaEvent",
    "ErrorEvent",
    "MessageDeltaEvent",
    "MessageStartEvent",
    "MessageStopEvent",
    "StreamEvent",
    "StreamState",
    "is_terminal",
    "message_start_event",
    "replay_stream",
]
