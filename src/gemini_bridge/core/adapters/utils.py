"""Pure conversion helpers shared by adapter implementations."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable
from uuid import uuid4

from ..schema import AssistantMessage, MessagesRequest, TextBlock, Usage

FINISH_REASON_MAP: Mapping[str, str] = {
    "STOP": "end_turn",
    "MAX_TOKENS": "max_tokens",
    "SAFETY": "stop_sequence",
    "RECITATION": "stop_sequence",
    "OTHER": "end_turn",
}
DEFAULT_STOP_REASON = "end_turn"

_GENERATION_FIELDS = {
    "max_tokens": "maxOutputTokens",
    "temperature": "temperature",
    "top_p": "topP",
    "top_k": "topK",
    "stop_sequences": "stopSequences",
}

RequestConverter = Callable[[MessagesRequest], Mapping[str, Any]]
ResponseConverter = Callable[[Mapping[str, Any], str], AssistantMessage]


def new_message_id() -> str:
    """Return a fresh Claude style message identifier."""

    return f"msg_{uuid4()}"


def map_finish_reason(finish_reason: str | None) -> str:
    """Map a Gemini ``finishReason`` onto a Claude ``stop_reason``."""

    if finish_reason is None:
        return DEFAULT_STOP_REASON
    return FINISH_REASON_MAP.get(finish_reason, DEFAULT_STOP_REASON)


def extract_text(content: Any) -> str:
    """Flatten string or content-block message content into plain text."""

    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, Sequence):
        fragments: list[str] = []
        for block in content:
            if isinstance(block, Mapping) and block.get("type", "text") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    fragments.append(text)
        return "".join(fragments)
    msg = f"unsupported message content type {type(content).__name__}"
    raise TypeError(msg)


def to_gemini_request(request: MessagesRequest) -> dict[str, Any]:
    """Convert a Claude request into a Gemini ``generateContent`` body."""

    contents: list[dict[str, Any]] = []
    for message in request.messages:
        role = "model" if message.role == "assistant" else "user"
        contents.append({"role": role, "parts": _to_parts(message.content)})

    payload: dict[str, Any] = {"contents": contents}

    if request.system:
        payload["systemInstruction"] = {"parts": _to_parts(request.system)}

    generation_config: dict[str, Any] = {}
    for claude_name, gemini_name in _GENERATION_FIELDS.items():
        value = getattr(request, claude_name)
        if value is not None:
            generation_config[gemini_name] = value
    if generation_config:
        payload["generationConfig"] = generation_config

    return payload


def to_claude_message(
    response: Mapping[str, Any],
    model: str,
    *,
    message_id: str | None = None,
) -> AssistantMessage:
    """Convert a Gemini ``generateContent`` response into a Claude message."""

    candidates = response.get("candidates")
    if not isinstance(candidates, Sequence) or not candidates:
        msg = "Gemini response contained no candidates"
        raise ValueError(msg)

    candidate = candidates[0]
    if not isinstance(candidate, Mapping):
        msg = "Gemini candidate must be a mapping"
        raise ValueError(msg)

    content = candidate.get("content")
    parts: Sequence[Any] = []
    if isinstance(content, Mapping):
        parts = content.get("parts") or []
    text = "".join(
        part["text"]
        for part in parts
        if isinstance(part, Mapping) and isinstance(part.get("text"), str)
    )

    usage_metadata = response.get("usageMetadata") or {}
    usage = Usage(
        input_tokens=int(usage_metadata.get("promptTokenCount") or 0),
        output_tokens=int(usage_metadata.get("candidatesTokenCount") or 0),
    )

    return AssistantMessage(
        id=message_id or new_message_id(),
        content=[TextBlock(text=text)],
        model=model,
        stop_reason=map_finish_reason(candidate.get("finishReason")),
        usage=usage,
    )


def _to_parts(content: Any) -> list[dict[str, str]]:
    if isinstance(content, str):
        return [{"text": content}]
    parts: list[dict[str, str]] = []
    for block in content:
        text = extract_text([block])
        if text:
            parts.append({"text": text})
    return parts


__all__ = [
    "DEFAULT_STOP_REASON",
    "FINISH_REASON_MAP",
    "RequestConverter",
    "ResponseConverter",
    "extract_text",
    "map_finish_reason",
    "new_message_id",
    "to_claude_message",
    "to_gemini_request",
]
