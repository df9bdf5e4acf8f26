"""Claude Messages wire schemas consumed and produced by the adapters."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TextBlock(BaseModel):
    """A single text content block."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["text"] = "text"
    text: str = Field(..., description="Text carried by the block.")


class RequestMessage(BaseModel):
    """One conversation turn in a Claude request."""

    model_config = ConfigDict(extra="allow")

    role: str = Field(..., description="Author of the turn, usually 'user' or 'assistant'.")
    content: Union[str, List[Dict[str, Any]]] = Field(
        default="",
        description="Plain text or a list of Claude content blocks.",
    )


class MessagesRequest(BaseModel):
    """Claude ``/v1/messages`` request body."""

    model_config = ConfigDict(extra="allow")

    model: Optional[str] = Field(None, description="Requested model identifier.")
    messages: List[RequestMessage] = Field(default_factory=list, description="Ordered conversation.")
    stream: bool = Field(False, description="Whether the caller asked for a streamed response.")
    system: Optional[Union[str, List[Dict[str, Any]]]] = Field(None, description="System prompt.")
    max_tokens: Optional[int] = Field(None, description="Upper bound on generated tokens.")
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[List[str]] = None


class Usage(BaseModel):
    """Token accounting reported with a message."""

    model_config = ConfigDict(extra="forbid")

    input_tokens: int = 0
    output_tokens: int = 0


class AssistantMessage(BaseModel):
    """Claude non-streaming response body."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Message identifier, prefixed with 'msg_'.")
    type: Literal["message"] = "message"
    role: Literal["assistant"] = "assistant"
    content: List[TextBlock] = Field(default_factory=list)
    model: str
    stop_reason: Optional[str] = None
    stop_sequence: None = None
    usage: Usage = Field(default_factory=Usage)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""

        return "".join(block.text for block in self.content)


class ModelInfo(BaseModel):
    """A model entry as reported by the Gemini model listing."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str
    display_name: str = Field("", alias="displayName")
    description: str = ""


class ModelList(BaseModel):
    """Response of ``list_models``."""

    model_config = ConfigDict(extra="ignore")

    models: List[ModelInfo] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = [
    "AssistantMessage",
    "MessagesRequest",
    "ModelInfo",
    "ModelList",
    "RequestMessage",
    "TextBlock",
    "Usage",
]
