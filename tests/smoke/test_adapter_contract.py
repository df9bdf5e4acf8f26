from __future__ import annotations

import asyncio
import random

import pytest

from gemini_bridge.core.adapters import DemoAdapter, GeminiAdapter, ModelAdapter
from gemini_bridge.core.schema import AssistantMessage, ModelList
from tests.fixtures.gemini_fake import FakeGeminiBackend, FakeSourceStream, token_chunks, user_request
from tests.harness import assert_well_formed, collect


def _live() -> ModelAdapter:
    return GeminiAdapter(FakeGeminiBackend(stream=FakeSourceStream(token_chunks())))


def _demo() -> ModelAdapter:
    return DemoAdapter(rng=random.Random(0), response_delay=0, word_delay=0)


ADAPTERS = pytest.mark.parametrize("factory", [_live, _demo], ids=["live", "demo"])


@ADAPTERS
def test_adapter_implements_interface(factory) -> None:
    adapter = factory()

    assert isinstance(adapter, ModelAdapter)
    asyncio.run(adapter.initialize())
    assert adapter.initialized


@ADAPTERS
def test_generate_content_shape(factory) -> None:
    message = asyncio.run(factory().generate_content("gemini-1.5-flash", user_request("Hi")))

    assert isinstance(message, AssistantMessage)
    assert message.id.startswith("msg_")
    assert message.stop_reason == "end_turn"
    assert message.text


@ADAPTERS
def test_stream_is_well_formed(factory) -> None:
    events = collect(factory(), "gemini-1.5-flash", user_request("Hi"))

    assert_well_formed(events)
    assert events[0].message.model == "gemini-1.5-flash"


@ADAPTERS
def test_list_models_shape(factory) -> None:
    assert isinstance(asyncio.run(factory().list_models()), ModelList)
