from __future__ import annotations

import asyncio

import pytest

from gemini_bridge.core.adapters import GeminiAdapter, GeminiBackend
from gemini_bridge.core.errors import BridgeError, ErrorKind
from gemini_bridge.core.schema import MessagesRequest
from tests.fixtures.gemini_fake import (
    FakeGeminiBackend,
    FakeHTTPError,
    FakeStreamingHTTPError,
    text_response,
    user_request,
)


def test_fake_backend_satisfies_protocol() -> None:
    assert isinstance(FakeGeminiBackend(), GeminiBackend)


def test_generate_content_returns_claude_message() -> None:
    backend = FakeGeminiBackend(response=text_response("All systems nominal.", output_tokens=3))
    adapter = GeminiAdapter(backend)

    message = asyncio.run(
        adapter.generate_content("gemini-1.5-pro", user_request("Status?", system="Monitor"))
    )

    assert message.id.startswith("msg_")
    assert message.text == "All systems nominal."
    assert message.model == "gemini-1.5-pro"
    assert message.stop_reason == "end_turn"
    assert message.usage.output_tokens == 3

    [call] = backend.calls
    assert call.model == "gemini-1.5-pro"
    assert call.request["contents"] == [{"role": "user", "parts": [{"text": "Status?"}]}]
    assert call.request["systemInstruction"] == {"parts": [{"text": "Monitor"}]}


def test_generate_content_accepts_request_models() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    request = MessagesRequest.model_validate(user_request("Hi"))
    message = asyncio.run(adapter.generate_content("gemini-1.5-flash", request))

    assert message.text == "Hi"


def test_generate_content_uses_injected_converters() -> None:
    seen = {}

    def request_converter(request: MessagesRequest) -> dict:
        seen["request"] = request
        return {"custom": True}

    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend, request_converter=request_converter)

    asyncio.run(adapter.generate_content("m", user_request("Hi")))

    assert isinstance(seen["request"], MessagesRequest)
    assert backend.calls[0].request == {"custom": True}


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, ErrorKind.AUTHENTICATION),
        (403, ErrorKind.PERMISSION),
        (429, ErrorKind.RATE_LIMIT),
        (503, ErrorKind.API),
        (400, ErrorKind.INVALID_REQUEST),
    ],
)
def test_backend_errors_are_normalized(status: int, kind: ErrorKind) -> None:
    backend = FakeGeminiBackend(
        initialized=True,
        error=FakeHTTPError(status, {"error": {"message": f"backend said {status}"}}),
    )
    adapter = GeminiAdapter(backend)

    with pytest.raises(BridgeError) as excinfo:
        asyncio.run(adapter.generate_content("m", user_request("Hi")))

    assert excinfo.value.status == status
    assert excinfo.value.kind is kind
    assert excinfo.value.error.message == f"backend said {status}"
    assert isinstance(excinfo.value.__cause__, FakeHTTPError)


def test_response_conversion_failure_is_normalized() -> None:
    backend = FakeGeminiBackend(response={"candidates": []})
    adapter = GeminiAdapter(backend)

    with pytest.raises(BridgeError) as excinfo:
        asyncio.run(adapter.generate_content("m", user_request("Hi")))

    assert excinfo.value.status == 500
    assert excinfo.value.kind is ErrorKind.API


def test_invalid_request_is_normalized() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    with pytest.raises(BridgeError) as excinfo:
        asyncio.run(adapter.generate_content("m", {"messages": "not a list"}))

    assert excinfo.value.kind is ErrorKind.API
    assert backend.calls == []


def test_initialize_is_idempotent() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    async def _run() -> None:
        await adapter.initialize()
        await adapter.initialize()
        await adapter.generate_content("m", user_request("Hi"))

    asyncio.run(_run())

    assert backend.init_calls == 1
    assert adapter.initialized


def test_requests_initialize_lazily() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    assert not adapter.initialized
    asyncio.run(adapter.generate_content("m", user_request("Hi")))

    assert backend.init_calls == 1


def test_initialization_failure_propagates_untranslated() -> None:
    backend = FakeGeminiBackend(init_error=FileNotFoundError("oauth_creds.json"))
    adapter = GeminiAdapter(backend)

    with pytest.raises(FileNotFoundError):
        asyncio.run(adapter.generate_content("m", user_request("Hi")))


def test_list_models_validates_backend_payload() -> None:
    backend = FakeGeminiBackend(
        models={
            "models": [
                {
                    "name": "models/gemini-1.5-pro",
                    "displayName": "Gemini 1.5 Pro",
                    "description": "High-performance model",
                    "inputTokenLimit": 2097152,
                }
            ]
        }
    )
    adapter = GeminiAdapter(backend)

    models = asyncio.run(adapter.list_models())

    assert models.to_dict() == {
        "models": [
            {
                "name": "models/gemini-1.5-pro",
                "displayName": "Gemini 1.5 Pro",
                "description": "High-performance model",
            }
        ]
    }


def test_list_models_errors_are_normalized() -> None:
    backend = FakeGeminiBackend(initialized=True, error=FakeHTTPError(403))
    adapter = GeminiAdapter(backend)

    with pytest.raises(BridgeError) as excinfo:
        asyncio.run(adapter.list_models())

    assert excinfo.value.kind is ErrorKind.PERMISSION


def test_refresh_token_delegates() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    asyncio.run(adapter.refresh_token())

    assert backend.refresh_calls == 1


def test_refresh_token_errors_are_not_normalized() -> None:
    original = FakeHTTPError(401, {"error": {"message": "invalid_grant"}})
    backend = FakeGeminiBackend(refresh_error=original)
    adapter = GeminiAdapter(backend)

    with pytest.raises(FakeHTTPError) as excinfo:
        asyncio.run(adapter.refresh_token())

    assert excinfo.value is original


def test_unreadable_error_body_still_raises_bridge_error() -> None:
    backend = FakeGeminiBackend(
        initialized=True,
        error=FakeStreamingHTTPError(503, message="Server error '503 Service Unavailable'"),
    )
    adapter = GeminiAdapter(backend)

    with pytest.raises(BridgeError) as excinfo:
        asyncio.run(adapter.generate_content("m", user_request("Hi")))

    assert excinfo.value.status == 503
    assert excinfo.value.kind is ErrorKind.API
    assert excinfo.value.error.message == "Server error '503 Service Unavailable'"


def test_concurrent_requests_on_uninitialized_adapter() -> None:
    backend = FakeGeminiBackend()
    adapter = GeminiAdapter(backend)

    async def _run() -> list:
        return await asyncio.gather(
            adapter.generate_content("m", user_request("Hi")),
            adapter.generate_content("m", user_request("Hi")),
        )

    first, second = asyncio.run(_run())

    assert first.text == second.text == "Hi"
    assert first.id != second.id
    assert adapter.initialized
    assert 1 <= backend.init_calls <= 2
    assert len(backend.calls) == 2
