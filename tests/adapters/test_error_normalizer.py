from __future__ import annotations

from types import SimpleNamespace

import pytest

from gemini_bridge.core.errors import (
    BridgeError,
    ErrorKind,
    NormalizedError,
    normalize_demo_error,
    normalize_error,
    status_to_kind,
)
from tests.fixtures.gemini_fake import FakeHTTPError, FakeStreamingHTTPError


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, ErrorKind.AUTHENTICATION),
        (403, ErrorKind.PERMISSION),
        (429, ErrorKind.RATE_LIMIT),
        (500, ErrorKind.API),
        (502, ErrorKind.API),
        (503, ErrorKind.API),
        (400, ErrorKind.INVALID_REQUEST),
        (404, ErrorKind.INVALID_REQUEST),
    ],
)
def test_status_codes_map_to_error_kinds(status: int, kind: ErrorKind) -> None:
    error = normalize_error(FakeHTTPError(status))

    assert error.status == status
    assert error.kind is kind
    assert status_to_kind(status) is kind


def test_backend_message_is_preferred() -> None:
    exc = FakeHTTPError(429, {"error": {"message": "Quota exceeded"}}, message="HTTP 429")

    error = normalize_error(exc)

    assert error == NormalizedError(status=429, kind=ErrorKind.RATE_LIMIT, message="Quota exceeded")


def test_generic_message_used_when_body_is_not_json() -> None:
    error = normalize_error(FakeHTTPError(403, None, message="Forbidden"))

    assert error.message == "Forbidden"
    assert error.kind is ErrorKind.PERMISSION


def test_aiohttp_style_response_with_data_mapping() -> None:
    exc = RuntimeError("boom")
    exc.response = SimpleNamespace(status=401, data={"error": {"message": "bad token"}})  # type: ignore[attr-defined]

    error = normalize_error(exc)

    assert error == NormalizedError(status=401, kind=ErrorKind.AUTHENTICATION, message="bad token")


def test_missing_response_is_an_api_error() -> None:
    error = normalize_error(ConnectionError("connection reset"))

    assert error == NormalizedError(status=500, kind=ErrorKind.API, message="connection reset")


def test_missing_response_without_message_uses_fallback() -> None:
    error = normalize_error(RuntimeError())

    assert error.status == 500
    assert error.kind is ErrorKind.API
    assert error.message == "Internal server error"


def test_bridge_errors_pass_through_unchanged() -> None:
    original = NormalizedError(status=401, kind=ErrorKind.AUTHENTICATION, message="expired")

    assert normalize_error(BridgeError(original)) is original


def test_demo_errors_are_prefixed() -> None:
    error = normalize_demo_error(ValueError("template missing"))

    assert error == NormalizedError(
        status=500,
        kind=ErrorKind.API,
        message="Demo mode error: template missing",
    )


def test_bridge_error_exposes_record() -> None:
    record = NormalizedError(status=503, kind=ErrorKind.API, message="unavailable")
    exc = BridgeError(record)

    assert str(exc) == "unavailable"
    assert exc.status == 503
    assert exc.kind is ErrorKind.API
    assert record.to_dict() == {"type": "api_error", "status": 503, "message": "unavailable"}


def test_unread_streaming_body_falls_back_to_exception_text() -> None:
    error = normalize_error(FakeStreamingHTTPError(429, message="Client error '429 Too Many Requests'"))

    assert error == NormalizedError(
        status=429,
        kind=ErrorKind.RATE_LIMIT,
        message="Client error '429 Too Many Requests'",
    )
