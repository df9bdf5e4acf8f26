"""Error taxonomy shared by the adapters and the normalizers feeding it."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Claude error types surfaced to callers."""

    AUTHENTICATION = "authentication_error"
    PERMISSION = "permission_error"
    RATE_LIMIT = "rate_limit_error"
    API = "api_error"
    INVALID_REQUEST = "invalid_request_error"


_STATUS_KINDS = {
    401: ErrorKind.AUTHENTICATION,
    403: ErrorKind.PERMISSION,
    429: ErrorKind.RATE_LIMIT,
    500: ErrorKind.API,
    502: ErrorKind.API,
    503: ErrorKind.API,
}

GENERIC_MESSAGE = "Internal server error"


@dataclass(frozen=True, slots=True)
class NormalizedError:
    """Transport failure expressed in the Claude error vocabulary."""

    status: int
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind.value, "status": self.status, "message": self.message}


class BridgeError(RuntimeError):
    """Raised when an adapter operation fails with a normalized error."""

    def __init__(self, error: NormalizedError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status(self) -> int:
        return self.error.status

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


class ChunkTranslationError(BridgeError):
    """Raised when a single streamed chunk cannot be translated."""

    def __init__(self, message: str) -> None:
        super().__init__(NormalizedError(status=500, kind=ErrorKind.API, message=message))


def status_to_kind(status: int) -> ErrorKind:
    """Map an HTTP status code onto the Claude error taxonomy."""

    return _STATUS_KINDS.get(status, ErrorKind.INVALID_REQUEST)


def normalize_error(exc: BaseException) -> NormalizedError:
    """Translate a backend or transport failure into a :class:`NormalizedError`.

    Errors carrying an HTTP ``response`` keep its status code and prefer the
    backend supplied ``error.message`` from the response body. Anything else is
    reported as a 500 ``api_error``.
    """

    if isinstance(exc, BridgeError):
        return exc.error

    response = getattr(exc, "response", None)
    if response is None:
        return NormalizedError(
            status=500,
            kind=ErrorKind.API,
            message=str(exc) or GENERIC_MESSAGE,
        )

    status = _response_status(response)
    message = _response_message(response) or str(exc) or GENERIC_MESSAGE
    return NormalizedError(status=status, kind=status_to_kind(status), message=message)


def normalize_demo_error(exc: BaseException) -> NormalizedError:
    """Wrap an internal Demo adapter failure."""

    return NormalizedError(
        status=500,
        kind=ErrorKind.API,
        message=f"Demo mode error: {exc}",
    )


def _response_status(response: Any) -> int:
    for attribute in ("status_code", "status"):
        value = getattr(response, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return 500


def _response_message(response: Any) -> str | None:
    body = _response_body(response)
    if not isinstance(body, Mapping):
        return None
    error = body.get("error")
    if not isinstance(error, Mapping):
        return None
    message = error.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def _response_body(response: Any) -> Any:
    data = getattr(response, "data", None)
    if isinstance(data, Mapping):
        return data

    reader = getattr(response, "json", None)
    if reader is None or not callable(reader):
        return None
    try:
        body = reader()
    except Exception:
        # Unreadable or non-JSON body; fall back to the exception text.
        return None
    if inspect.iscoroutine(body):
        # Async clients expose the body only after awaiting.
        body.close()
        return None
    return body


__all__ = [
    "BridgeError",
    "ChunkTranslationError",
    "ErrorKind",
    "GENERIC_MESSAGE",
    "NormalizedError",
    "normalize_demo_error",
    "normalize_error",
    "status_to_kind",
]
