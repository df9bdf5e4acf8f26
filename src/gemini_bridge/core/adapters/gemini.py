"""Live adapter serving Claude requests from the Gemini API."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator as AsyncIteratorABC, Mapping
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    List,
    Protocol,
    runtime_checkable,
)

from ..errors import BridgeError, normalize_error
from ..schema import AssistantMessage, ModelList
from .base import ModelAdapter, RequestLike, coerce_request
from .stream import BaseEventStream, ChunkTranslator, StreamEvent
from .utils import (
    RequestConverter,
    ResponseConverter,
    new_message_id,
    to_claude_message,
    to_gemini_request,
)

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class GeminiBackend(Protocol):
    """Network client for the Gemini API, including its OAuth token lifecycle.

    ``generate_content_stream`` must return an async iterator of raw Gemini
    chunks without performing I/O until iterated. When a consumer closes the
    event stream early the bridge calls the iterator's ``aclose`` (or
    ``close``); releasing the HTTP connection at that point is the backend's
    responsibility. The bridge adds no timeouts of its own.
    """

    @property
    def is_initialized(self) -> bool: ...

    async def initialize(self) -> None: ...

    async def generate_content(
        self, model: str, request: Mapping[str, Any]
    ) -> Mapping[str, Any]: ...

    def generate_content_stream(
        self, model: str, request: Mapping[str, Any]
    ) -> AsyncIterator[Mapping[str, Any]]: ...

    async def list_models(self) -> Mapping[str, Any]: ...

    async def refresh_token(self) -> None: ...


class GeminiAdapter(ModelAdapter):
    """Translate Claude Messages requests to Gemini and responses back."""

    def __init__(
        self,
        backend: GeminiBackend,
        *,
        request_converter: RequestConverter | None = None,
        response_converter: ResponseConverter | None = None,
        logger: logging.Logger | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._backend = backend
        self._request_converter = request_converter or to_gemini_request
        self._response_converter = response_converter or to_claude_message
        self._logger = logger or LOGGER
        self._id_factory = id_factory or new_message_id

    @property
    def initialized(self) -> bool:
        return bool(getattr(self._backend, "is_initialized", False))

    async def initialize(self) -> None:
        if self.initialized:
            return
        await self._backend.initialize()
        self._logger.info("initialize backend=%s", type(self._backend).__name__)

    async def ensure_initialized(self) -> None:
        """Initialize the backend when a request finds it uninitialized."""

        if self.initialized:
            return
        self._logger.warning("Gemini backend not initialized, attempting to initialize")
        await self.initialize()

    async def generate_content(self, model: str, request: RequestLike) -> AssistantMessage:
        await self.ensure_initialized()

        try:
            self._logger.info("generate_content model=%s", model)
            prepared = coerce_request(request)
            gemini_request = self._request_converter(prepared)
            self._logger.debug("generate_content gemini_request=%s", gemini_request)
            response = await self._backend.generate_content(model, gemini_request)
            message = self._response_converter(response, model)
        except Exception as exc:
            error = normalize_error(exc)
            self._logger.error(
                "generate_content failed status=%s kind=%s message=%s",
                error.status,
                error.kind.value,
                error.message,
            )
            raise BridgeError(error) from exc

        return message

    def generate_content_stream(self, model: str, request: RequestLike) -> GeminiEventStream:
        translator = ChunkTranslator(message_id=self._id_factory(), model=model)

        async def _open_source() -> Any:
            self._logger.info(
                "generate_content_stream model=%s message_id=%s",
                model,
                translator.message_id,
            )
            prepared = coerce_request(request)
            gemini_request = self._request_converter(prepared)
            return self._backend.generate_content_stream(model, gemini_request)

        return GeminiEventStream(
            _open_source,
            translator,
            initializer=self.ensure_initialized,
            logger=self._logger,
        )

    async def list_models(self) -> ModelList:
        await self.ensure_initialized()

        try:
            payload = await self._backend.list_models()
            models = ModelList.model_validate(payload)
        except Exception as exc:
            error = normalize_error(exc)
            self._logger.error(
                "list_models failed status=%s kind=%s message=%s",
                error.status,
                error.kind.value,
                error.message,
            )
            raise BridgeError(error) from exc

        self._logger.info("list_models count=%s", len(models.models))
        return models

    async def refresh_token(self) -> None:
        try:
            await self._backend.refresh_token()
        except Exception:
            self._logger.exception("refresh_token failed")
            raise
        self._logger.info("refresh_token succeeded")


class GeminiEventStream(BaseEventStream):
    """Event stream fed by a Gemini chunk iterator."""

    def __init__(
        self,
        source_factory: Callable[[], Awaitable[Any]],
        translator: ChunkTranslator,
        *,
        initializer: Callable[[], Awaitable[None]] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__()
        self._source_factory = source_factory
        self._translator = translator
        self._initializer = initializer
        self._logger = logger or LOGGER
        self._source: Any = None
        self._iterator: AsyncIteratorABC[Any] | None = None

    @property
    def message_id(self) -> str:
        return self._translator.message_id

    async def _produce(self) -> List[StreamEvent]:
        if self._iterator is None:
            if self._initializer is not None:
                try:
                    await self._initializer()
                except Exception:
                    await self.aclose()
                    raise
            try:
                self._source = await self._source_factory()
                self._iterator = _coerce_async_iterator(self._source)
            except Exception as exc:
                return self._fail(exc)

        try:
            chunk = await self._iterator.__anext__()
        except StopAsyncIteration:
            return self._translator.finish()
        except Exception as exc:
            return self._fail(exc)

        try:
            return self._translator.translate(chunk)
        except Exception as exc:
            self._logger.warning(
                "skipping stream chunk message_id=%s error=%s",
                self.message_id,
                exc,
            )
            return []

    def _fail(self, exc: Exception) -> List[StreamEvent]:
        error = normalize_error(exc)
        self._logger.error(
            "generate_content_stream failed message_id=%s status=%s kind=%s message=%s",
            self.message_id,
            error.status,
            error.kind.value,
            error.message,
        )
        return self._translator.fail(error)

    async def _on_close(self) -> None:
        source = self._source
        if source is None:
            return
        for closer_name in ("aclose", "close"):
            closer = getattr(source, closer_name, None)
            if closer is None:
                continue
            result = closer()
            if inspect.isawaitable(result):
                await result
            return


def _coerce_async_iterator(stream: Any) -> AsyncIteratorABC[Any]:
    iterator_factory = getattr(stream, "__aiter__", None)
    if iterator_factory is None or not callable(iterator_factory):
        msg = "Gemini stream must support async iteration"
        raise TypeError(msg)
    iterator = iterator_factory()
    anext = getattr(iterator, "__anext__", None)
    if anext is None or not callable(anext):
        msg = "Gemini stream iterator must define '__anext__'"
        raise TypeError(msg)
    return iterator


__all__ = ["GeminiAdapter", "GeminiBackend", "GeminiEventStream"]
