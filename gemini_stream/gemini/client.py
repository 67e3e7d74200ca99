"""Gemini REST client built on the shared httpx pool.

Behavior:
- ``stream_generate`` posts to ``models/{model}:streamGenerateContent`` and
  returns a :class:`StreamController` over the response body. Nothing is
  sent until the controller is iterated.
- Non-200 responses become a SERVICE terminal event (see ``http_errors``).
- Transport exceptions (connect/read failures, timeouts) become a
  TRANSPORT terminal event; they are never raised to the caller.
- ``count_tokens`` is a plain request/response call and raises
  ``StreamError`` on failure.

The API key travels as the ``key`` query parameter and is never logged.
"""

from __future__ import annotations

import threading
import time
import uuid
from typing import Iterator, List, Optional

import httpx
from pydantic import ValidationError

from ..base.cancellation import CancellationToken
from ..base.constants import MISSING_API_KEY_ERROR
from ..base.errors import ErrorKind, StreamError, to_stream_error
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import GenerationResult, StreamController
from ..config import get_client_config
from ..config.defaults import GEMINI_ACCEPT_HEADER
from ..config.env import API_KEY_ENV_NAMES
from .http_errors import service_error_from_http
from .request import (
    CountTokensRequest,
    CountTokensResponse,
    GenerateContentRequest,
    GenerationConfig,
    RequestContent,
    Tools,
)

_POOL_PURPOSE = "gemini"


def _model_path(model: str) -> str:
    """Accept both ``gemini-pro`` and ``models/gemini-pro``."""
    return model[len("models/"):] if model.startswith("models/") else model


class _ResponseBytes:
    """Lazily opened response body, closable from any thread.

    Iteration sends the request, checks the status, and yields raw body
    chunks. ``close`` releases the connection; a read in progress on another
    thread then fails, which the controller reports as cancelled when its
    token is set.
    """

    def __init__(self, client: httpx.Client, request: httpx.Request, on_open=None) -> None:
        self._client = client
        self._request = request
        self._on_open = on_open
        self._response: Optional[httpx.Response] = None
        self._closed = False
        self._lock = threading.Lock()

    def __iter__(self) -> Iterator[bytes]:
        with self._lock:
            if self._closed:
                return
        response = self._client.send(self._request, stream=True)
        with self._lock:
            self._response = response
            closed = self._closed
        if closed:
            response.close()
            return
        if self._on_open is not None:
            self._on_open(response)
        try:
            if response.status_code != 200:
                body = response.read()
                raise service_error_from_http(response.status_code, body, response.reason_phrase)
            yield from response.iter_bytes()
        finally:
            response.close()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            response = self._response
        if response is not None:
            response.close()


class GeminiStreamClient:
    """Streams ``generateContent`` responses from the Gemini REST API.

    Parameters default to :func:`get_client_config`; explicit arguments win.
    ``http_client`` replaces the pooled client (tests pass one built on
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        max_element_bytes: Optional[int] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        cfg = get_client_config(
            {"api_key": api_key, "model": model, "base_url": base_url, "max_element_bytes": max_element_bytes}
        )
        self._api_key: Optional[str] = cfg.get("api_key")
        self._model: str = cfg["model"]
        self._base_url: str = cfg["base_url"]
        self._max_element_bytes: int = cfg["max_element_bytes"]
        self._http_client = http_client
        self._logger = get_logger("gemini_stream.gemini")

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def max_element_bytes(self) -> int:
        return self._max_element_bytes

    def _client(self) -> httpx.Client:
        return self._http_client or get_httpx_client(None, _POOL_PURPOSE)

    def _require_api_key(self) -> str:
        if not self._api_key:
            raise StreamError(
                kind=ErrorKind.CONFIG,
                message=f"{MISSING_API_KEY_ERROR}: set one of {', '.join(API_KEY_ENV_NAMES)}",
            )
        return self._api_key

    def _url(self, model: str, method: str) -> str:
        return f"{self._base_url}/models/{_model_path(model)}:{method}"

    def _build_request(self, model: str, method: str, payload: dict) -> httpx.Request:
        return self._client().build_request(
            "POST",
            self._url(model, method),
            params={"key": self._require_api_key()},
            headers={"Accept": GEMINI_ACCEPT_HEADER},
            json=payload,
        )

    # ---- Streaming ----
    def stream_generate(
        self,
        prompt: str | GenerateContentRequest,
        *,
        model: Optional[str] = None,
        generation_config: Optional[GenerationConfig] = None,
        tools: Optional[List[Tools]] = None,
        token: Optional[CancellationToken] = None,
    ) -> StreamController:
        """Return a controller streaming the generation for ``prompt``.

        Raises:
            StreamError: ``CONFIG`` when no API key is configured. Every later
                failure is reported through the controller's terminal event.
        """
        model = model or self._model
        if isinstance(prompt, GenerateContentRequest):
            request = prompt
        else:
            request = GenerateContentRequest.from_prompt(
                prompt, generation_config=generation_config, tools=tools
            )
        http_request = self._build_request(model, "streamGenerateContent", request.to_wire())
        ctx = LogContext(model=model, request_id=uuid.uuid4().hex[:12])
        t0 = time.perf_counter()

        def _on_open(response: httpx.Response) -> None:
            normalized_log_event(
                self._logger,
                "request.start",
                ctx,
                phase="start",
                status_code=response.status_code,
                latency_ms=(time.perf_counter() - t0) * 1000.0,
            )

        return StreamController(
            _ResponseBytes(self._client(), http_request, on_open=_on_open),
            max_element_bytes=self._max_element_bytes,
            token=token,
            logger=get_logger("gemini_stream.stream"),
            ctx=ctx,
        )

    def generate(self, prompt: str | GenerateContentRequest, **kwargs) -> GenerationResult:
        """Stream ``prompt`` to completion and return the aggregated result."""
        return self.stream_generate(prompt, **kwargs).run()

    # ---- Token counting ----
    def count_tokens(self, prompt: str, *, model: Optional[str] = None) -> int:
        """Return the service's token count for ``prompt``.

        Raises:
            StreamError: ``CONFIG`` without an API key, ``SERVICE`` for an
                HTTP error status, ``SCHEMA`` for an unexpected body, and
                ``TRANSPORT`` for network failures.
        """
        model = model or self._model
        ctx = LogContext(model=model, request_id=uuid.uuid4().hex[:12])
        payload = CountTokensRequest(contents=[RequestContent.from_text(prompt)]).to_wire()
        http_request = self._build_request(model, "countTokens", payload)
        try:
            response = self._client().send(http_request)
            if response.status_code != 200:
                raise service_error_from_http(response.status_code, response.content, response.reason_phrase)
            try:
                parsed = CountTokensResponse.model_validate_json(response.content)
            except ValidationError as exc:
                raise StreamError(
                    kind=ErrorKind.SCHEMA,
                    message=f"malformed countTokens response: {exc.error_count()} validation error(s)",
                    raw=response.content,
                    cause=exc,
                ) from exc
        except Exception as exc:
            failure = to_stream_error(exc)
            normalized_log_event(
                self._logger,
                "request.error",
                ctx,
                phase="finalize",
                error_code=failure.kind.value,
                error=failure.to_dict(),
            )
            if failure is exc:
                raise
            raise failure from exc
        return parsed.total_tokens


__all__ = ["GeminiStreamClient"]
