"""StreamController: the decode -> classify -> aggregate pipeline.

Wraps a byte source (any iterable of ``bytes``, typically
``httpx.Response.iter_bytes()``) and exposes a cancellable iterator of
``StreamEvent`` objects:

* one non-terminal event per chunk element, carrying its text delta;
* exactly one terminal event (``finish=True``) carrying ``None`` on success
  or the ``StreamError`` that ended the stream.

The pipeline is pulled by the consumer: bytes are read from the source only
when the next element is needed, and reading stops at the first service
error element. The source is closed (and ``on_close`` invoked) when the
stream ends, fails, is cancelled, or the consumer abandons the iterator.
"""
from __future__ import annotations

import logging
import time
from contextlib import ExitStack, suppress
from typing import Callable, Iterable, Iterator, Optional, assert_never

from ..cancellation import CancellationToken, CancelledError
from ..constants import DEFAULT_MAX_ELEMENT_BYTES
from ..errors import ErrorKind, StreamError, to_stream_error
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import ResponseChunk, ResponseError
from .aggregator import TextAggregator
from .array_decoder import iter_json_array
from .classifier import classify_element
from .streaming import AggregatorState, GenerationResult, StreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics, apply_usage


class StreamController:
    """Single-use, cancellable iterator over a streamed generation.

    Responsibilities:
      * Decode array elements from the byte source as they complete.
      * Classify each element and feed chunks to a ``TextAggregator``.
      * Expose ``cancel(reason)`` for cooperative cancellation.
      * Track the terminal event and final ``GenerationResult``.
    """

    def __init__(
        self,
        source: Iterable[bytes],
        *,
        max_element_bytes: int = DEFAULT_MAX_ELEMENT_BYTES,
        token: CancellationToken | None = None,
        logger: logging.Logger | None = None,
        ctx: LogContext | None = None,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self._source = source
        self._max_element_bytes = max_element_bytes
        self._token = token or CancellationToken()
        self._logger = logger or get_logger("gemini_stream.stream")
        self._ctx = ctx or LogContext()
        self._on_close = on_close
        self._aggregator = TextAggregator()
        self.metrics = StreamMetrics()
        self._started = False
        self._released = False
        self._terminal_event: StreamEvent | None = None
        self._token.on_cancel(self._release)

    # Iteration ------------------------------------------------------------
    def __iter__(self) -> Iterator[StreamEvent]:
        if self._started:
            raise RuntimeError("StreamController can only be iterated once")
        self._started = True
        return self._run()

    def _run(self) -> Iterator[StreamEvent]:
        t0 = time.perf_counter()
        with ExitStack() as stack:
            stack.callback(self._release)
            normalized_log_event(
                self._logger,
                "stream.start",
                self._ctx,
                phase="start",
                max_element_bytes=self._max_element_bytes,
            )
            try:
                self._token.raise_if_cancelled()
                for element in iter_json_array(self._pull(), max_element_bytes=self._max_element_bytes):
                    self._token.raise_if_cancelled()
                    self.metrics.elements += 1
                    classified = classify_element(element)
                    match classified:
                        case ResponseError():
                            failure = self._aggregator.fail(classified)
                            yield self._finish(t0, failure)
                            return
                        case ResponseChunk():
                            yield self._on_chunk(t0, classified)
                        case _:
                            assert_never(classified)
                self._token.raise_if_cancelled()
            except CancelledError as exc:
                failure = self._aggregator.fail(
                    StreamError(kind=ErrorKind.CANCELLED, message=str(exc) or "operation cancelled", cause=exc)
                )
                yield self._finish(t0, failure)
                return
            except StreamError as exc:
                yield self._finish(t0, self._aggregator.fail(exc))
                return
            except Exception as exc:  # raised by the byte source (transport)
                if self._token.cancelled:
                    failure = StreamError(
                        kind=ErrorKind.CANCELLED,
                        message=self._token.reason or "operation cancelled",
                        cause=exc,
                    )
                else:
                    failure = to_stream_error(exc)
                yield self._finish(t0, self._aggregator.fail(failure))
                return
            self._aggregator.complete()
            yield self._finish(t0, None)

    def _pull(self) -> Iterator[bytes]:
        for data in self._source:
            self._token.raise_if_cancelled()
            yield data
        # A cancel-triggered close ends the source early; report it as such.
        self._token.raise_if_cancelled()

    def _on_chunk(self, t0: float, chunk: ResponseChunk) -> StreamEvent:
        delta = self._aggregator.add_chunk(chunk)
        apply_usage(self.metrics, chunk.usage_metadata)
        if delta:
            if self.metrics.time_to_first_token_ms is None:
                self.metrics.time_to_first_token_ms = (time.perf_counter() - t0) * 1000.0
            self.metrics.emitted += 1
        if self._logger.isEnabledFor(logging.DEBUG):
            log_event(
                self._logger,
                "stream.element",
                self._ctx,
                level=logging.DEBUG,
                index=self.metrics.elements - 1,
                delta_len=len(delta),
                candidates=len(chunk.candidates),
                finish_reasons=[c.finish_reason for c in chunk.candidates if c.finish_reason],
            )
        return StreamEvent(delta=delta, chunk=chunk)

    def _finish(self, t0: float, error: StreamError | None) -> StreamEvent:
        self.metrics.total_duration_ms = (time.perf_counter() - t0) * 1000.0
        self._release()
        event = finalize_stream(logger=self._logger, ctx=self._ctx, metrics=self.metrics, error=error)
        self._terminal_event = event
        return event

    def _release(self) -> None:
        """Close the byte source and run ``on_close`` (idempotent)."""
        if self._released:
            return
        self._released = True
        # A token shared across streams must not keep finished controllers alive.
        self._token.remove_callback(self._release)
        close_fn = getattr(self._source, "close", None)
        if callable(close_fn):
            with suppress(Exception):
                close_fn()
        if self._on_close is not None:
            with suppress(Exception):
                self._on_close()

    # API -----------------------------------------------------------------
    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation of the stream.

        The source is closed immediately; the next step of iteration yields a
        ``cancelled`` terminal event. Safe to invoke multiple times or after
        completion.
        """
        self._token.cancel(reason)

    def run(self) -> GenerationResult:
        """Drain the stream and return the final result."""
        for _ in self:
            pass
        return self.result

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the stream has emitted its terminal event."""
        return self._terminal_event is not None

    @property
    def error(self) -> StreamError | None:  # noqa: D401 - short property
        """Return the failure carried by the terminal event (if any)."""
        return self._terminal_event.error if self._terminal_event else None

    @property
    def state(self) -> AggregatorState:
        return self._aggregator.state

    @property
    def text(self) -> str:
        return self._aggregator.text

    @property
    def result(self) -> GenerationResult:
        return self._aggregator.result()


__all__ = ["StreamController"]
