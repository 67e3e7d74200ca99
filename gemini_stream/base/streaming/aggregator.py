"""Text aggregator: folds classified elements into printable output.

State machine::

    RUNNING --chunk--> RUNNING
    RUNNING --error--> ERRORED     (terminal, stop reading)
    RUNNING --end----> COMPLETED   (terminal)

Text is taken from every ``TextPart`` of every candidate that has content,
in arrival order. Candidates without content (suppressed, e.g. ``SAFETY``)
contribute nothing and are not failures. Other part kinds are not printed;
function calls are collected for callers that need structured output.
Text aggregated before a failure is kept.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, assert_never

from ..errors import ErrorKind, StreamError
from ..models import (
    ContentPart,
    FileDataPart,
    FunctionCall,
    FunctionCallPart,
    InlineDataPart,
    ResponseChunk,
    ResponseElement,
    ResponseError,
    TextPart,
    UsageMetadata,
)
from .streaming import AggregatorState, GenerationResult, StreamEvent


def iter_parts(chunk: ResponseChunk) -> Iterator[ContentPart]:
    """Yield the parts of every candidate that carries content, in order."""
    for candidate in chunk.candidates:
        if candidate.content is None:
            continue
        yield from candidate.content.parts


def part_text(part: ContentPart) -> Optional[str]:
    """Return the printable text of ``part`` (``None`` for non-text parts)."""
    match part:
        case TextPart(text=text):
            return text
        case InlineDataPart() | FileDataPart() | FunctionCallPart():
            return None
        case _:
            assert_never(part)


def extract_text(chunk: ResponseChunk) -> str:
    """Concatenate the text parts of ``chunk``."""
    return "".join(t for t in map(part_text, iter_parts(chunk)) if t is not None)


def function_calls(chunk: ResponseChunk) -> List[FunctionCall]:
    """Return the function calls carried by ``chunk``."""
    calls: List[FunctionCall] = []
    for part in iter_parts(chunk):
        match part:
            case FunctionCallPart(function_call=call):
                calls.append(call)
            case TextPart() | InlineDataPart() | FileDataPart():
                pass
            case _:
                assert_never(part)
    return calls


def service_failure(error: ResponseError, *, partial_text: str = "") -> StreamError:
    """Wrap an in-band ``ResponseError`` as a SERVICE ``StreamError``."""
    return StreamError(
        kind=ErrorKind.SERVICE,
        message=error.message,
        service_error=error,
        partial_text=partial_text,
    )


class TextAggregator:
    """Accumulates output for one streamed generation."""

    def __init__(self) -> None:
        self._pieces: List[str] = []
        self._state = AggregatorState.RUNNING
        self._error: Optional[StreamError] = None
        self._function_calls: List[FunctionCall] = []
        self._usage: Optional[UsageMetadata] = None
        self._chunk_count = 0

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def text(self) -> str:
        return "".join(self._pieces)

    @property
    def error(self) -> Optional[StreamError]:
        return self._error

    @property
    def function_calls(self) -> List[FunctionCall]:
        return list(self._function_calls)

    @property
    def usage(self) -> Optional[UsageMetadata]:
        """Usage metadata from the most recent chunk that carried it."""
        return self._usage

    def _require_running(self, action: str) -> None:
        if self._state is not AggregatorState.RUNNING:
            raise RuntimeError(f"cannot {action}: aggregator is {self._state.value}")

    def add_chunk(self, chunk: ResponseChunk) -> str:
        """Append the text of ``chunk`` and return the appended delta."""
        self._require_running("add chunk")
        delta = extract_text(chunk)
        if delta:
            self._pieces.append(delta)
        self._function_calls.extend(function_calls(chunk))
        if chunk.usage_metadata is not None:
            self._usage = chunk.usage_metadata
        self._chunk_count += 1
        return delta

    def fail(self, error: StreamError | ResponseError) -> StreamError:
        """Transition to ERRORED; returns the failure with partial text attached."""
        self._require_running("fail")
        if isinstance(error, ResponseError):
            failure = service_failure(error, partial_text=self.text)
        else:
            failure = error
            failure.partial_text = self.text
        self._error = failure
        self._state = AggregatorState.ERRORED
        return failure

    def complete(self) -> None:
        """Transition to COMPLETED at natural end of the sequence."""
        self._require_running("complete")
        self._state = AggregatorState.COMPLETED

    def result(self) -> GenerationResult:
        return GenerationResult(
            text=self.text,
            state=self._state,
            error=self._error,
            function_calls=list(self._function_calls),
            usage=self._usage,
            chunk_count=self._chunk_count,
        )

    def consume(self, elements: Iterable[ResponseElement]) -> GenerationResult:
        """Drive the state machine over ``elements``.

        Reading stops at the first ``ResponseError``; later elements are never
        pulled. A ``StreamError`` raised while iterating (decode, schema or
        transport failure) ends the sequence as ERRORED.
        """
        iterator = iter(elements)
        try:
            for element in iterator:
                match element:
                    case ResponseError():
                        self.fail(element)
                        break
                    case ResponseChunk():
                        self.add_chunk(element)
                    case _:
                        assert_never(element)
            else:
                self.complete()
        except StreamError as exc:
            self.fail(exc)
        return self.result()


def accumulate_events(events: Iterable[StreamEvent]) -> GenerationResult:
    """Fold a ``StreamEvent`` sequence into a ``GenerationResult``.

    Events after the terminal event are ignored. A sequence that ends without
    a terminal event is reported as still RUNNING.
    """
    aggregator = TextAggregator()
    for event in events:
        if event.chunk is not None:
            aggregator.add_chunk(event.chunk)
        if event.finish:
            if event.error is not None:
                aggregator.fail(event.error)
            else:
                aggregator.complete()
            break
    return aggregator.result()


__all__ = [
    "TextAggregator",
    "accumulate_events",
    "extract_text",
    "function_calls",
    "iter_parts",
    "part_text",
    "service_failure",
]
