"""Streaming primitives: events emitted to callers and the final result.

Keeps the presentation-facing shapes separate from the wire models so the
decoder/classifier/aggregator modules stay small.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import StreamError
from ..models import FunctionCall, ResponseChunk, UsageMetadata


class AggregatorState(str, Enum):
    """Lifecycle of a streamed generation. ERRORED and COMPLETED are terminal."""

    RUNNING = "running"
    ERRORED = "errored"
    COMPLETED = "completed"


@dataclass
class StreamEvent:
    """Represents an incremental delta from the response stream.

    Fields:
      delta: text appended by this chunk (empty string when the chunk carried
        no text, ``None`` on the terminal event)
      chunk: the decoded chunk, for callers needing structured parts
      finish: True on the single terminal event
      error: failure carried by the terminal event (``None`` on success)
    """

    delta: str | None
    chunk: ResponseChunk | None = None
    finish: bool = False
    error: StreamError | None = None


@dataclass
class GenerationResult:
    """Outcome of a streamed generation.

    ``text`` holds everything aggregated before the stream ended. On failure
    it is the partial output, which callers may still display.
    """

    text: str
    state: AggregatorState
    error: Optional[StreamError] = None
    function_calls: List[FunctionCall] = field(default_factory=list)
    usage: Optional[UsageMetadata] = None
    chunk_count: int = 0

    @property
    def ok(self) -> bool:
        return self.state is AggregatorState.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation."""
        return {
            "text": self.text,
            "state": self.state.value,
            "error": self.error.to_dict() if self.error is not None else None,
            "function_calls": [fc.to_wire() for fc in self.function_calls],
            "usage": self.usage.to_wire() if self.usage is not None else None,
            "chunk_count": self.chunk_count,
        }


__all__ = [
    "AggregatorState",
    "StreamEvent",
    "GenerationResult",
]
