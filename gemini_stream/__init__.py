"""gemini_stream package

Streaming client for the Gemini ``streamGenerateContent`` endpoint.

Purpose:
    Decode the streamed JSON array response incrementally, so generated text
    is shown while the service is still producing it, and surface every
    failure (transport, decode, schema, service, cancellation) as one typed
    terminal error instead of a crash.

Public API (re-exported):
    - Version: ``__version__``
    - Client: :class:`GeminiStreamClient`
    - Pipeline: :class:`StreamController`, :class:`JsonArrayDecoder`,
      :func:`classify_element`, :class:`TextAggregator`
    - Results & errors: :class:`StreamEvent`, :class:`GenerationResult`,
      :class:`StreamError`, :class:`ErrorKind`
"""

from .base.errors import ErrorKind, StreamError
from .base.cancellation import CancellationToken
from .base.streaming import (
    AggregatorState,
    GenerationResult,
    JsonArrayDecoder,
    StreamController,
    StreamEvent,
    TextAggregator,
    accumulate_events,
    classify_element,
    iter_json_array,
)
from .gemini import GeminiStreamClient

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorKind",
    "StreamError",
    "CancellationToken",
    "AggregatorState",
    "GenerationResult",
    "JsonArrayDecoder",
    "StreamController",
    "StreamEvent",
    "TextAggregator",
    "accumulate_events",
    "classify_element",
    "iter_json_array",
    "GeminiStreamClient",
]
