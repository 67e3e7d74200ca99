"""
Streaming core package.

Exports the transport-independent pieces of the client:
- Models: response wire objects (chunks, candidates, parts, errors)
- Errors: ``StreamError`` and the ``ErrorKind`` taxonomy
- Streaming: array decoder, classifier, aggregator and controller
- Timeouts & cancellation
"""

from .models import (
    Blob,
    Candidate,
    Citation,
    CitationMetadata,
    Content,
    ContentPart,
    FileData,
    FileDataPart,
    FinishReason,
    FunctionCall,
    FunctionCallPart,
    InlineDataPart,
    PromptFeedback,
    ResponseChunk,
    ResponseElement,
    ResponseError,
    SafetyRating,
    TextPart,
    UsageMetadata,
)
from .errors import ErrorKind, StreamError, classify_exception
from .timeouts import TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .streaming import (
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

__all__ = [
    # Models
    "Blob",
    "Candidate",
    "Citation",
    "CitationMetadata",
    "Content",
    "ContentPart",
    "FileData",
    "FileDataPart",
    "FinishReason",
    "FunctionCall",
    "FunctionCallPart",
    "InlineDataPart",
    "PromptFeedback",
    "ResponseChunk",
    "ResponseElement",
    "ResponseError",
    "SafetyRating",
    "TextPart",
    "UsageMetadata",
    # Errors
    "ErrorKind",
    "StreamError",
    "classify_exception",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
    # Streaming
    "AggregatorState",
    "GenerationResult",
    "JsonArrayDecoder",
    "StreamController",
    "StreamEvent",
    "TextAggregator",
    "accumulate_events",
    "classify_element",
    "iter_json_array",
]
