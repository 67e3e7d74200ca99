"""Streaming package for the response pipeline.

Exposes the array decoder, element classifier, aggregator, controller and
metrics under a single namespace to keep the base package organized.
"""

from .array_decoder import JsonArrayDecoder, iter_json_array
from .classifier import classify_element, is_error_element
from .streaming import AggregatorState, GenerationResult, StreamEvent
from .aggregator import TextAggregator, accumulate_events, extract_text, function_calls
from .streaming_metrics import StreamMetrics, apply_usage, build_token_usage
from .streaming_finalize import finalize_stream
from .stream_controller import StreamController

__all__ = [
    "JsonArrayDecoder",
    "iter_json_array",
    "classify_element",
    "is_error_element",
    "AggregatorState",
    "GenerationResult",
    "StreamEvent",
    "TextAggregator",
    "accumulate_events",
    "extract_text",
    "function_calls",
    "StreamMetrics",
    "apply_usage",
    "build_token_usage",
    "finalize_stream",
    "StreamController",
]
