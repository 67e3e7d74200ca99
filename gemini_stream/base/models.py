"""
Gemini response wire models public surface.

This module re-exports the one-class-per-file implementations under
``gemini_stream.base.models_parts`` and defines ``ResponseElement``, the union
produced by the response classifier.
"""

from typing import Union

from .models_parts import (
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
    ResponseError,
    SafetyRating,
    TextPart,
    UsageMetadata,
    WireModel,
    part_kind,
)

# An element is a ResponseError iff the raw object has an ``error`` key.
ResponseElement = Union[ResponseChunk, ResponseError]

__all__ = [
    "WireModel",
    "Blob",
    "ContentPart",
    "FileData",
    "FileDataPart",
    "FunctionCall",
    "FunctionCallPart",
    "InlineDataPart",
    "TextPart",
    "part_kind",
    "Content",
    "Candidate",
    "Citation",
    "CitationMetadata",
    "FinishReason",
    "SafetyRating",
    "PromptFeedback",
    "ResponseChunk",
    "UsageMetadata",
    "ResponseError",
    "ResponseElement",
]
