"""Models parts package public surface.

Re-exports individual wire models so callers can import from
`gemini_stream.base.models_parts` if needed, while `gemini_stream.base.models`
remains the primary stable import path.
"""

from .wire_model import WireModel
from .content_part import (
    Blob,
    ContentPart,
    FileData,
    FileDataPart,
    FunctionCall,
    FunctionCallPart,
    InlineDataPart,
    TextPart,
    part_kind,
)
from .content import Content
from .candidate import Candidate, Citation, CitationMetadata, FinishReason, SafetyRating
from .response_chunk import PromptFeedback, ResponseChunk, UsageMetadata
from .response_error import ResponseError

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
]
