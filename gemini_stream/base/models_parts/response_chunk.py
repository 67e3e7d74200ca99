"""
ResponseChunk: one increment of a streamed generation.

``candidates`` is required; a chunk without it is a schema violation.
``usageMetadata`` usually arrives on every chunk with running totals, so the
last one seen describes the whole generation.
"""
from __future__ import annotations

from typing import List, Optional

from .candidate import Candidate, SafetyRating
from .wire_model import WireModel


class UsageMetadata(WireModel):
    prompt_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    total_token_count: Optional[int] = None


class PromptFeedback(WireModel):
    block_reason: Optional[str] = None
    safety_ratings: Optional[List[SafetyRating]] = None


class ResponseChunk(WireModel):
    """A successful stream element."""

    candidates: List[Candidate]
    usage_metadata: Optional[UsageMetadata] = None
    prompt_feedback: Optional[PromptFeedback] = None


__all__ = ["UsageMetadata", "PromptFeedback", "ResponseChunk"]
