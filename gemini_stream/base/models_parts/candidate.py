"""
Candidate model and its satellite objects.

A candidate is one alternative generation within a chunk. ``content`` is
absent when generation was suppressed (``finishReason`` such as ``SAFETY``);
that is a valid state, not an error.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .content import Content
from .wire_model import WireModel


class FinishReason(str, Enum):
    """Known ``finishReason`` values. Unknown values are kept as plain strings."""

    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    OTHER = "OTHER"


class SafetyRating(WireModel):
    category: str
    probability: str


class Citation(WireModel):
    start_index: Optional[int] = None
    end_index: Optional[int] = None
    uri: Optional[str] = None
    license: Optional[str] = None


class CitationMetadata(WireModel):
    citation_sources: List[Citation] = Field(default_factory=list)


class Candidate(WireModel):
    """One alternative generation for a chunk."""

    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    safety_ratings: Optional[List[SafetyRating]] = None
    citation_metadata: Optional[CitationMetadata] = None
    index: Optional[int] = None

    @property
    def suppressed(self) -> bool:
        """True when the candidate finished without content (e.g. ``SAFETY``)."""
        return self.content is None and self.finish_reason is not None


__all__ = [
    "FinishReason",
    "SafetyRating",
    "Citation",
    "CitationMetadata",
    "Candidate",
]
