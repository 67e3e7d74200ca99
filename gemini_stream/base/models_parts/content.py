"""
Content model: a role plus an ordered list of parts.

``role`` is required on content returned by the service (``"model"``);
request-side content with an optional role lives in
``gemini_stream.gemini.request``.
"""
from __future__ import annotations

from typing import List

from pydantic import Field

from .content_part import ContentPart
from .wire_model import WireModel


class Content(WireModel):
    """Fully formed content object (``candidates[].content``)."""

    role: str
    parts: List[ContentPart] = Field(default_factory=list)


__all__ = ["Content"]
