"""Streaming metrics collected for one generation.

Isolated within the streaming package to keep orchestration code small.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models import UsageMetadata


@dataclass
class StreamMetrics:
    """Counters and timings for a single streamed generation.

    ``emitted`` counts chunks that produced text; ``elements`` counts every
    decoded array element, including the terminal error element if any.
    Token fields mirror the last ``usageMetadata`` seen.
    """

    elements: int = 0
    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def tokens(self) -> Optional[Dict[str, Optional[int]]]:
        """Return canonical token usage, or ``None`` when nothing was reported."""
        if self.prompt_tokens is None and self.completion_tokens is None and self.total_tokens is None:
            return None
        return build_token_usage(self.prompt_tokens, self.completion_tokens, self.total_tokens)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elements": self.elements,
            "emitted_count": self.emitted,
            "time_to_first_token_ms": self.time_to_first_token_ms,
            "total_duration_ms": self.total_duration_ms,
        }


def build_token_usage(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> Dict[str, Optional[int]]:
    """Return a canonical token usage mapping."""
    derived_total = total
    if derived_total is None and (prompt is not None and completion is not None):
        derived_total = prompt + completion
    return {"prompt": prompt, "completion": completion, "total": derived_total}


def apply_usage(metrics: StreamMetrics, usage: Optional[UsageMetadata]) -> None:
    """Copy token counts from a chunk's ``usageMetadata`` onto ``metrics``."""
    if usage is None:
        return
    metrics.prompt_tokens = usage.prompt_token_count
    metrics.completion_tokens = usage.candidates_token_count
    metrics.total_tokens = usage.total_token_count


__all__ = [
    "StreamMetrics",
    "apply_usage",
    "build_token_usage",
]
