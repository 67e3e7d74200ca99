"""Finalize stream helper.

Builds the single terminal ``StreamEvent`` and emits the consolidated
``stream.end`` / ``stream.error`` log event with metrics.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ErrorKind, StreamError
from ..logging import LogContext, normalized_log_event
from .streaming import StreamEvent
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    error: Optional[StreamError] = None,
) -> StreamEvent:
    """Create the terminal `StreamEvent` and emit consolidated logging."""
    if error is None:
        normalized_log_event(
            logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=metrics.emitted > 0,
            tokens=metrics.tokens(),
            **metrics.to_dict(),
        )
    else:
        # Service errors are an expected outcome; local failures are warnings.
        level = logging.INFO if error.kind in (ErrorKind.SERVICE, ErrorKind.CANCELLED) else logging.WARNING
        normalized_log_event(
            logger,
            "stream.error",
            ctx,
            phase="finalize",
            level=level,
            error_code=error.kind.value,
            emitted=metrics.emitted > 0,
            tokens=metrics.tokens(),
            error=error.to_dict(),
            **metrics.to_dict(),
        )
    return StreamEvent(delta=None, finish=True, error=error)


__all__ = ["finalize_stream"]
