"""Cancellation error type.

Defines the public ``CancelledError`` raised when a stream observes a
cancellation request between elements.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a streamed generation is cancelled cooperatively.

    Kept distinct from transport failures so the controller can map it to a
    ``cancelled`` terminal event instead of a transport error.
    """

__all__ = ["CancelledError"]
