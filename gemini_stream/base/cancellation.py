"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller abandon a streamed generation; the stream
controller polls it between array elements and closes the transport.
``CancelledError`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
