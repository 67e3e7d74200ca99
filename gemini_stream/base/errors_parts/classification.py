"""
Error classification helpers mapping exceptions to normalized ErrorKind values.

Also provides the HTTP status table used to synthesize a service error when
the endpoint answers with a non-200 status and a body that carries no
``error`` object.
"""
from __future__ import annotations

import json
from typing import Dict, Optional

import pydantic

from ..cancellation_parts.cancelled_error import CancelledError
from .error_kind import ErrorKind
from .stream_error import StreamError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


# HTTP status -> google.rpc.Code name, as returned in ``error.status``.
_HTTP_STATUS_MAP: Dict[int, str] = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    408: "DEADLINE_EXCEEDED",
    409: "ABORTED",
    429: "RESOURCE_EXHAUSTED",
    499: "CANCELLED",
    500: "INTERNAL",
    501: "UNIMPLEMENTED",
    503: "UNAVAILABLE",
    504: "DEADLINE_EXCEEDED",
}


def status_name_for_http(status_code: int) -> str:
    """Return the RPC status name for an HTTP status (``UNKNOWN`` fallback)."""
    return _HTTP_STATUS_MAP.get(status_code, "UNKNOWN")


def classify_exception(exc: BaseException) -> ErrorKind:
    """Classify an exception into a normalized :class:`ErrorKind`.

    Precedence:
        1. StreamError passthrough.
        2. Cooperative cancellation.
        3. Decode failures (invalid JSON / invalid UTF-8).
        4. Schema failures (pydantic validation).
        5. ``TRANSPORT`` for everything else: httpx errors, timeouts, OS
           errors and anything else raised by the byte source.
    """
    if isinstance(exc, StreamError):
        return exc.kind
    if isinstance(exc, CancelledError):
        return ErrorKind.CANCELLED
    if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError)):
        return ErrorKind.DECODE
    if isinstance(exc, pydantic.ValidationError):
        return ErrorKind.SCHEMA
    return ErrorKind.TRANSPORT


def to_stream_error(exc: BaseException, *, partial_text: str = "") -> StreamError:
    """Wrap ``exc`` in a :class:`StreamError`, preserving an existing one."""
    if isinstance(exc, StreamError):
        if partial_text and not exc.partial_text:
            exc.partial_text = partial_text
        return exc
    kind = classify_exception(exc)
    message = str(exc) or exc.__class__.__name__
    status = _extract_status(exc)
    if status is not None:
        message = f"HTTP {status}: {message}"
    return StreamError(kind=kind, message=message, partial_text=partial_text, cause=exc)


__all__ = [
    "classify_exception",
    "status_name_for_http",
    "to_stream_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
