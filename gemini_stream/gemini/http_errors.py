"""Map a non-200 HTTP response to a SERVICE ``StreamError``.

The endpoint reports request-level failures (bad key, unknown model,
overload) with an HTTP error status whose body is usually the same error
object that appears in-band, either bare or as the first element of an
array. When the body carries no usable error object, one is synthesized
from the HTTP status.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import ValidationError

from ..base.constants import ERROR_KEY
from ..base.errors import ErrorKind, StreamError, status_name_for_http
from ..base.models import ResponseError

_MESSAGE_PREVIEW_CHARS = 200


def _error_object(body: bytes) -> Optional[ResponseError]:
    try:
        data: Any = json.loads(body.decode("utf-8-sig"))
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(data, list) and data:
        data = data[0]
    if not isinstance(data, dict) or not isinstance(data.get(ERROR_KEY), dict):
        return None
    try:
        return ResponseError.model_validate(data[ERROR_KEY])
    except ValidationError:
        return None


def service_error_from_http(status_code: int, body: bytes, reason: str = "") -> StreamError:
    """Build the SERVICE failure for an HTTP error response."""
    error = _error_object(body)
    if error is None:
        text = body.decode("utf-8", errors="replace").strip()[:_MESSAGE_PREVIEW_CHARS]
        error = ResponseError(
            code=status_code,
            message=text or reason or f"HTTP {status_code}",
            status=status_name_for_http(status_code),
        )
    return StreamError(
        kind=ErrorKind.SERVICE,
        message=error.message,
        raw=body or None,
        service_error=error,
    )


__all__ = ["service_error_from_http"]
