"""Response classifier: decoded JSON element -> ResponseChunk | ResponseError.

The service does not tag elements. An element is an error if and only if it
has a top-level ``error`` key, so the key is checked first and only the
selected variant is then validated. Validating a chunk speculatively against
an error payload could coerce it into a malformed chunk (every chunk field
but ``candidates`` is optional).

Failures raise ``StreamError`` with ``ErrorKind.SCHEMA`` and the serialized
element, so the offending payload is available for diagnosis.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from ..constants import ERROR_KEY
from ..errors import ErrorKind, StreamError
from ..models import ResponseChunk, ResponseElement, ResponseError


def _raw(element: Any) -> bytes:
    return json.dumps(element, ensure_ascii=False, default=repr).encode("utf-8")


def _summarize(exc: ValidationError) -> str:
    first = exc.errors(include_url=False)[0]
    loc = ".".join(str(p) for p in first["loc"]) or "<root>"
    return f"{exc.error_count()} validation error(s), first at {loc}: {first['msg']}"


def is_error_element(element: Any) -> bool:
    """Return True when ``element`` is an object carrying an ``error`` key."""
    return isinstance(element, dict) and ERROR_KEY in element


def classify_element(element: Any) -> ResponseElement:
    """Map one decoded array element to its response variant.

    Raises:
        StreamError: ``SCHEMA`` when the element is not an object, or when it
            does not validate as the variant selected by its keys.
    """
    if not isinstance(element, dict):
        raise StreamError(
            kind=ErrorKind.SCHEMA,
            message=f"array element must be a JSON object, got {type(element).__name__}",
            raw=_raw(element),
        )
    if ERROR_KEY in element:
        try:
            return ResponseError.model_validate(element[ERROR_KEY])
        except ValidationError as exc:
            raise StreamError(
                kind=ErrorKind.SCHEMA,
                message=f"malformed error element: {_summarize(exc)}",
                raw=_raw(element),
                cause=exc,
            ) from exc
    try:
        return ResponseChunk.model_validate(element)
    except ValidationError as exc:
        raise StreamError(
            kind=ErrorKind.SCHEMA,
            message=f"malformed chunk element: {_summarize(exc)}",
            raw=_raw(element),
            cause=exc,
        ) from exc


__all__ = ["classify_element", "is_error_element"]
