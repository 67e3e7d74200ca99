"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `gemini_stream.base.errors` for the stable surface.
"""

from .error_kind import ErrorKind
from .stream_error import StreamError
from .classification import classify_exception, status_name_for_http, to_stream_error

__all__ = ["ErrorKind", "StreamError", "classify_exception", "status_name_for_http", "to_stream_error"]
