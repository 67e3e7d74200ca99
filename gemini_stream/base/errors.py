"""Unified stream error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``gemini_stream.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_kind import ErrorKind
from .errors_parts.stream_error import StreamError
from .errors_parts.classification import classify_exception, status_name_for_http, to_stream_error

__all__ = ["ErrorKind", "StreamError", "classify_exception", "status_name_for_http", "to_stream_error"]
