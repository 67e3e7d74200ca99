"""
Normalized stream failure kinds (taxonomy).

Defines the `ErrorKind` enumeration used by the decoder, classifier, stream
controller and CLI. Values are lowercase snake_case and are considered a
stable public contract for logging and exit-code mapping.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated failure categories for a streamed generation."""

    TRANSPORT = "transport"
    DECODE = "decode"
    SCHEMA = "schema"
    SERVICE = "service"
    CANCELLED = "cancelled"
    CONFIG = "config"


__all__ = ["ErrorKind"]
