"""Base shared constants for the streaming core.

Central location to avoid scattering magic strings and default numbers.

# pragma: allowlist secret
"""
from __future__ import annotations

# Upper bound on the serialized size of a single array element. Guards the
# decoder against unbounded buffering from a pathological source.
DEFAULT_MAX_ELEMENT_BYTES = 1024 * 1024

# Missing credential sentinel
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - generic placeholder string, not a real secret

# Top-level key that marks an in-band service error element.
ERROR_KEY = "error"

__all__ = [
    "DEFAULT_MAX_ELEMENT_BYTES",
    "MISSING_API_KEY_ERROR",
    "ERROR_KEY",
]
