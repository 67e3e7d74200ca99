"""gemini_stream.config.env
=========================

Centralized environment variable names and helpers for the API credential.

Design Notes
------------
- ``API_KEY_ENV_NAMES`` lists every accepted variable, canonical name first,
  to establish precedence. ``GOOGLE_API_KEY`` is what Google tooling sets;
  bare ``API_KEY`` is kept for compatibility with existing shell setups.
- Placeholder values (``changeme``, ``your-api-key-placeholder``...) are
  skipped so a template ``.env`` never produces a confusing 400 from the
  service.

Failure Modes
-------------
- Helpers never raise on unset variables; they return ``None`` and the
  caller decides how to proceed (the CLI reports a config error).
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

# Ordered tuple of acceptable env var names (canonical first)
API_KEY_ENV_NAMES: Tuple[str, ...] = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def resolve_api_key_with_source() -> Tuple[Optional[str], Optional[str]]:
    """Resolve the API key from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        variable in ``API_KEY_ENV_NAMES``; ``(None, None)`` when none is set.
    """
    for name in API_KEY_ENV_NAMES:
        val = (os.environ.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


def resolve_api_key() -> Optional[str]:
    """Return the API key from the environment, or ``None``."""
    return resolve_api_key_with_source()[0]


__all__ = [
    "API_KEY_ENV_NAMES",
    "is_placeholder",
    "resolve_api_key",
    "resolve_api_key_with_source",
]
