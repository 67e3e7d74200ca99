"""gemini_stream.config.defaults
=============================

Central place for small, stable default values used by the client and the
CLI. These defaults can be overridden via environment variables, an
external config file or explicit overrides, but provide sensible fallbacks
for local development and tests.

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

from ..base.constants import DEFAULT_MAX_ELEMENT_BYTES

# ---- Gemini endpoint ----
GEMINI_DEFAULT_MODEL = "gemini-pro"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
# Response bodies are UTF-8 JSON; the endpoint honors this Accept value.
GEMINI_ACCEPT_HEADER = "application/json; charset=UTF-8"

# ---- CLI defaults ----
CLI_DEFAULT_PROMPT = "Write a story about a magic backpack."

# ---- Decoder bound ----
GEMINI_DEFAULT_MAX_ELEMENT_BYTES = DEFAULT_MAX_ELEMENT_BYTES


__all__ = [
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_ACCEPT_HEADER",
    "CLI_DEFAULT_PROMPT",
    "GEMINI_DEFAULT_MAX_ELEMENT_BYTES",
]
