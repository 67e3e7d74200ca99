# -*- coding: utf-8 -*-
"""Utility helpers shared by the CLI.

Functions
---------
- ``parse_verbosity(value)``: Map user strings and synonyms to a canonical
  logging level name.
- ``read_prompt(prompt, stdin, default)``: Resolve the prompt source.
- ``format_error(error)``: Render a terminal ``StreamError`` for stderr.
"""

from __future__ import annotations

from typing import Optional, TextIO

from ...base.errors import ErrorKind, StreamError


def parse_verbosity(value: str) -> Optional[str]:
    """Parse a user-provided verbosity string into a canonical level.

    Accepted values (case-insensitive):
    - Canonical: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - Synonyms: verbose->DEBUG; low->INFO; med/medium/warn->WARNING;
      high/err/quiet->ERROR; crit/silent->CRITICAL

    Returns
    -------
    Optional[str]
        Canonical upper-cased level, or ``None`` if invalid.
    """
    v = value.strip().lower()
    mapping = {
        "debug": "DEBUG",
        "verbose": "DEBUG",
        "info": "INFO",
        "low": "INFO",
        "warning": "WARNING",
        "warn": "WARNING",
        "medium": "WARNING",
        "med": "WARNING",
        "error": "ERROR",
        "err": "ERROR",
        "high": "ERROR",
        "quiet": "ERROR",
        "critical": "CRITICAL",
        "crit": "CRITICAL",
        "silent": "CRITICAL",
    }
    return mapping.get(v)


def _is_tty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def read_prompt(prompt: Optional[str], stdin: TextIO, default: str) -> str:
    """Return ``prompt``, else piped stdin, else ``default``.

    Stdin is read only when it is not a terminal. Blank piped input falls back
    to ``default`` so an empty pipe never sends an empty request.
    """
    if prompt is not None:
        return prompt
    if not _is_tty(stdin):
        text = stdin.read()
        if text.strip():
            return text
    return default


def format_error(error: StreamError) -> str:
    """Render ``error`` as the single stderr line shown to the user."""
    if error.kind is ErrorKind.SERVICE and error.service_error is not None:
        return f"Error: {error.code} {error.status}: {error.message}"
    return f"error[{error.kind.value}]: {error.message}"


__all__ = ["parse_verbosity", "read_prompt", "format_error"]
