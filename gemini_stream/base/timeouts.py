"""Unified timeout configuration for the streaming client.

This module centralizes the timeout values used by the HTTP layer so no
ad-hoc literals appear at call sites.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when those variables change. Supported
    environment variables (all optional):
        GEMINI_STREAM_TIMEOUT_CONNECT_SECONDS
        GEMINI_STREAM_TIMEOUT_READ_SECONDS
        GEMINI_STREAM_TIMEOUT_WRITE_SECONDS

Streaming note
--------------
``read`` bounds the gap between two transport reads, not the whole
response: a long generation that keeps sending chunks never trips it.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx

CONNECT_ENV = "GEMINI_STREAM_TIMEOUT_CONNECT_SECONDS"
READ_ENV = "GEMINI_STREAM_TIMEOUT_READ_SECONDS"
WRITE_ENV = "GEMINI_STREAM_TIMEOUT_WRITE_SECONDS"
_ENV_NAMES = (CONNECT_ENV, READ_ENV, WRITE_ENV)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the connection.
        read_timeout_seconds: Idle timeout between two reads of the response
            body while streaming.
        write_timeout_seconds: Timeout for sending the request body.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 60.0
    write_timeout_seconds: float = 30.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout`` (pool wait uses connect)."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.connect_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
# Last seen env overrides; a change refreshes the cache (tests adjust at runtime).
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float with a fallback default.

    Returns ``default`` if the variable is unset, not a valid float, or not
    positive.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - intentional, documented module cache
    cur_guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(CONNECT_ENV, defaults.connect_timeout_seconds),
        read_timeout_seconds=_parse_env_float(READ_ENV, defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float(WRITE_ENV, defaults.write_timeout_seconds),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "CONNECT_ENV",
    "READ_ENV",
    "WRITE_ENV",
]
