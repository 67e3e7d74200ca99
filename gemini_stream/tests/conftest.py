"""Pytest configuration for the gemini_stream test suite.

Isolates every test from the developer's environment (API keys, config
file, ``.env``, log level) and exposes the recorded response fixtures.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, List

import pytest

from gemini_stream.base import timeouts
from gemini_stream.config import reset_config_cache

FIXTURES = Path(__file__).parent / "fixtures"

_ISOLATED_ENV = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "API_KEY",
    "GEMINI_MODEL",
    "MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_MAX_ELEMENT_BYTES",
    "GEMINI_STREAM_CONFIG_FILE",
    "GEMINI_STREAM_LOG_LEVEL",
    "GEMINI_STREAM_TIMEOUT_CONNECT_SECONDS",
    "GEMINI_STREAM_TIMEOUT_READ_SECONDS",
    "GEMINI_STREAM_TIMEOUT_WRITE_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Clear client env vars and point ``.env`` loading at an empty path."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    monkeypatch.setattr(timeouts, "_CACHED", None)
    logging.getLogger("gemini_stream").setLevel(logging.WARNING)
    yield
    reset_config_cache()


@pytest.fixture()
def story_bytes() -> bytes:
    """The recorded 55-element story stream (54 text chunks, then SAFETY)."""
    return (FIXTURES / "story_response.json").read_bytes()


@pytest.fixture()
def error_bytes() -> bytes:
    """A stream whose only element is a 503 UNAVAILABLE service error."""
    return (FIXTURES / "error_response.json").read_bytes()


@pytest.fixture()
def story_text(story_bytes: bytes) -> str:
    """Concatenated text of every part in the story fixture."""
    return "".join(
        part["text"]
        for element in json.loads(story_bytes)
        for candidate in element["candidates"]
        for part in candidate.get("content", {}).get("parts", [])
        if "text" in part
    )


def split_every(data: bytes, size: int) -> List[bytes]:
    """Split ``data`` into transport reads of ``size`` bytes."""
    return [data[i : i + size] for i in range(0, len(data), size)]


class RecordingSource:
    """Byte source that records how far it was read and whether it was closed."""

    def __init__(self, chunks: List[bytes], *, fail_after: int | None = None, exc: Exception | None = None) -> None:
        self._chunks = list(chunks)
        self._fail_after = fail_after
        self._exc = exc or ConnectionResetError("connection reset by peer")
        self.reads = 0
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        for index, data in enumerate(self._chunks):
            if self.closed:
                return
            if self._fail_after is not None and index >= self._fail_after:
                raise self._exc
            self.reads += 1
            yield data

    def close(self) -> None:
        self.closed = True

