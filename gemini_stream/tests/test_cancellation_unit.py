"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, close-on-cancel callbacks (including late
registration), and cancelling a stream from another thread.
"""
from __future__ import annotations

import gc
import threading
import weakref

import pytest

from gemini_stream.base.cancellation import CancellationToken, CancelledError
from gemini_stream.base.errors import ErrorKind
from gemini_stream.base.streaming import StreamController

from .conftest import RecordingSource, split_every


def test_cancel_is_idempotent_and_keeps_first_reason():
    token = CancellationToken()
    token.cancel(reason="stop")
    token.cancel(reason="ignored")
    assert token.cancelled is True and token.reason == "stop"  # nosec B101 - pytest assert in tests


def test_callbacks_run_once_at_cancel_time():
    token = CancellationToken()
    calls = []
    token.on_cancel(lambda: calls.append("a"))
    token.on_cancel(lambda: calls.append("b"))
    assert calls == []  # nosec B101 - pytest assert in tests
    token.cancel()
    token.cancel()
    assert calls == ["a", "b"]  # nosec B101 - pytest assert in tests


def test_late_callback_runs_immediately():
    token = CancellationToken()
    token.cancel("done")
    calls = []
    token.on_cancel(lambda: calls.append(token.reason))
    assert calls == ["done"]  # nosec B101 - pytest assert in tests


def test_failing_callback_does_not_block_others():
    token = CancellationToken()
    calls = []

    def boom():
        raise OSError("already closed")

    token.on_cancel(boom)
    token.on_cancel(lambda: calls.append(1))
    token.cancel()
    assert calls == [1]  # nosec B101 - pytest assert in tests


def test_raise_if_cancelled_raises_custom_error():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError, match="terminate"):
        token.raise_if_cancelled()


class _BlockingSource:
    """Yields one chunk, then blocks until closed (like an idle socket)."""

    def __init__(self, first: bytes) -> None:
        self._first = first
        self._closed = threading.Event()
        self.waiting = threading.Event()

    def __iter__(self):
        yield self._first
        self.waiting.set()
        self._closed.wait(timeout=5)
        raise OSError("connection closed")

    def close(self) -> None:
        self._closed.set()


def test_cancel_from_another_thread_unblocks_a_pending_read():
    source = _BlockingSource(b'[{"candidates": [{"content": {"role": "model", "parts": [{"text": "Hi"}]}}]}')
    token = CancellationToken()
    controller = StreamController(source, token=token)

    def cancel_when_blocked():
        source.waiting.wait(timeout=5)
        token.cancel("user interrupt")

    worker = threading.Thread(target=cancel_when_blocked)
    worker.start()
    events = list(controller)
    worker.join(timeout=5)

    assert [e.delta for e in events if not e.finish] == ["Hi"]  # nosec B101 - pytest assert in tests
    terminal = events[-1]
    assert terminal.finish and terminal.error.kind is ErrorKind.CANCELLED  # nosec B101 - pytest assert in tests
    assert controller.text == "Hi"  # nosec B101 - pytest assert in tests


def test_removed_callback_does_not_run():
    token = CancellationToken()
    calls = []

    def record():
        calls.append(1)

    token.on_cancel(record)
    token.remove_callback(record)
    token.remove_callback(record)
    token.cancel()
    assert calls == []  # nosec B101 - pytest assert in tests


def test_shared_token_does_not_retain_finished_controllers(story_bytes):
    token = CancellationToken()
    ctrl = StreamController([story_bytes], token=token)
    ctrl.run()
    ref = weakref.ref(ctrl)
    del ctrl
    gc.collect()
    assert ref() is None  # nosec B101 - pytest assert in tests

    follow_up_source = RecordingSource(split_every(story_bytes, 100))
    follow_up = StreamController(follow_up_source, token=token)
    stream = iter(follow_up)
    next(stream)
    token.cancel("done")
    assert follow_up_source.closed  # nosec B101 - pytest assert in tests
    assert list(stream)[-1].error.kind is ErrorKind.CANCELLED  # nosec B101 - pytest assert in tests
