"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class used by the stream controller to stop
reading a response early. Callbacks registered with :meth:`on_cancel` run
once, at cancel time; the controller uses them to close the transport.
"""

from __future__ import annotations

from contextlib import suppress
from threading import Lock
from typing import Callable, List

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token with close-on-cancel callbacks.

    Thread-safe for ``cancel`` + ``raise_if_cancelled`` usage, so a signal
    handler or another thread may cancel a stream being consumed elsewhere.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation and run registered callbacks once."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            with suppress(Exception):
                cb()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register ``callback``; runs immediately if already cancelled."""
        with self._lock:
            if not self._state.cancelled:
                self._callbacks.append(callback)
                return
        with suppress(Exception):
            callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        """Unregister ``callback`` if it has not run yet (no-op otherwise)."""
        with self._lock, suppress(ValueError):
            self._callbacks.remove(callback)

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, callbacks={len(self._callbacks)})"
        )


__all__ = ["CancellationToken"]
