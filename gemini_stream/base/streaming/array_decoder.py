"""Incremental decoder for a streamed top-level JSON array.

The streaming endpoint answers with one JSON array (``[elem, elem, ...]``)
whose elements arrive over time in arbitrarily split transport reads. This
module finds element boundaries as bytes arrive and parses each element as
soon as it is complete, so generated text can be shown before the array
closes.

Boundary detection tracks three things for the current element: nesting
depth of ``{``/``[``, whether the scanner is inside a string, and whether the
previous byte was a backslash inside that string. Brackets inside strings
therefore never change depth. Bare scalars (numbers, ``true``...) end at the
next separator. Structural validity of the element itself is left to
``json.loads``.

Only the bytes of the element being assembled are buffered; once it parses,
the buffer is released. Every failure raises ``StreamError`` with
``ErrorKind.DECODE`` and the offending bytes:

- input that is not an array, missing separators, trailing commas, or
  non-whitespace bytes after the closing bracket;
- an element that is not valid JSON (or not valid UTF-8);
- an element larger than ``max_element_bytes``;
- end of input before the closing bracket (truncated transport).
"""
from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional

from ..constants import DEFAULT_MAX_ELEMENT_BYTES
from ..errors import ErrorKind, StreamError

_WHITESPACE = frozenset(b" \t\r\n")
_OPENERS = frozenset(b"{[")
_CLOSERS = frozenset(b"}]")
_BOM = b"\xef\xbb\xbf"
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_COMMA = ord(",")
_OPEN_BRACKET = ord("[")
_CLOSE_BRACKET = ord("]")

# Next byte that can change string state.
_STRING_SPECIAL = re.compile(rb'["\\]')


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")


class _Phase(Enum):
    START = "start"
    BEFORE_ELEMENT = "before_element"
    IN_ELEMENT = "in_element"
    AFTER_ELEMENT = "after_element"
    DONE = "done"
    FAILED = "failed"


class JsonArrayDecoder:
    """Push-style decoder: ``feed`` bytes, receive completed elements.

    Example::

        decoder = JsonArrayDecoder()
        for data in transport:
            for element in decoder.feed(data):
                handle(element)
        decoder.close()

    Not thread-safe; one decoder belongs to one response.
    """

    def __init__(self, max_element_bytes: int = DEFAULT_MAX_ELEMENT_BYTES) -> None:
        if max_element_bytes <= 0:
            raise ValueError("max_element_bytes must be positive")
        self._max_element_bytes = max_element_bytes
        self._phase = _Phase.START
        self._buffer = bytearray()
        self._depth = 0
        self._in_string = False
        self._escaped = False
        self._scalar = False
        self._after_comma = False
        self._bom_pos = 0
        self._start_seen = 0
        self._count = 0

    # ------------------------------------------------------------------ API
    @property
    def done(self) -> bool:
        """Whether the closing bracket has been seen."""
        return self._phase is _Phase.DONE

    @property
    def element_count(self) -> int:
        """Number of elements produced so far."""
        return self._count

    @property
    def buffered_bytes(self) -> int:
        """Bytes currently held for an incomplete element."""
        return len(self._buffer)

    def feed(self, data: bytes) -> List[Any]:
        """Consume ``data`` and return every element it completed, in order."""
        return list(self.iter_feed(data))

    def iter_feed(self, data: bytes) -> Iterator[Any]:
        """Lazily consume ``data``, yielding each element as it completes.

        Stopping iteration early leaves the remaining bytes of ``data``
        unread; callers that do so must discard the decoder.
        """
        if self._phase is _Phase.FAILED:
            raise StreamError(kind=ErrorKind.DECODE, message="decoder already failed")
        i = 0
        n = len(data)
        seg_start: Optional[int] = 0 if self._phase is _Phase.IN_ELEMENT else None
        while i < n:
            phase = self._phase
            b = data[i]
            if phase is _Phase.IN_ELEMENT:
                if self._in_string:
                    if self._escaped:
                        self._escaped = False
                        i += 1
                        continue
                    m = _STRING_SPECIAL.search(data, i)
                    if m is None:
                        i = n
                        continue
                    i = m.start()
                    if data[i] == _BACKSLASH:
                        self._escaped = True
                        i += 1
                        continue
                    self._in_string = False
                    i += 1
                    if self._depth == 0:
                        yield self._complete(data, seg_start, i)
                        seg_start = None
                    continue
                if self._scalar:
                    if b in _WHITESPACE or b == _COMMA or b == _CLOSE_BRACKET:
                        # Separator belongs to the array, not the element.
                        yield self._complete(data, seg_start, i)
                        seg_start = None
                        continue
                    i += 1
                    continue
                if b == _QUOTE:
                    self._in_string = True
                elif b in _OPENERS:
                    self._depth += 1
                elif b in _CLOSERS:
                    self._depth -= 1
                    if self._depth == 0:
                        yield self._complete(data, seg_start, i + 1)
                        seg_start = None
                i += 1
            elif phase is _Phase.BEFORE_ELEMENT:
                if b in _WHITESPACE:
                    i += 1
                elif b == _CLOSE_BRACKET:
                    if self._after_comma:
                        self._fail("trailing ',' before closing ']'", data[i : i + 1])
                    self._phase = _Phase.DONE
                    i += 1
                elif b == _COMMA:
                    self._fail("unexpected ',' where an element was expected", data[i : i + 1])
                else:
                    self._begin_element(b)
                    seg_start = i
            elif phase is _Phase.AFTER_ELEMENT:
                if b in _WHITESPACE:
                    pass
                elif b == _COMMA:
                    self._phase = _Phase.BEFORE_ELEMENT
                    self._after_comma = True
                elif b == _CLOSE_BRACKET:
                    self._phase = _Phase.DONE
                else:
                    self._fail("expected ',' or ']' after array element", data[i : i + 1])
                i += 1
            elif phase is _Phase.START:
                self._scan_start(b, data[i : i + 1])
                i += 1
            else:
                if b not in _WHITESPACE:
                    self._fail("unexpected bytes after closing ']'", data[i:])
                i += 1
        if seg_start is not None:
            self._append(data[seg_start:n])

    def close(self) -> None:
        """Signal end of input; raises if the array was not closed."""
        if self._phase is _Phase.DONE:
            return
        if self._phase is _Phase.FAILED:
            raise StreamError(kind=ErrorKind.DECODE, message="decoder already failed")
        if self._phase is _Phase.START and self._start_seen == 0:
            self._fail("empty response body", b"")
        if self._phase is _Phase.IN_ELEMENT:
            self._fail(
                f"stream ended inside array element {self._count}",
                bytes(self._buffer),
            )
        self._fail("stream ended before closing ']'", bytes(self._buffer))

    # ------------------------------------------------------------ internals
    def _scan_start(self, b: int, raw: bytes) -> None:
        if self._bom_pos < len(_BOM) and self._start_seen == self._bom_pos and b == _BOM[self._bom_pos]:
            self._bom_pos += 1
        elif 0 < self._bom_pos < len(_BOM):
            self._fail("truncated byte order mark", raw)
        elif b == _OPEN_BRACKET:
            self._phase = _Phase.BEFORE_ELEMENT
        elif b not in _WHITESPACE:
            self._fail("response is not a JSON array (expected '[')", raw)
        self._start_seen += 1

    def _begin_element(self, first: int) -> None:
        self._phase = _Phase.IN_ELEMENT
        self._depth = 0
        self._in_string = False
        self._escaped = False
        self._scalar = first not in _OPENERS and first != _QUOTE

    def _append(self, segment: bytes) -> None:
        if len(self._buffer) + len(segment) > self._max_element_bytes:
            raw = bytes(self._buffer) + segment[: self._max_element_bytes]
            self._fail(
                f"array element {self._count} exceeds {self._max_element_bytes} bytes",
                raw[: self._max_element_bytes],
            )
        self._buffer += segment

    def _complete(self, data: bytes, seg_start: Optional[int], end: int) -> Any:
        self._append(data[seg_start or 0 : end])
        raw = bytes(self._buffer)
        self._buffer = bytearray()
        self._phase = _Phase.AFTER_ELEMENT
        self._after_comma = False
        try:
            value = json.loads(raw, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            self._fail(f"array element {self._count} is not valid JSON: {exc}", raw, cause=exc)
        self._count += 1
        return value

    def _fail(self, message: str, raw: bytes, *, cause: Optional[BaseException] = None) -> None:
        self._phase = _Phase.FAILED
        self._buffer = bytearray()
        raise StreamError(kind=ErrorKind.DECODE, message=message, raw=raw, cause=cause)


def iter_json_array(
    chunks: Iterable[bytes],
    *,
    max_element_bytes: int = DEFAULT_MAX_ELEMENT_BYTES,
) -> Iterator[Any]:
    """Yield array elements from an iterable of byte chunks.

    Elements are yielded as soon as they complete. After the closing bracket
    the remaining input is still drained so trailing garbage is reported, and
    the sequence ends when ``chunks`` is exhausted.
    """
    decoder = JsonArrayDecoder(max_element_bytes)
    for data in chunks:
        if data:
            yield from decoder.iter_feed(data)
    decoder.close()


__all__ = ["JsonArrayDecoder", "iter_json_array"]
