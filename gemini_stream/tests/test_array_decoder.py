"""Unit tests for the incremental JSON array decoder.

Covers element boundaries under arbitrary transport splits, strings holding
brackets and escapes, scalars, the element size bound, and every malformed
input shape (not an array, missing separators, trailing commas, truncation,
trailing garbage).
"""
from __future__ import annotations

import json

import pytest

from gemini_stream.base.errors import ErrorKind, StreamError
from gemini_stream.base.streaming import JsonArrayDecoder, iter_json_array

from .conftest import split_every


def _decode_all(chunks, **kwargs):
    return list(iter_json_array(chunks, **kwargs))


def test_story_fixture_decodes_to_all_elements(story_bytes):
    elements = _decode_all([story_bytes])
    assert len(elements) == 55  # nosec B101 - pytest assert in tests
    assert elements == json.loads(story_bytes)  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("size", [1, 2, 3, 7, 64, 1000])
def test_split_position_does_not_change_result(story_bytes, size):
    expected = json.loads(story_bytes)
    assert _decode_all(split_every(story_bytes, size)) == expected  # nosec B101 - pytest assert in tests


def test_every_split_offset_of_a_small_array_decodes_identically():
    data = b'[{"a": "x]}\\"y"}, [1, {"b": [2]}], "s,]", -1.5e3, true, null]'
    expected = json.loads(data)
    for cut in range(len(data) + 1):
        got = _decode_all([data[:cut], data[cut:]])
        assert got == expected, cut  # nosec B101 - pytest assert in tests


def test_elements_are_emitted_as_soon_as_they_complete():
    decoder = JsonArrayDecoder()
    assert decoder.feed(b'[{"n": 1}') == [{"n": 1}]  # nosec B101 - pytest assert in tests
    assert decoder.feed(b', {"n"') == []  # nosec B101 - pytest assert in tests
    assert decoder.buffered_bytes == len(b'{"n"')  # nosec B101 - pytest assert in tests
    assert decoder.feed(b': 2}') == [{"n": 2}]  # nosec B101 - pytest assert in tests
    assert decoder.buffered_bytes == 0  # nosec B101 - pytest assert in tests
    assert not decoder.done  # nosec B101 - pytest assert in tests
    decoder.feed(b"]")
    assert decoder.done and decoder.element_count == 2  # nosec B101 - pytest assert in tests
    decoder.close()


def test_brackets_and_escaped_quotes_inside_strings_do_not_affect_depth():
    data = b'[{"text": "a } ] [ { \\" \\\\"}, {"text": "ok"}]'
    assert _decode_all(split_every(data, 1)) == [  # nosec B101 - pytest assert in tests
        {"text": 'a } ] [ { " \\'},
        {"text": "ok"},
    ]


def test_escape_split_across_reads():
    decoder = JsonArrayDecoder()
    assert decoder.feed(b'[{"t": "a\\') == []  # nosec B101 - pytest assert in tests
    assert decoder.feed(b'"b"}]') == [{"t": 'a"b'}]  # nosec B101 - pytest assert in tests


def test_multibyte_utf8_split_inside_a_character():
    data = '[{"text": "café ☃"}]'.encode("utf-8")
    assert _decode_all(split_every(data, 1)) == [{"text": "café ☃"}]  # nosec B101 - pytest assert in tests


def test_empty_array_and_surrounding_whitespace():
    assert _decode_all([b"  \r\n[ \n ]\n  "]) == []  # nosec B101 - pytest assert in tests


def test_leading_byte_order_mark_is_skipped():
    assert _decode_all([b"\xef\xbb", b"\xbf[1]"]) == [1]  # nosec B101 - pytest assert in tests


def test_scalar_elements_end_at_separators():
    assert _decode_all([b"[1", b"2 , 3]"]) == [12, 3]  # nosec B101 - pytest assert in tests


def _decode_error(chunks, **kwargs) -> StreamError:
    with pytest.raises(StreamError) as info:
        _decode_all(chunks, **kwargs)
    assert info.value.kind is ErrorKind.DECODE  # nosec B101 - pytest assert in tests
    return info.value


@pytest.mark.parametrize(
    "data, fragment",
    [
        (b'{"candidates": []}', "not a JSON array"),
        (b"[1,]", "trailing ','"),
        (b"[,1]", "unexpected ','"),
        (b"[{} {}]", "expected ',' or ']'"),
        (b"[1] x", "after closing ']'"),
        (b"", "empty response body"),
        (b"[{}, {", "inside array element 1"),
        (b"[{}, ", "before closing ']'"),
        (b"[{\"a\" 1}]", "not valid JSON"),
        (b"[tru]", "not valid JSON"),
        (b"[NaN]", "not valid JSON"),
        (b"[-Infinity]", "not valid JSON"),
        (b'[{"x": Infinity}]', "not valid JSON"),
        (b'[{"candidates": [], "x": NaN}]', "not valid JSON"),
        (b"\xef[]", "byte order mark"),
    ],
)
def test_malformed_input_fails_with_decode_error(data, fragment):
    err = _decode_error([data])
    assert fragment in err.message  # nosec B101 - pytest assert in tests


def test_invalid_utf8_in_element_is_a_decode_error():
    err = _decode_error([b'[{"text": "\xff\xfe"}]'])
    assert err.raw == b'{"text": "\xff\xfe"}'  # nosec B101 - pytest assert in tests


def test_truncated_stream_keeps_raw_partial_element(story_bytes):
    err = _decode_error([story_bytes[:500]])
    assert "inside array element 0" in err.message  # nosec B101 - pytest assert in tests
    assert err.raw is not None and err.raw.startswith(b'{\n    "candidates"')  # nosec B101 - pytest assert in tests


def test_elements_before_a_failure_are_still_yielded():
    got = []
    with pytest.raises(StreamError):
        for element in iter_json_array([b'[{"a": 1}, {"b": 2} oops]']):
            got.append(element)
    assert got == [{"a": 1}, {"b": 2}]  # nosec B101 - pytest assert in tests


def test_element_size_bound_is_enforced_across_reads():
    big = b'[{"text": "' + b"x" * 100 + b'"}]'
    err = _decode_error(split_every(big, 10), max_element_bytes=64)
    assert "exceeds 64 bytes" in err.message  # nosec B101 - pytest assert in tests
    assert err.raw is not None and len(err.raw) <= 64  # nosec B101 - pytest assert in tests


def test_element_exactly_at_the_bound_is_accepted():
    element = b'{"t": "abc"}'
    assert _decode_all([b"[" + element + b"]"], max_element_bytes=len(element)) == [{"t": "abc"}]  # nosec B101 - pytest assert in tests


def test_failed_decoder_refuses_more_input():
    decoder = JsonArrayDecoder()
    with pytest.raises(StreamError):
        decoder.feed(b"nope")
    with pytest.raises(StreamError, match="already failed"):
        decoder.feed(b"[]")


def test_non_positive_bound_is_rejected():
    with pytest.raises(ValueError):
        JsonArrayDecoder(max_element_bytes=0)
