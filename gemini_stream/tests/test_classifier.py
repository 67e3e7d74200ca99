"""Unit tests for element classification (chunk vs in-band service error)."""
from __future__ import annotations

import json

import pytest

from gemini_stream.base.errors import ErrorKind, StreamError
from gemini_stream.base.models import ResponseChunk, ResponseError
from gemini_stream.base.streaming import classify_element, is_error_element


def test_error_key_selects_error_variant(error_bytes):
    element = json.loads(error_bytes)[0]
    assert is_error_element(element)  # nosec B101 - pytest assert in tests
    result = classify_element(element)
    assert isinstance(result, ResponseError)  # nosec B101 - pytest assert in tests
    assert (result.code, result.status) == (503, "UNAVAILABLE")  # nosec B101 - pytest assert in tests
    assert result.message == "The model is overloaded. Please try again later."  # nosec B101 - pytest assert in tests


def test_story_elements_are_all_chunks(story_bytes):
    for element in json.loads(story_bytes):
        assert isinstance(classify_element(element), ResponseChunk)  # nosec B101 - pytest assert in tests


def test_error_key_wins_even_when_candidates_present():
    element = {"candidates": [], "error": {"code": 500, "message": "boom", "status": "INTERNAL"}}
    assert isinstance(classify_element(element), ResponseError)  # nosec B101 - pytest assert in tests


def test_empty_candidates_list_is_a_valid_chunk():
    chunk = classify_element({"candidates": []})
    assert isinstance(chunk, ResponseChunk) and chunk.candidates == []  # nosec B101 - pytest assert in tests


def test_missing_candidates_is_a_schema_error_with_raw_payload():
    element = {"usageMetadata": {"promptTokenCount": 3}}
    with pytest.raises(StreamError) as info:
        classify_element(element)
    err = info.value
    assert err.kind is ErrorKind.SCHEMA  # nosec B101 - pytest assert in tests
    assert "candidates" in err.message  # nosec B101 - pytest assert in tests
    assert json.loads(err.raw) == element  # nosec B101 - pytest assert in tests


def test_malformed_error_object_is_a_schema_error():
    with pytest.raises(StreamError) as info:
        classify_element({"error": {"code": "not-a-number", "message": "x"}})
    assert info.value.kind is ErrorKind.SCHEMA  # nosec B101 - pytest assert in tests
    assert info.value.message.startswith("malformed error element")  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("element", [[1, 2], "text", 42, None, True])
def test_non_object_element_is_a_schema_error(element):
    with pytest.raises(StreamError) as info:
        classify_element(element)
    assert info.value.kind is ErrorKind.SCHEMA  # nosec B101 - pytest assert in tests
    assert "must be a JSON object" in info.value.message  # nosec B101 - pytest assert in tests


def test_part_with_two_variants_is_rejected():
    element = {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": "a", "functionCall": {"name": "f"}}]}}
        ]
    }
    with pytest.raises(StreamError) as info:
        classify_element(element)
    assert info.value.kind is ErrorKind.SCHEMA  # nosec B101 - pytest assert in tests
