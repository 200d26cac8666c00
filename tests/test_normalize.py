import json
import logging

import pytest

from material_engine.errors import MalformedResponse, SchemaMismatch
from material_engine.normalize import (
    coerce_field_list,
    coerce_list,
    coerce_number,
    coerce_str,
    coerce_str_list,
    expect_array,
    expect_object,
    extract_and_parse,
    slice_json_span,
    strip_fence,
)


def test_fenced_json_inside_prose():
    raw = "Sure! Here's the data:\n```json\n{\"name\":\"PLA\"}\n```\nLet me know if you need more."
    assert extract_and_parse(raw) == {"name": "PLA"}


def test_plain_array_passes_through():
    assert extract_and_parse('[{"a":1},{"a":2}]') == [{"a": 1}, {"a": 2}]


def test_prose_without_json_raises_with_raw_text():
    raw = "I could not find any results."
    with pytest.raises(MalformedResponse) as exc:
        extract_and_parse(raw)
    assert exc.value.raw_text == raw


def test_string_field_is_wrapped():
    assert coerce_list("Packaging") == ["Packaging"]


def test_missing_field_becomes_empty_list():
    payload = {"name": "PLA"}
    assert coerce_list(payload.get("constraints")) == []


@pytest.mark.parametrize(
    "value",
    [
        {"a": [1, 2, {"b": None}]},
        [1, "two", 3.5, True, None],
        "just a string",
        42,
        {"text": "has ``` backticks ``` inside"},
        {"nested": {"deep": [{"x": "y"}]}},
    ],
)
def test_valid_json_round_trips(value):
    assert extract_and_parse(json.dumps(value)) == value


@pytest.mark.parametrize("value", [{"name": "PHA", "score": 80}, [{"a": 1}], ["x"]])
def test_fenced_value_with_surrounding_prose(value):
    raw = "Here is what I found.\n```json\n" + json.dumps(value) + "\n```\nHope this helps!"
    assert extract_and_parse(raw) == value


def test_unlabelled_fence():
    assert extract_and_parse("```\n[1, 2]\n```") == [1, 2]


def test_only_first_fence_is_used():
    raw = "```json\n{\"first\": true}\n```\nand\n```json\n{\"second\": true}\n```"
    assert extract_and_parse(raw) == {"first": True}


def test_leading_and_trailing_prose_is_sliced_off():
    raw = 'The analysis follows: {"quadrant": "BIO_BIO", "constraints": []} Thanks.'
    assert extract_and_parse(raw) == {"quadrant": "BIO_BIO", "constraints": []}


def test_repair_pass_handles_trailing_commas_and_smart_quotes():
    raw = "{“name”: “PLA”, \"tags\": [\"a\", \"b\",],}"
    assert extract_and_parse(raw) == {"name": "PLA", "tags": ["a", "b"]}


@pytest.mark.parametrize("raw", ["NaN", '{"value": NaN}', '{"value": Infinity}'])
def test_non_json_constants_are_rejected(raw):
    with pytest.raises(MalformedResponse):
        extract_and_parse(raw)


@pytest.mark.parametrize("raw", ["No results today.", "n/a", "The answer is PLA."])
def test_garbage_without_brackets_fails(raw):
    with pytest.raises(MalformedResponse):
        extract_and_parse(raw)


def test_truncated_json_fails():
    with pytest.raises(MalformedResponse):
        extract_and_parse('{"name": "PLA", "ingredients": [{"name": "starch"')


def test_empty_input_returns_call_site_default():
    assert extract_and_parse("") == {}
    assert extract_and_parse("   \n", default=[]) == []
    assert extract_and_parse(None) == {}


def test_empty_default_is_not_shared():
    default = {"items": []}
    first = extract_and_parse("", default=default)
    first["items"].append(1)
    assert default == {"items": []}


def test_strip_fence_without_fence_returns_text():
    assert strip_fence("  plain text ") == "plain text"


def test_slice_json_span_keeps_text_without_closer():
    assert slice_json_span("{ never closed") == "{ never closed"


def test_coerce_list_returns_same_list_object():
    items = [1, 2]
    assert coerce_list(items) is items


def test_coerce_list_wraps_objects_and_numbers():
    assert coerce_list({"a": 1}) == [{"a": 1}]
    assert coerce_list(0) == [0]


def test_coerce_list_is_not_flattening():
    assert coerce_list(coerce_list([[1]])) == [[1]]


def test_coerce_field_list_logs_when_wrapping(caplog):
    with caplog.at_level(logging.WARNING, logger="material_engine"):
        out = coerce_field_list({"applications": "Packaging"}, "applications", "recipe")
    assert out == ["Packaging"]
    assert "applications" in caplog.text


def test_coerce_field_list_logs_missing_field(caplog):
    with caplog.at_level(logging.WARNING, logger="material_engine"):
        assert coerce_field_list({}, "constraints") == []
    assert "missing" in caplog.text


def test_scalar_coercions():
    assert coerce_str(None, "fallback") == "fallback"
    assert coerce_str({"a": 1}, "fallback") == "fallback"
    assert coerce_str("  PLA ") == "PLA"
    assert coerce_str(12) == "12"
    assert coerce_str_list(["a", "", None, 3]) == ["a", "3"]
    assert coerce_number("85%") == 85.0
    assert coerce_number("unknown", default=-1.0) == -1.0
    assert coerce_number(True) == 0.0


def test_expect_object_accepts_object_and_unwraps_single_item_array():
    assert expect_object({"a": 1}) == {"a": 1}
    assert expect_object([{"a": 1}]) == {"a": 1}


def test_expect_object_rejects_other_shapes():
    with pytest.raises(SchemaMismatch) as exc:
        expect_object([1, 2], raw_text="[1, 2]")
    assert exc.value.expected == "object"
    assert exc.value.actual == "array"
    assert exc.value.raw_text == "[1, 2]"


def test_expect_array_accepts_wrapped_single_list():
    assert expect_array([1]) == [1]
    assert expect_array({"patents": [{"title": "x"}]}) == [{"title": "x"}]


def test_expect_array_rejects_ambiguous_object():
    with pytest.raises(SchemaMismatch):
        expect_array({"a": [1], "b": [2]})
    with pytest.raises(SchemaMismatch):
        expect_array("text")


def test_schema_mismatch_is_not_malformed_response():
    assert not issubclass(SchemaMismatch, MalformedResponse)
