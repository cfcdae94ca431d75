"""Unit tests for structured response extraction."""

import pytest

from adstudio.models.exceptions import UnparseableResponseException
from adstudio.services.extraction import extract_json, parse_json_response


OBJECT = {"headline": "Snack happy", "fields": {"cta": "Shop"}, "score": 8}
OBJECT_TEXT = '{"headline": "Snack happy", "fields": {"cta": "Shop"}, "score": 8}'
DEEP_TEXT = 'Here you go: {"a": ' + "[" * 100000 + "]" * 100000 + "}"


class TestStrategies:
    """Each strategy in isolation, via the text shapes that select it."""

    def test_bare_object_uses_direct(self):
        result = extract_json(f"  {OBJECT_TEXT}\n")
        assert result.ok
        assert result.strategy == "direct"
        assert result.value == OBJECT

    def test_fenced_block_with_prose(self):
        result = extract_json(f"Here you go:\n```json\n{OBJECT_TEXT}\n```\nEnjoy!")
        assert result.ok
        assert result.strategy == "fenced"
        assert result.value == OBJECT

    def test_untagged_fence(self):
        result = extract_json(f"```\n{OBJECT_TEXT}\n```")
        assert result.strategy == "fenced"
        assert result.value == OBJECT

    def test_object_between_prose_uses_brace_span(self):
        result = extract_json(f"I thought about it. {OBJECT_TEXT} Let me know!")
        assert result.ok
        assert result.strategy == "brace_span"
        assert result.value == OBJECT

    def test_brace_span_is_first_to_last_brace(self):
        # Two separate objects: the span covers both and is not valid JSON
        result = extract_json('first {"a": 1} then {"b": 2}')
        assert not result.ok
        assert "brace_span" in " ".join(result.attempts)

    def test_array_is_not_a_record(self):
        result = extract_json("[1, 2, 3]")
        assert not result.ok

    def test_empty_text(self):
        result = extract_json("   ")
        assert not result.ok
        assert result.reason == "empty response"

    def test_deeply_nested_input_fails_cleanly(self):
        result = extract_json(DEEP_TEXT)
        assert not result.ok
        assert any("nested too deeply" in r for r in result.attempts)


class TestParseJsonResponse:

    def test_all_shapes_parse_identically(self):
        bare = parse_json_response(OBJECT_TEXT)
        fenced = parse_json_response(f"Sure!\n```json\n{OBJECT_TEXT}\n```\nAnything else?")
        embedded = parse_json_response(f"Result follows {OBJECT_TEXT} as requested.")
        assert bare == fenced == embedded == OBJECT

    def test_fenced_scenario(self):
        assert parse_json_response('Sure! ```json\n{"a":1}\n```') == {"a": 1}

    @pytest.mark.parametrize("text", [
        "I cannot help with that.",
        "",
        None,
        "{not json at all}",
        "``` just a fence ```",
    ])
    def test_no_object_raises_unparseable(self, text):
        with pytest.raises(UnparseableResponseException) as exc_info:
            parse_json_response(text)
        assert exc_info.value.reasons

    def test_deeply_nested_raises_unparseable(self):
        with pytest.raises(UnparseableResponseException):
            parse_json_response(DEEP_TEXT)

    def test_unparseable_lists_every_strategy(self):
        with pytest.raises(UnparseableResponseException) as exc_info:
            parse_json_response("no braces here")
        reasons = exc_info.value.reasons
        assert [r.split(":")[0] for r in reasons] == ["direct", "fenced", "brace_span"]
        assert exc_info.value.details["preview"] == "no braces here"
