"""Unit tests for stored answer normalization."""

import pytest

from app.services.answer_normalizer import (
    normalize_answer,
    normalize_answers,
    try_parse_json,
)


class TestTryParseJson:
    """Tests for the explicit JSON parse step."""

    def test_valid_json_reports_success(self):
        assert try_parse_json('["a", "b"]') == (True, ["a", "b"])

    def test_invalid_json_reports_failure(self):
        assert try_parse_json("not json") == (False, None)

    def test_empty_string_is_not_json(self):
        assert try_parse_json("") == (False, None)

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity", "[1, NaN]", '{"a": Infinity}'])
    def test_non_json_constants_are_rejected(self, raw):
        assert try_parse_json(raw) == (False, None)


class TestNormalizeAnswer:
    """Tests for normalize_answer."""

    def test_json_array_text_becomes_list(self):
        assert normalize_answer('["x","y"]') == ["x", "y"]

    def test_plain_text_is_kept_verbatim(self):
        assert normalize_answer("plain") == "plain"

    def test_numeric_text_becomes_number(self):
        assert normalize_answer("4") == 4

    def test_json_string_literal_is_unwrapped(self):
        assert normalize_answer('"Red"') == "Red"

    def test_text_with_surrounding_spaces_is_decoded(self):
        assert normalize_answer(" 5 ") == 5

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_are_kept_as_text(self, raw):
        assert normalize_answer(raw) == raw

    def test_truncated_json_falls_back_to_text(self):
        """A malformed array is treated as plain text, not an error."""
        assert normalize_answer('["x", "y"') == '["x", "y"'

    @pytest.mark.parametrize("raw", [3, 4.5, ["A", "B"], None])
    def test_structured_values_pass_through(self, raw):
        assert normalize_answer(raw) == raw

    def test_list_is_returned_unchanged(self):
        value = ["A"]
        assert normalize_answer(value) is value

    def test_normalize_answers_preserves_order(self):
        raw = ['["A"]', "plain", 3, '"B"']
        assert normalize_answers(raw) == [["A"], "plain", 3, "B"]
