"""Tests for field extraction and coercion."""

from __future__ import annotations

import pytest

from labelgrade.grading import coerce, ContainerFormat, extract, extract_field, parse_container
from labelgrade.grading.extract import MalformedContainer
from labelgrade.model import ExtractionFailure, FieldType


class TestXMLExtraction(object):
    """Tests for extract() over XML-tagged responses."""

    def test_extracts_tag_content(self) -> None:
        """The text between <key> and </key> is coerced to the field type."""
        result = extract("<x>5</x>", "x", FieldType.Int, ContainerFormat.XML)

        assert result.ok
        assert result.raw == "5"
        assert result.value == 5

    def test_first_occurrence_wins(self) -> None:
        """Only the first <key> block is read."""
        result = extract("<x>1</x> and later <x>2</x>", "x", FieldType.Int, ContainerFormat.XML)

        assert result.value == 1

    def test_surrounding_text_is_ignored(self) -> None:
        """Tags may be embedded anywhere in free text."""
        response = "My answer is <city> Paris </city>, final."
        result = extract(response, "city", FieldType.String, ContainerFormat.XML)

        assert result.raw == " Paris "
        assert result.value == "Paris"

    def test_missing_tag(self) -> None:
        """An absent tag is reported as missing rather than raising."""
        result = extract("<y>5</y>", "x", FieldType.Int, ContainerFormat.XML)

        assert not result.ok
        assert result.failure is ExtractionFailure.Missing
        assert result.value is None

    def test_unclosed_tag_is_missing(self) -> None:
        """An opening tag without its closing tag yields nothing."""
        result = extract("<x>5", "x", FieldType.Int, ContainerFormat.XML)

        assert result.failure is ExtractionFailure.Missing

    def test_empty_tag_is_empty_string(self) -> None:
        """An empty tag is present, with empty content."""
        result = extract("<x></x>", "x", FieldType.String, ContainerFormat.XML)

        assert result.ok
        assert result.value == ""

    def test_tag_name_is_literal(self) -> None:
        """Keys are matched literally, not as patterns."""
        result = extract("<a.b>yes</a.b>", "a.b", FieldType.Boolean, ContainerFormat.XML)

        assert result.value is True

    def test_coercion_failure_keeps_raw(self) -> None:
        """A value that does not coerce is reported with its raw text."""
        result = extract("<x>abc</x>", "x", FieldType.Int, ContainerFormat.XML)

        assert result.failure is ExtractionFailure.CoercionFailed
        assert result.raw == "abc"
        assert result.value is None

    def test_oversized_integer_fails_coercion(self) -> None:
        """An integer with more digits than int() converts is a coercion failure."""
        digits = "9" * 5000
        result = extract(f"<x>{digits}</x>", "x", FieldType.Int, ContainerFormat.XML)

        assert result.failure is ExtractionFailure.CoercionFailed
        assert result.raw == digits
        assert result.value is None


class TestJSONExtraction(object):
    """Tests for extract() over JSON object responses."""

    def test_reads_top_level_key(self) -> None:
        """String values are taken as-is."""
        result = extract('{"name": "Ada"}', "name", FieldType.String, ContainerFormat.JSON)

        assert result.value == "Ada"

    def test_numbers_are_coerced_from_text(self) -> None:
        """JSON numbers go through the same coercion as typed text."""
        result = extract('{"n": 15}', "n", FieldType.Float, ContainerFormat.JSON)

        assert result.raw == "15"
        assert result.value == 15.0
        assert isinstance(result.value, float)

    def test_booleans_are_coerced_from_text(self) -> None:
        """JSON booleans render as true/false before coercion."""
        result = extract('{"ok": false}', "ok", FieldType.Boolean, ContainerFormat.JSON)

        assert result.raw == "false"
        assert result.value is False

    def test_missing_key(self) -> None:
        """A key absent from the object is missing."""
        result = extract('{"a": 1}', "b", FieldType.Int, ContainerFormat.JSON)

        assert result.failure is ExtractionFailure.Missing

    @pytest.mark.parametrize("response", ["not json", "[1, 2]", '"a string"', ""])
    def test_malformed_container(self, response: str) -> None:
        """Anything but a JSON object fails the whole container."""
        result = extract(response, "a", FieldType.String, ContainerFormat.JSON)

        assert result.failure is ExtractionFailure.MalformedContainer
        assert result.raw is None

    def test_parse_once_extract_many(self) -> None:
        """A parsed container serves every field of a grader."""
        parsed = parse_container('{"a": "1", "b": "two"}', ContainerFormat.JSON)

        a = extract_field(parsed, "a", FieldType.Int, ContainerFormat.JSON)
        b = extract_field(parsed, "b", FieldType.Int, ContainerFormat.JSON)

        assert a.value == 1
        assert b.failure is ExtractionFailure.CoercionFailed

    def test_malformed_is_singleton(self) -> None:
        """Every unparseable container returns the same marker."""
        assert parse_container("{", ContainerFormat.JSON) is MalformedContainer()

    def test_oversized_integer_is_malformed(self) -> None:
        """A number too long for the JSON parser fails the container instead of raising."""
        response = '{"n": ' + "9" * 5000 + "}"

        assert parse_container(response, ContainerFormat.JSON) is MalformedContainer()
        result = extract(response, "n", FieldType.Int, ContainerFormat.JSON)
        assert result.failure is ExtractionFailure.MalformedContainer


class TestTextExtraction(object):
    """Tests for whole-response extraction."""

    def test_whole_response_is_the_value(self) -> None:
        """Text containers ignore the key."""
        result = extract("  42.5\n", "response", FieldType.Float, ContainerFormat.Text)

        assert result.value == 42.5


class TestCoerce(object):
    """Tests for coerce()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("5", 5), (" -12 ", -12), ("+3", 3), ("007", 7)],
    )
    def test_int(self, raw: str, expected: int) -> None:
        """Base-10 integers, with optional sign and surrounding whitespace."""
        assert coerce(raw, FieldType.Int) == expected

    @pytest.mark.parametrize("raw", ["5.0", "1e3", "abc", "", "0x10", "5 5"])
    def test_int_rejects(self, raw: str) -> None:
        """Anything but a whole base-10 integer fails."""
        assert coerce(raw, FieldType.Int) is None

    def test_int_too_long(self) -> None:
        """Integers past the interpreter's digit limit fail rather than raise."""
        assert coerce("9" * 5000, FieldType.Int) is None
        assert coerce("-" + "1" * 4301, FieldType.Int) is None

    @pytest.mark.parametrize(
        "raw, expected",
        [("3.14", 3.14), ("15", 15.0), (".5", 0.5), ("-2.", -2.0), ("1e-3", 0.001)],
    )
    def test_float(self, raw: str, expected: float) -> None:
        """Decimal and scientific notation are accepted."""
        assert coerce(raw, FieldType.Float) == expected

    @pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity", "1,000", "3.1.4"])
    def test_float_rejects(self, raw: str) -> None:
        """Non-finite words and malformed numbers fail."""
        assert coerce(raw, FieldType.Float) is None

    @pytest.mark.parametrize("raw", ["1e999", "-1e400", "9" * 400 + ".0"])
    def test_float_overflow_rejects(self, raw: str) -> None:
        """Numbers too large for a float would become infinity, so they fail."""
        assert coerce(raw, FieldType.Float) is None

    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("FALSE", False), (" yes ", True), ("No", False), ("1", True), ("0", False)],
    )
    def test_boolean(self, raw: str, expected: bool) -> None:
        """Boolean words are case-insensitive."""
        assert coerce(raw, FieldType.Boolean) is expected

    def test_boolean_rejects(self) -> None:
        """Other words fail rather than defaulting to False."""
        assert coerce("maybe", FieldType.Boolean) is None

    def test_string_is_trimmed(self) -> None:
        """Strings lose surrounding whitespace only."""
        assert coerce("  two words \n", FieldType.String) == "two words"
