"""Unit tests for field validation."""

import math

import pytest

from schemaform.condition import EvaluationContext
from schemaform.schema import FieldNode

from .lib import (
    ValidationIssue,
    is_empty_value,
    parse_number,
    validate_field,
    validate_form,
    value_to_text,
)


def _node(**kwargs) -> FieldNode:
    kwargs.setdefault("label", kwargs["id"].title())
    return FieldNode.model_validate(kwargs)


class TestIsEmptyValue:
    """Tests for is_empty_value."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, True),
            ("", True),
            ("   ", True),
            (math.nan, True),
            (False, True),
            (True, False),
            (0, False),
            ("x", False),
        ],
    )
    def test_values(self, value, expected):
        assert is_empty_value(value) is expected


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            (" 42 ", 42),
            ("1.5", 1.5),
            (".5", 0.5),
            ("1e3", 1000.0),
            (7, 7),
            ("abc", None),
            ("", None),
            (True, None),
            ("\u0661\u0665\u0660", None),
            ("1_000", None),
            ("nan", None),
        ],
    )
    def test_values(self, value, expected):
        assert parse_number(value) == expected


class TestValueToText:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [(True, "true"), (False, "false"), (2.0, "2"), (2.5, "2.5"), (7, "7"), ("x", "x")],
    )
    def test_json_spelling(self, value, expected):
        assert value_to_text(value) == expected


class TestRequired:
    """Tests for required handling."""

    @pytest.mark.unit
    def test_required_empty(self):
        field = _node(id="age", type="number", required=True, min=18, max=99)
        assert validate_field(field, "") == ValidationIssue("age", "Age is required")

    @pytest.mark.unit
    def test_required_checkbox_unchecked(self):
        field = _node(id="terms", type="checkbox", required=True)
        assert validate_field(field, False).message == "Terms is required"
        assert validate_field(field, True) is None

    @pytest.mark.unit
    def test_required_select_offers_options(self):
        field = _node(id="role", type="select", required=True, options=["admin", "user"])
        issue = validate_field(field, "")
        assert issue.suggestions == ["admin", "user"]

    @pytest.mark.unit
    def test_optional_empty_short_circuits(self):
        field = _node(id="email", type="email", min_length=5)
        assert validate_field(field, "  ") is None


class TestNumber:
    """Tests for number fields."""

    @pytest.mark.unit
    def test_above_max(self):
        field = _node(id="age", type="number", required=True, min=18, max=99)
        issue = validate_field(field, 150)
        assert issue.message == "Age must be at most 99"
        assert issue.suggestions == [99]

    @pytest.mark.unit
    def test_below_min(self):
        field = _node(id="age", type="number", min=18)
        issue = validate_field(field, "12")
        assert issue.message == "Age must be at least 18"
        assert issue.suggestions == [18]

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["abc", math.inf, "Infinity", "\u0661\u0665\u0660"])
    def test_not_a_number(self, value):
        field = _node(id="age", type="number")
        assert validate_field(field, value).message == "Age must be a number"

    @pytest.mark.unit
    def test_in_range(self):
        field = _node(id="age", type="number", min=18, max=99)
        assert validate_field(field, 42) is None


class TestEmail:
    """Tests for email fields."""

    @pytest.mark.unit
    def test_invalid_email(self):
        field = _node(id="email", type="email")
        issue = validate_field(field, "not-an-email")
        assert issue.message == "Email must be a valid email address"
        assert issue.suggestions == ["name@example.com"]

    @pytest.mark.unit
    def test_valid_email(self):
        assert validate_field(_node(id="email", type="email"), "a@b.co") is None

    @pytest.mark.unit
    def test_email_length(self):
        field = _node(id="email", type="email", maxLength=5)
        assert validate_field(field, "a@b.co").message == "Email must be at most 5 characters"


class TestSelect:
    """Tests for select fields."""

    @pytest.mark.unit
    def test_closest_option_first(self):
        field = _node(id="role", type="select", options=["user", "admin"])
        issue = validate_field(field, "amdin")
        assert issue.message == "Role must be one of the available options"
        assert issue.suggestions == ["admin", "user"]

    @pytest.mark.unit
    def test_valid_option(self):
        field = _node(id="role", type="select", options=["user", "admin"])
        assert validate_field(field, "admin") is None

    @pytest.mark.unit
    def test_boolean_matches_json_spelled_option(self):
        field = _node(id="flag", type="select", options=["true", "false"])
        assert validate_field(field, True) is None

    @pytest.mark.unit
    def test_misconfigured_select(self):
        field = FieldNode.model_construct(id="role", label="Role", type="select", options=None)
        issue = validate_field(field, "admin")
        assert issue.message == "Role has no options configured"


class TestText:
    """Tests for text and textarea fields."""

    @pytest.mark.unit
    def test_min_length(self):
        field = _node(id="name", type="text", minLength=3)
        assert validate_field(field, "ab").message == "Name must be at least 3 characters"

    @pytest.mark.unit
    def test_max_length_textarea(self):
        field = _node(id="bio", type="textarea", maxLength=4)
        assert validate_field(field, "hello").message == "Bio must be at most 4 characters"

    @pytest.mark.unit
    def test_pattern_must_match_whole_value(self):
        field = _node(id="code", type="text", pattern="[A-Z]{3}")
        assert validate_field(field, "ABC") is None
        assert validate_field(field, "ABCD").message == "Code has an invalid format"

    @pytest.mark.unit
    def test_malformed_pattern_ignored(self):
        field = _node(id="code", type="text", pattern="[unclosed")
        assert validate_field(field, "anything") is None


class TestValidateForm:
    """Tests for validate_form."""

    @pytest.fixture
    def fields(self):
        return [
            _node(id="a", type="text"),
            _node(
                id="b",
                type="text",
                required=True,
                condition={"op": "equals", "ref": "a", "value": "yes"},
            ),
            _node(
                id="c",
                type="text",
                required=True,
                condition={"op": "equals", "ref": "a", "value": "yes"},
                fallback="disabled",
            ),
        ]

    @pytest.mark.unit
    def test_hidden_and_disabled_skipped(self, fields):
        values = {"a": "no", "b": "", "c": ""}
        assert validate_form(fields, values, EvaluationContext(values=values)) == []

    @pytest.mark.unit
    def test_active_fields_validated(self, fields):
        values = {"a": "yes", "b": "", "c": ""}
        issues = validate_form(fields, values, EvaluationContext(values=values))
        assert [issue.field_id for issue in issues] == ["b", "c"]
