"""Unit tests for condition evaluation."""

import math

import pytest

from schemaform.diagnostics import RecordingDiagnosticSink
from schemaform.schema import FieldNode

from .lib import (
    MAX_CONDITION_DEPTH,
    MISSING,
    EvaluationContext,
    evaluate_condition,
    is_truthy,
    resolve_ref,
    strict_equals,
)


@pytest.fixture
def sink():
    return RecordingDiagnosticSink()


@pytest.fixture
def ctx():
    return EvaluationContext(
        values={"a": "yes", "n": 0, "flag": True, "blank": "  ", "role": "admin"},
        context={"mode": "edit"},
    )


class TestEvaluationContext:
    """Tests for EvaluationContext."""

    @pytest.mark.unit
    def test_submitted_always_present(self):
        ctx = EvaluationContext()
        assert ctx.context == {"submitted": False}
        assert ctx.submitted is False

    @pytest.mark.unit
    def test_submitted_override(self):
        assert EvaluationContext(context={"submitted": True}).submitted is True


class TestSemantics:
    """Tests for equality and truthiness helpers."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "left,right,expected",
        [
            ("yes", "yes", True),
            (1, 1.0, True),
            (True, 1, False),
            (0, False, False),
            (None, None, True),
            (None, MISSING, False),
            ("1", 1, False),
            (math.nan, math.nan, False),
        ],
    )
    def test_strict_equals(self, left, right, expected):
        assert strict_equals(left, right) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            (MISSING, False),
            (None, False),
            ("", False),
            (" ", True),
            (0, False),
            (0.0, False),
            (math.nan, False),
            (-1, True),
            (False, False),
            ([], True),
            ({}, True),
        ],
    )
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected


class TestResolveRef:
    """Tests for resolve_ref."""

    @pytest.mark.unit
    def test_field_and_context(self, ctx, sink):
        assert resolve_ref("a", ctx, sink) == "yes"
        assert resolve_ref("context.mode", ctx, sink) == "edit"
        assert resolve_ref("context.submitted", ctx, sink) is False
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_unknown_keys_are_missing(self, ctx, sink):
        assert resolve_ref("nope", ctx, sink) is MISSING
        assert resolve_ref("context.nope", ctx, sink) is MISSING
        assert sink.codes == ["unknown-field-ref", "unknown-context-ref"]

    @pytest.mark.unit
    def test_nested_ref_unsupported(self, ctx, sink):
        assert resolve_ref("a.b", ctx, sink) is MISSING
        assert sink.codes == ["unsupported-ref"]


class TestEvaluateCondition:
    """Tests for evaluate_condition."""

    @pytest.mark.unit
    def test_absent_is_true(self, ctx, sink):
        assert evaluate_condition(None, ctx, sink) is True
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_boolean_literals(self, ctx):
        assert evaluate_condition(True, ctx) is True
        assert evaluate_condition(False, ctx) is False

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "condition,expected",
        [
            ({"op": "equals", "ref": "a", "value": "yes"}, True),
            ({"op": "equals", "ref": "a", "value": "no"}, False),
            ({"op": "equals", "ref": "flag", "value": 1}, False),
            ({"op": "notEquals", "ref": "a", "value": "no"}, True),
            ({"op": "equals", "ref": "context.mode", "value": "edit"}, True),
            ({"op": "in", "ref": "role", "values": ["admin", "owner"]}, True),
            ({"op": "in", "ref": "n", "values": [False, "0"]}, False),
            ({"op": "notIn", "ref": "role", "values": ["user"]}, True),
            ({"op": "exists", "ref": "a"}, True),
            ({"op": "exists", "ref": "blank"}, False),
            ({"op": "exists", "ref": "n"}, True),
            ({"op": "truthy", "ref": "flag"}, True),
            ({"op": "truthy", "ref": "n"}, False),
            ({"op": "falsy", "ref": "n"}, True),
            ({"op": "falsy", "ref": "context.submitted"}, True),
        ],
    )
    def test_comparison_ops(self, ctx, sink, condition, expected):
        assert evaluate_condition(condition, ctx, sink) is expected
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_combinators(self, ctx, sink):
        yes = {"op": "equals", "ref": "a", "value": "yes"}
        no = {"op": "equals", "ref": "a", "value": "no"}
        assert evaluate_condition({"op": "and", "conditions": [yes, True]}, ctx, sink) is True
        assert evaluate_condition({"op": "and", "conditions": [yes, no]}, ctx, sink) is False
        assert evaluate_condition({"op": "or", "conditions": [no, yes]}, ctx, sink) is True
        assert evaluate_condition({"op": "or", "conditions": [no, False]}, ctx, sink) is False
        assert evaluate_condition({"op": "not", "condition": no}, ctx, sink) is True
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_and_short_circuits(self, ctx, sink):
        condition = {"op": "and", "conditions": [False, {"op": "bogus"}]}
        assert evaluate_condition(condition, ctx, sink) is False
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_unknown_field_ref_evaluates_as_missing(self, ctx, sink):
        assert evaluate_condition({"op": "exists", "ref": "ghost"}, ctx, sink) is False
        assert sink.codes == ["unknown-field-ref"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "condition,code",
        [
            ({"op": "bogus", "ref": "a"}, "unknown-op"),
            ({"ref": "a"}, "missing-op"),
            ("yes", "unsupported-condition"),
            (42, "unsupported-condition"),
            ({"op": "equals", "value": "yes"}, "missing-ref"),
            ({"op": "equals", "ref": "  ", "value": "yes"}, "missing-ref"),
            ({"op": "equals", "ref": "a"}, "missing-value"),
            ({"op": "in", "ref": "a", "values": []}, "missing-values"),
            ({"op": "notIn", "ref": "a", "values": "yes"}, "missing-values"),
            ({"op": "and", "conditions": []}, "missing-conditions"),
            ({"op": "or"}, "missing-conditions"),
            ({"op": "not"}, "missing-condition"),
            ({"op": "truthy", "ref": "a.b"}, "unsupported-ref"),
        ],
    )
    def test_malformed_fails_open(self, ctx, sink, condition, code):
        assert evaluate_condition(condition, ctx, sink) is True
        assert sink.codes == [code]

    @pytest.mark.unit
    def test_malformed_child_fails_open_for_whole_condition(self, ctx, sink):
        condition = {"op": "not", "condition": {"op": "bogus"}}
        assert evaluate_condition(condition, ctx, sink) is True
        assert sink.codes == ["unknown-op"]

    @pytest.mark.unit
    def test_depth_limit(self, ctx, sink):
        condition = {"op": "truthy", "ref": "flag"}
        for _ in range(MAX_CONDITION_DEPTH + 1):
            condition = {"op": "not", "condition": {"op": "not", "condition": condition}}
        assert evaluate_condition(condition, ctx, sink) is True
        assert sink.codes == ["max-depth"]

    @pytest.mark.unit
    def test_exception_fails_open(self, sink):
        class ExplodingValues(dict):
            def __contains__(self, key):
                raise RuntimeError("boom")

        ctx = EvaluationContext(values=ExplodingValues())
        condition = {"op": "truthy", "ref": "a"}
        assert evaluate_condition(condition, ctx, sink) is True
        assert sink.codes == ["evaluation-error"]
        assert "boom" in sink.diagnostics[0].details["error"]

    @pytest.mark.unit
    def test_parsed_models(self, ctx, sink):
        field = FieldNode.model_validate(
            {
                "id": "b",
                "label": "B",
                "type": "text",
                "condition": {
                    "op": "or",
                    "conditions": [
                        {"op": "equals", "ref": "a", "value": "no"},
                        {"op": "not", "condition": {"op": "falsy", "ref": "flag"}},
                    ],
                },
            }
        )
        assert evaluate_condition(field.condition, ctx, sink) is True
        assert sink.diagnostics == []

    @pytest.mark.unit
    def test_submitted_context(self, sink):
        condition = {"op": "truthy", "ref": "context.submitted"}
        assert evaluate_condition(condition, EvaluationContext(), sink) is False
        submitted = EvaluationContext(context={"submitted": True})
        assert evaluate_condition(condition, submitted, sink) is True
