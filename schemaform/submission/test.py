"""Unit tests for submission normalization and delivery."""

import io
import json
import math

import pytest

from schemaform.condition import EvaluationContext
from schemaform.schema import FieldNode

from .lib import (
    DEFAULT_SUBMIT_TEMPLATE,
    DeliveryState,
    DeliveryStatus,
    StreamMessageSink,
    build_submission_message,
    deliver_submission,
    normalize_submission,
    normalize_submission_value,
)


def _node(field_id: str, field_type: str, **extra) -> FieldNode:
    return FieldNode.model_validate(
        {"id": field_id, "label": field_id.title(), "type": field_type, **extra}
    )


class RecordingMessageSink:
    def __init__(self, fail: Exception | None = None):
        self.messages: list[str] = []
        self.fail = fail

    async def deliver(self, text: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.messages.append(text)


class TestNormalizeSubmissionValue:
    """Tests for normalize_submission_value."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("", False), (None, False), ("on", True)],
    )
    def test_checkbox(self, value, expected):
        assert normalize_submission_value(_node("ok", "checkbox"), value) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("42", 42),
            (" 4.0 ", 4),
            (2.5, 2.5),
            (7, 7),
            ("", None),
            ("abc", None),
            (math.nan, None),
            (math.inf, None),
            (None, None),
        ],
    )
    def test_number(self, value, expected):
        assert normalize_submission_value(_node("n", "number"), value) == expected

    @pytest.mark.unit
    def test_integral_float_becomes_int(self):
        assert isinstance(normalize_submission_value(_node("n", "number"), 3.0), int)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [("  Ada  ", "Ada"), ("   ", None), ("", None), (None, None), (True, "true"), (3.0, "3")],
    )
    def test_text(self, value, expected):
        assert normalize_submission_value(_node("name", "text"), value) == expected


class TestNormalizeSubmission:
    """Tests for normalize_submission."""

    @pytest.mark.unit
    def test_only_active_non_empty_fields(self):
        fields = [
            _node("a", "text"),
            _node("b", "text", condition={"op": "equals", "ref": "a", "value": "yes"}),
            _node(
                "c",
                "text",
                condition={"op": "equals", "ref": "a", "value": "yes"},
                fallback="disabled",
            ),
            _node("age", "number"),
            _node("news", "checkbox"),
            _node("note", "textarea"),
        ]
        values = {"a": " no ", "b": "hidden", "c": "disabled", "age": "", "news": False, "note": " "}
        payload = normalize_submission(fields, values, EvaluationContext(values=values))
        assert payload == {"a": "no", "news": False}
        assert all(v != "" for v in payload.values())


class TestBuildSubmissionMessage:
    """Tests for build_submission_message."""

    @pytest.mark.unit
    def test_placeholder_replaced_everywhere(self):
        message = build_submission_message({"a": 1}, "{{json}} | {{json}}")
        body = json.dumps({"a": 1}, indent=2)
        assert message == f"{body} | {body}"

    @pytest.mark.unit
    def test_template_without_placeholder_appends_json(self):
        message = build_submission_message({"a": 1}, "Here you go:")
        assert message.startswith("Here you go:\n\n")
        assert json.loads(message.split("\n\n", 1)[1]) == {"a": 1}

    @pytest.mark.unit
    def test_default_template(self):
        message = build_submission_message({"a": 1})
        assert message == DEFAULT_SUBMIT_TEMPLATE.replace("{{json}}", '{\n  "a": 1\n}')


class TestDeliverSubmission:
    """Tests for deliver_submission."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self):
        sink = RecordingMessageSink()
        state = await deliver_submission(sink, "hello")
        assert state.status == DeliveryStatus.SUCCESS
        assert state.error is None
        assert sink.messages == ["hello"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_is_recorded(self):
        sink = RecordingMessageSink(fail=RuntimeError("offline"))
        state = DeliveryState()
        result = await deliver_submission(sink, "hello", state)
        assert result is state
        assert state.status == DeliveryStatus.ERROR
        assert state.error == "offline"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stream_sink(self):
        stream = io.StringIO()
        await StreamMessageSink(stream).deliver("hi")
        assert stream.getvalue() == "hi\n"
