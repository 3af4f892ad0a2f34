"""Tests for the form pipeline and form sessions."""

import json

import pytest

from schemaform.core import UnknownFieldError
from schemaform.fields import ValidationIssue
from schemaform.submission import DeliveryStatus

from .lib import (
    DiagnosticKind,
    FormSession,
    PreparedForm,
    RenderedContainer,
    SchemaDiagnostic,
    format_rendered,
    prepare_form,
)


def _prepared(payload, sink=None) -> PreparedForm:
    form = prepare_form(payload, sink)
    assert isinstance(form, PreparedForm), getattr(form, "message", form)
    return form


class RecordingMessageSink:
    def __init__(self, fail: Exception | None = None):
        self.messages: list[str] = []
        self.fail = fail

    async def deliver(self, text: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.messages.append(text)


class TestPrepareForm:
    """Tests for prepare_form."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "version,kind",
        [
            ("7", DiagnosticKind.UNSUPPORTED_VERSION),
            ("abc", DiagnosticKind.INVALID_VERSION),
            (1, DiagnosticKind.INVALID_VERSION),
        ],
    )
    def test_blocking_versions(self, age_payload, version, kind):
        payload = {"version": version, "uiSchema": age_payload["uiSchema"]}
        diagnostic = prepare_form(payload)
        assert isinstance(diagnostic, SchemaDiagnostic)
        assert diagnostic.kind == kind
        assert diagnostic.version.blocks_rendering

    @pytest.mark.unit
    def test_supported_version_has_no_advisory(self, age_payload, recording_sink):
        payload = {"version": "1", "uiSchema": age_payload["uiSchema"]}
        form = _prepared(payload, recording_sink)
        assert form.version.status == "supported"
        assert form.advisory is None
        assert recording_sink.diagnostics == []

    @pytest.mark.unit
    @pytest.mark.parametrize("version", [None, "0"])
    def test_legacy_renders_with_advisory(self, age_payload, recording_sink, version):
        payload = dict(age_payload)
        if version is not None:
            payload["version"] = version
        form = _prepared(payload, recording_sink)
        assert form.version.is_legacy
        assert "legacy version" in form.advisory
        assert recording_sink.codes == ["legacy-version"]

    @pytest.mark.unit
    def test_legacy_advisory_suppressed_in_production(
        self, age_payload, recording_sink, monkeypatch
    ):
        monkeypatch.setenv("SCHEMAFORM_ENV", "production")
        form = _prepared(age_payload, recording_sink)
        assert form.advisory is None
        assert recording_sink.diagnostics == []

    @pytest.mark.unit
    def test_bare_schema_accepted(self, age_payload):
        form = _prepared(age_payload["uiSchema"])
        assert form.title == "T"
        assert [f.id for f in form.fields] == ["age"]

    @pytest.mark.unit
    def test_invalid_schema(self):
        diagnostic = prepare_form(
            {"version": "1", "uiSchema": {"title": "T", "fields": [{"id": "a", "type": "txt"}]}}
        )
        assert diagnostic.kind == DiagnosticKind.INVALID_SCHEMA
        paths = [issue.path for issue in diagnostic.issues]
        assert "uiSchema.fields[0].type" in paths
        assert "uiSchema.fields[0].label" in paths
        assert "Invalid schema" in diagnostic.format()

    @pytest.mark.unit
    def test_empty_layout(self):
        diagnostic = prepare_form({"version": "1", "uiSchema": {"title": "T", "fields": []}})
        assert diagnostic.kind == DiagnosticKind.EMPTY_LAYOUT

    @pytest.mark.unit
    def test_default_actions(self, age_payload):
        form = _prepared(age_payload)
        assert [(a.id, a.type, a.style) for a in form.actions] == [
            ("submit", "submit", "primary"),
            ("reset", "reset", "secondary"),
        ]

    @pytest.mark.unit
    def test_get_field(self, age_payload):
        form = _prepared(age_payload)
        assert form.get_field("age").label == "Age"
        with pytest.raises(UnknownFieldError):
            form.get_field("nope")


class TestFormSession:
    """Tests for FormSession state handling."""

    @pytest.mark.integration
    def test_required_age_blocks_submit(self, age_payload):
        session = _prepared(age_payload).create_session()
        result = session.submit()
        assert result.ok is False
        assert result.issues == [ValidationIssue(field_id="age", message="Age is required")]
        assert session.submitted is False
        assert result.payload is None

    @pytest.mark.integration
    def test_age_above_max_suggests_bound(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", 150)
        result = session.submit()
        assert result.issues[0].message == "Age must be at most 99"
        assert result.issues[0].suggestions == [99]

    @pytest.mark.unit
    def test_valid_submit(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", "42")
        result = session.submit()
        assert result.ok
        assert result.payload == {"age": 42}
        assert '"age": 42' in result.message
        assert session.submitted is True

    @pytest.mark.unit
    def test_submit_message_template(self, age_payload):
        payload = {**age_payload, "submitMessage": "Answers: {{json}}"}
        session = _prepared(payload).create_session()
        session.update_value("age", 30)
        assert session.submit().message == 'Answers: {\n  "age": 30\n}'

    @pytest.mark.unit
    def test_no_message_when_not_forwarded(self, age_payload):
        payload = {**age_payload, "submitToAssistant": False}
        session = _prepared(payload).create_session()
        session.update_value("age", 30)
        result = session.submit()
        assert result.ok
        assert result.message is None

    @pytest.mark.unit
    def test_unknown_field_rejected(self, age_payload):
        session = _prepared(age_payload).create_session()
        with pytest.raises(UnknownFieldError) as excinfo:
            session.update_value("agee", 1)
        assert isinstance(excinfo.value, KeyError)
        assert "agee" in str(excinfo.value)

    @pytest.mark.unit
    def test_update_clears_field_error(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.validate()
        assert "age" in session.errors
        session.update_value("age", 20)
        assert "age" not in session.errors

    @pytest.mark.unit
    def test_reset(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", 20)
        session.submit()
        session.reset()
        assert session.values == {"age": ""}
        assert session.errors == {}
        assert session.submitted is False
        assert session.delivery.status == DeliveryStatus.IDLE

    @pytest.mark.integration
    def test_visibility_transition(self, conditional_payload, recording_sink):
        session = FormSession(_prepared(conditional_payload), sink=recording_sink)
        session.update_value("a", "no")
        assert session.render().get_field("b") is None
        session.update_value("a", "yes")
        assert session.render().get_field("b") is not None
        session.update_value("a", "no")
        assert session.render().get_field("b") is None
        assert recording_sink.diagnostics == []

    @pytest.mark.unit
    def test_hidden_required_field_not_validated_or_submitted(self, conditional_payload):
        session = _prepared(conditional_payload).create_session()
        session.update_value("a", "no")
        session.update_value("b", "typed earlier")
        result = session.submit()
        assert result.ok
        assert result.payload == {"a": "no"}

    @pytest.mark.unit
    def test_disabled_field_rendered_but_excluded(self, conditional_payload):
        session = _prepared(conditional_payload).create_session()
        session.update_value("a", "no")
        session.update_value("c", "kept out")
        rendered = session.render().get_field("c")
        assert rendered.disabled is True
        assert rendered.required is False
        result = session.submit()
        assert result.ok
        assert "c" not in result.payload

    @pytest.mark.unit
    def test_disabled_field_error_suppressed(self, conditional_payload):
        session = _prepared(conditional_payload).create_session()
        session.update_value("a", "yes")
        session.validate()
        assert "c" in session.errors
        session.values["a"] = "no"
        assert session.render().get_field("c").error is None

    @pytest.mark.unit
    def test_submitted_context_drives_visibility(self):
        payload = {
            "version": "1",
            "uiSchema": {
                "title": "T",
                "fields": [
                    {"id": "name", "label": "Name", "type": "text"},
                    {
                        "id": "thanks",
                        "label": "Anything else?",
                        "type": "textarea",
                        "condition": {"op": "truthy", "ref": "context.submitted"},
                    },
                ],
            },
        }
        session = _prepared(payload).create_session()
        assert session.render().get_field("thanks") is None
        assert session.submit().ok
        assert session.render().get_field("thanks") is not None


class TestRender:
    """Tests for the rendered tree."""

    @pytest.mark.unit
    def test_fields_only_renders_implicit_stack(self, age_payload):
        rendered = _prepared(age_payload).create_session().render()
        assert len(rendered.children) == 1
        stack = rendered.children[0]
        assert stack.type == "stack"
        assert stack.gap == "md"
        field = stack.children[0]
        assert field.id == "age"
        assert field.required is True
        assert field.value == ""

    @pytest.mark.unit
    def test_to_dict_is_json_ready(self, age_payload):
        rendered = _prepared(age_payload).create_session().render()
        data = json.loads(json.dumps(rendered.to_dict()))
        assert data["title"] == "T"
        assert data["children"][0]["type"] == "stack"
        assert data["children"][0]["children"][0]["id"] == "age"
        assert [a["type"] for a in data["actions"]] == [a.type for a in rendered.actions]

    @pytest.mark.unit
    def test_errors_attached(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", 5)
        session.validate()
        field = session.render().get_field("age")
        assert field.error == "Age must be at least 18"
        assert field.suggestions == [18]

    @pytest.mark.unit
    def test_nested_layout(self):
        payload = {
            "version": "1",
            "uiSchema": {
                "title": "Profile",
                "layout": [
                    {
                        "type": "section",
                        "title": "About",
                        "children": [
                            {
                                "type": "row",
                                "children": [
                                    {"id": "first", "label": "First", "type": "text"},
                                    {"id": "last", "label": "Last", "type": "text"},
                                    {"id": "nick", "label": "Nick", "type": "text"},
                                ],
                            },
                            {
                                "type": "columns",
                                "gap": "lg",
                                "columns": [
                                    {"children": [{"id": "a", "label": "A", "type": "text"}]},
                                    {"children": [{"id": "b", "label": "B", "type": "checkbox"}]},
                                ],
                            },
                        ],
                    }
                ],
            },
        }
        rendered = _prepared(payload).create_session().render()
        section = rendered.children[0]
        assert section.title == "About"
        row, columns = section.children
        assert row.columns == 2
        assert columns.columns == 2
        assert columns.gap == "lg"
        assert all(isinstance(c, RenderedContainer) and c.type == "column" for c in columns.children)
        assert [f.id for f in rendered.iter_fields()] == ["first", "last", "nick", "a", "b"]
        assert rendered.get_field("b").value is False

    @pytest.mark.unit
    def test_conditional_actions(self):
        payload = {
            "version": "1",
            "uiSchema": {
                "title": "T",
                "fields": [{"id": "a", "label": "A", "type": "text"}],
                "actions": [
                    {"id": "go", "label": "Go", "type": "submit"},
                    {
                        "id": "more",
                        "label": "More",
                        "type": "button",
                        "condition": {"op": "exists", "ref": "a"},
                    },
                    {
                        "id": "again",
                        "label": "Again",
                        "type": "button",
                        "condition": {"op": "truthy", "ref": "context.submitted"},
                        "fallback": "disabled",
                    },
                ],
            },
        }
        session = _prepared(payload).create_session()
        actions = {a.id: a for a in session.render().actions}
        assert set(actions) == {"go", "again"}
        assert actions["again"].disabled is True
        session.update_value("a", "x")
        assert {a.id for a in session.render().actions} == {"go", "more", "again"}

    @pytest.mark.unit
    def test_format_rendered(self, age_payload):
        text = format_rendered(_prepared(age_payload).create_session().render())
        assert "Age* [number]" in text
        assert "Actions: Submit, Reset" in text


class TestDelivery:
    """Tests for FormSession.deliver."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_deliver_success(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", 40)
        sink = RecordingMessageSink()
        result = await session.deliver(sink)
        assert result.ok
        assert sink.messages == [result.message]
        assert session.delivery.status == DeliveryStatus.SUCCESS

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_deliver_skipped_when_invalid(self, age_payload):
        session = _prepared(age_payload).create_session()
        sink = RecordingMessageSink()
        result = await session.deliver(sink)
        assert not result.ok
        assert sink.messages == []
        assert session.delivery.status == DeliveryStatus.IDLE

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_deliver_failure_tracked_separately(self, age_payload):
        session = _prepared(age_payload).create_session()
        session.update_value("age", 40)
        result = await session.deliver(RecordingMessageSink(fail=ConnectionError("down")))
        assert result.ok
        assert session.delivery.status == DeliveryStatus.ERROR
        assert session.delivery.error == "down"
