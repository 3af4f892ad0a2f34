"""Unit tests for schema payload validation."""

import pytest

from .lib import (
    MAX_PAYLOAD_DEPTH,
    SchemaIssue,
    format_path,
    normalize_envelope,
    validate_schema_payload,
)


def _field(field_id: str, field_type: str = "text", **extra) -> dict:
    return {"id": field_id, "label": field_id.title(), "type": field_type, **extra}


def _issue_at(result, path: str) -> SchemaIssue:
    matches = [issue for issue in result.issues if issue.path == path]
    assert matches, f"no issue at {path}: {[i.path for i in result.issues]}"
    return matches[0]


class TestNormalizeEnvelope:
    """Tests for envelope normalization."""

    @pytest.mark.unit
    def test_bare_schema_is_wrapped(self):
        assert normalize_envelope({"title": "T"}) == {"uiSchema": {"title": "T"}}

    @pytest.mark.unit
    def test_envelope_passes_through(self):
        payload = {"version": "1", "uiSchema": {"title": "T"}}
        assert normalize_envelope(payload) == payload

    @pytest.mark.unit
    def test_non_mapping_is_wrapped(self):
        assert normalize_envelope(None) == {"uiSchema": None}


class TestFormatPath:
    """Tests for error path rendering."""

    @pytest.mark.unit
    def test_keys_and_indices(self):
        assert format_path(("uiSchema", "fields", 0, "type")) == "uiSchema.fields[0].type"

    @pytest.mark.unit
    def test_root(self):
        assert format_path(()) == "(root)"

    @pytest.mark.unit
    def test_union_tags_dropped(self):
        loc = ("uiSchema", "layout", 0, "section", "children", 1, "field", "type")
        assert format_path(loc) == "uiSchema.layout[0].children[1].type"

    @pytest.mark.unit
    def test_condition_tags_dropped(self):
        loc = ("uiSchema", "fields", 2, "condition", "not", "condition", "equals", "ref")
        assert format_path(loc) == "uiSchema.fields[2].condition.condition.ref"

    @pytest.mark.unit
    def test_field_named_like_tag_kept(self):
        loc = ("uiSchema", "layout", 0, "columns", "columns", 1, "children")
        assert format_path(loc) == "uiSchema.layout[0].columns[1].children"


class TestValidateSchemaPayload:
    """Tests for validate_schema_payload."""

    @pytest.mark.unit
    def test_fields_only_schema(self):
        result = validate_schema_payload({"title": "T", "fields": [_field("name")]})
        assert result.is_valid
        assert result.envelope.version == "0"
        assert result.envelope.ui_schema.fields[0].id == "name"

    @pytest.mark.unit
    def test_layout_only_envelope(self):
        result = validate_schema_payload(
            {
                "version": "1",
                "uiSchema": {
                    "title": "T",
                    "layout": [{"type": "stack", "children": [_field("a")]}],
                },
            }
        )
        assert result.is_valid
        assert result.envelope.version == "1"

    @pytest.mark.unit
    def test_enum_mismatch_suggests_correction(self):
        result = validate_schema_payload({"title": "T", "fields": [_field("a", "txt")]})
        assert not result.is_valid
        issue = _issue_at(result, "uiSchema.fields[0].type")
        assert "text" in issue.allowed_values
        assert issue.suggestion == "text"

    @pytest.mark.unit
    def test_unknown_container_type(self):
        result = validate_schema_payload(
            {"title": "T", "layout": [{"type": "sectoin", "children": [_field("a")]}]}
        )
        issue = _issue_at(result, "uiSchema.layout[0]")
        assert "Unknown node type 'sectoin'" in issue.message
        assert issue.suggestion == "section"

    @pytest.mark.unit
    def test_unknown_child_type_offers_field_types(self):
        result = validate_schema_payload(
            {
                "title": "T",
                "layout": [{"type": "stack", "children": [{"id": "a", "label": "A", "type": "emial"}]}],
            }
        )
        issue = _issue_at(result, "uiSchema.layout[0].children[0]")
        assert "email" in issue.allowed_values
        assert "group" in issue.allowed_values
        assert issue.suggestion == "email"

    @pytest.mark.unit
    def test_unknown_condition_op(self):
        result = validate_schema_payload(
            {
                "title": "T",
                "fields": [_field("a", condition={"op": "equal", "ref": "b", "value": 1})],
            }
        )
        issue = _issue_at(result, "uiSchema.fields[0].condition")
        assert issue.suggestion == "equals"
        assert "literal" not in issue.allowed_values

    @pytest.mark.unit
    def test_dotted_ref_must_use_context(self):
        result = validate_schema_payload(
            {
                "title": "T",
                "fields": [_field("a", condition={"op": "truthy", "ref": "form.b"})],
            }
        )
        issue = _issue_at(result, "uiSchema.fields[0].condition.ref")
        assert "context." in issue.message
        assert not issue.message.startswith("Value error")

    @pytest.mark.unit
    def test_condition_without_op(self):
        result = validate_schema_payload(
            {"title": "T", "fields": [_field("a", condition={"ref": "b"})]}
        )
        issue = _issue_at(result, "uiSchema.fields[0].condition")
        assert "'op'" in issue.message

    @pytest.mark.unit
    def test_select_without_options(self):
        result = validate_schema_payload({"title": "T", "fields": [_field("role", "select")]})
        issue = _issue_at(result, "uiSchema.fields[0]")
        assert issue.message == "Select fields require a non-empty options list"

    @pytest.mark.unit
    def test_missing_title(self):
        result = validate_schema_payload({"fields": [_field("a")]})
        issue = _issue_at(result, "uiSchema.title")
        assert issue.message == "Field required"

    @pytest.mark.unit
    def test_non_object_payload(self):
        result = validate_schema_payload(None)
        assert not result.is_valid
        assert result.issues[0].path == "uiSchema"

    @pytest.mark.unit
    def test_issue_cap_and_hidden_count(self):
        fields = [_field(f"f{i}", "txt") for i in range(10)]
        result = validate_schema_payload({"title": "T", "fields": fields}, max_issues=8)
        assert len(result.issues) == 10
        assert len(result.visible_issues) == 8
        assert result.hidden_count == 2
        assert result.format_issues().endswith("...and 2 more")

    @pytest.mark.unit
    def test_issue_cap_from_environment(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_MAX_SCHEMA_ISSUES", "3")
        fields = [_field(f"f{i}", "txt") for i in range(5)]
        result = validate_schema_payload({"title": "T", "fields": fields})
        assert len(result.visible_issues) == 3
        assert result.hidden_count == 2

    @pytest.mark.unit
    def test_duplicate_field_ids(self):
        result = validate_schema_payload(
            {"title": "T", "fields": [_field("a"), _field("a", "number")]}
        )
        assert result.envelope is None
        issue = _issue_at(result, "uiSchema.fields[1].id")
        assert "Duplicate field id 'a'" in issue.message
        assert "uiSchema.fields[0]" in issue.message

    @pytest.mark.unit
    def test_duplicate_field_ids_in_columns(self):
        result = validate_schema_payload(
            {
                "title": "T",
                "layout": [
                    {
                        "type": "columns",
                        "columns": [
                            {"children": [_field("a")]},
                            {"children": [_field("a")]},
                        ],
                    }
                ],
            }
        )
        _issue_at(result, "uiSchema.layout[0].columns[1].children[0].id")

    @pytest.mark.unit
    def test_excessive_nesting_rejected(self):
        payload: dict = {"title": "T"}
        for _ in range(MAX_PAYLOAD_DEPTH + 5):
            payload = {"nested": payload}
        result = validate_schema_payload(payload)
        assert result.issues[0].path == "(root)"
        assert "nesting" in result.issues[0].message


class TestSchemaIssue:
    """Tests for SchemaIssue rendering."""

    @pytest.mark.unit
    def test_format_with_suggestion(self):
        issue = SchemaIssue(
            path="uiSchema.fields[0].type",
            message="Invalid type",
            allowed_values=("text", "email"),
            suggestion="text",
        )
        assert issue.format() == (
            'uiSchema.fields[0].type: Invalid type (allowed: text, email) Did you mean "text"?'
        )

    @pytest.mark.unit
    def test_format_plain(self):
        assert SchemaIssue(path="(root)", message="Broken").format() == "(root): Broken"
