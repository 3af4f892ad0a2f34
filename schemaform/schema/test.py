"""Unit tests for UI schema models."""

import pytest
from pydantic import ValidationError

from .lib import (
    DEFAULT_ACTIONS,
    AndCondition,
    ColumnsNode,
    EqualsCondition,
    FieldNode,
    RowNode,
    SchemaEnvelope,
    StackNode,
    UiSchema,
    export_json_schema,
)


class TestFieldNode:
    """Tests for FieldNode."""

    @pytest.mark.unit
    def test_minimal_field(self):
        """Create field with only required members."""
        field = FieldNode(id="name", label="Name", type="text")
        assert field.type == "text"
        assert field.required is False
        assert field.condition is None

    @pytest.mark.unit
    def test_camel_case_aliases(self):
        """JSON camelCase keys populate snake_case attributes."""
        field = FieldNode.model_validate(
            {"id": "bio", "label": "Bio", "type": "textarea", "minLength": 2, "maxLength": 50}
        )
        assert field.min_length == 2
        assert field.max_length == 50

    @pytest.mark.unit
    def test_numeric_bounds_keep_int(self):
        """Integral bounds stay integers."""
        field = FieldNode(id="age", label="Age", type="number", min=18, max=99)
        assert field.max == 99
        assert isinstance(field.max, int)

    @pytest.mark.unit
    def test_select_requires_options(self):
        """Selects without options are rejected."""
        with pytest.raises(ValidationError, match="non-empty options"):
            FieldNode(id="role", label="Role", type="select")
        with pytest.raises(ValidationError):
            FieldNode(id="role", label="Role", type="select", options=[])

    @pytest.mark.unit
    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            FieldNode(id="x", label="X", type="password")


class TestConditions:
    """Tests for the condition union."""

    @pytest.mark.unit
    def test_boolean_literal(self):
        field = FieldNode(id="x", label="X", type="text", condition=False)
        assert field.condition is False

    @pytest.mark.unit
    def test_tagged_condition(self):
        field = FieldNode.model_validate(
            {
                "id": "b",
                "label": "B",
                "type": "text",
                "condition": {"op": "equals", "ref": "a", "value": "yes"},
            }
        )
        assert isinstance(field.condition, EqualsCondition)
        assert field.condition.value == "yes"

    @pytest.mark.unit
    def test_nested_combinators(self):
        field = FieldNode.model_validate(
            {
                "id": "b",
                "label": "B",
                "type": "text",
                "condition": {
                    "op": "and",
                    "conditions": [
                        {"op": "truthy", "ref": "context.submitted"},
                        {"op": "not", "condition": {"op": "exists", "ref": "a"}},
                    ],
                },
            }
        )
        assert isinstance(field.condition, AndCondition)
        assert len(field.condition.conditions) == 2

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "condition",
        [
            {"op": "and", "conditions": []},
            {"op": "in", "ref": "a", "values": []},
            {"op": "equals", "ref": "a.b", "value": 1},
            {"op": "equals", "ref": "a"},
            {"op": "nope", "ref": "a"},
            {"ref": "a"},
            "yes",
        ],
    )
    def test_malformed_conditions_rejected(self, condition):
        with pytest.raises(ValidationError):
            FieldNode(id="x", label="X", type="text", condition=condition)

    @pytest.mark.unit
    def test_null_comparison_value_allowed(self):
        field = FieldNode(
            id="x",
            label="X",
            type="text",
            condition={"op": "equals", "ref": "context.mode", "value": None},
        )
        assert field.condition.value is None


class TestLayout:
    """Tests for layout containers."""

    @pytest.mark.unit
    def test_row_column_count_default(self):
        row = RowNode(
            type="row",
            children=[
                FieldNode(id="a", label="A", type="text"),
                FieldNode(id="b", label="B", type="text"),
                FieldNode(id="c", label="C", type="text"),
            ],
        )
        assert row.column_count == 2
        assert row.gap == "md"

    @pytest.mark.unit
    def test_row_column_count_explicit(self):
        row = RowNode(
            type="row",
            columns=3,
            children=[FieldNode(id="a", label="A", type="text")],
        )
        assert row.column_count == 3

    @pytest.mark.unit
    def test_empty_children_rejected(self):
        with pytest.raises(ValidationError):
            StackNode(type="stack", children=[])

    @pytest.mark.unit
    def test_columns_slot_bounds(self):
        slot = {"children": [{"id": "a", "label": "A", "type": "text"}]}
        with pytest.raises(ValidationError):
            ColumnsNode.model_validate({"type": "columns", "columns": [slot]})
        with pytest.raises(ValidationError):
            ColumnsNode.model_validate({"type": "columns", "columns": [slot] * 7})
        node = ColumnsNode.model_validate({"type": "columns", "columns": [slot] * 2})
        assert len(node.columns) == 2

    @pytest.mark.unit
    def test_nested_layout_children(self):
        schema = UiSchema.model_validate(
            {
                "title": "T",
                "layout": [
                    {
                        "type": "section",
                        "title": "Profile",
                        "children": [
                            {"type": "row", "children": [{"id": "a", "label": "A", "type": "text"}]},
                            {"id": "b", "label": "B", "type": "checkbox"},
                        ],
                    }
                ],
            }
        )
        section = schema.layout[0]
        assert section.type == "section"
        assert isinstance(section.children[0], RowNode)
        assert isinstance(section.children[1], FieldNode)


class TestEnvelope:
    """Tests for SchemaEnvelope."""

    @pytest.mark.unit
    def test_defaults(self):
        envelope = SchemaEnvelope.model_validate({"uiSchema": {"title": "T"}})
        assert envelope.version == "0"
        assert envelope.submit_to_assistant is True
        assert envelope.submit_message is None

    @pytest.mark.unit
    def test_version_must_be_string(self):
        with pytest.raises(ValidationError):
            SchemaEnvelope.model_validate({"version": 1, "uiSchema": {"title": "T"}})

    @pytest.mark.unit
    def test_default_actions(self):
        assert [a.type for a in DEFAULT_ACTIONS] == ["submit", "reset"]

    @pytest.mark.unit
    def test_export_json_schema(self):
        schema = export_json_schema()
        assert schema["title"] == "SchemaEnvelope"
        assert "uiSchema" in schema["properties"]
