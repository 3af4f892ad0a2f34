"""Unit tests for layout resolution."""

import pytest

from schemaform.schema import StackNode, UiSchema

from .lib import build_default_values, collect_field_nodes, resolve_layout


def _field(field_id: str, field_type: str = "text", **extra) -> dict:
    return {"id": field_id, "label": field_id.title(), "type": field_type, **extra}


class TestResolveLayout:
    """Tests for resolve_layout."""

    @pytest.mark.unit
    def test_fields_only_becomes_implicit_stack(self):
        schema = UiSchema.model_validate({"title": "T", "fields": [_field("a"), _field("b")]})
        layout = resolve_layout(schema)
        assert len(layout) == 1
        assert isinstance(layout[0], StackNode)
        assert layout[0].gap == "md"
        assert [f.id for f in layout[0].children] == ["a", "b"]

    @pytest.mark.unit
    def test_layout_wins_over_fields(self):
        schema = UiSchema.model_validate(
            {
                "title": "T",
                "fields": [_field("ignored")],
                "layout": [{"type": "group", "children": [_field("kept")]}],
            }
        )
        layout = resolve_layout(schema)
        assert layout[0].type == "group"
        assert [f.id for f in collect_field_nodes(layout)] == ["kept"]

    @pytest.mark.unit
    def test_empty_layout_falls_back_to_fields(self):
        schema = UiSchema.model_validate({"title": "T", "fields": [_field("a")], "layout": []})
        assert resolve_layout(schema)[0].type == "stack"

    @pytest.mark.unit
    def test_no_content(self):
        assert resolve_layout(UiSchema(title="T")) == []


class TestCollectFieldNodes:
    """Tests for collect_field_nodes."""

    @pytest.mark.unit
    def test_depth_first_order(self):
        schema = UiSchema.model_validate(
            {
                "title": "T",
                "layout": [
                    {
                        "type": "section",
                        "children": [
                            _field("a"),
                            {"type": "row", "children": [_field("b"), _field("c")]},
                        ],
                    },
                    {
                        "type": "columns",
                        "columns": [
                            {"children": [_field("d"), _field("e")]},
                            {"children": [{"type": "stack", "children": [_field("f")]}]},
                        ],
                    },
                ],
            }
        )
        fields = collect_field_nodes(schema.layout)
        assert [f.id for f in fields] == ["a", "b", "c", "d", "e", "f"]

    @pytest.mark.unit
    def test_empty(self):
        assert collect_field_nodes([]) == []


class TestBuildDefaultValues:
    """Tests for build_default_values."""

    @pytest.mark.unit
    def test_defaults(self):
        schema = UiSchema.model_validate(
            {
                "title": "T",
                "fields": [
                    _field("name"),
                    _field("agree", "checkbox"),
                    _field("age", "number", default=30),
                    _field("role", "select", options=["admin", "user"], default="user"),
                    _field("news", "checkbox", default=True),
                ],
            }
        )
        values = build_default_values(schema.fields)
        assert values == {
            "name": "",
            "agree": False,
            "age": 30,
            "role": "user",
            "news": True,
        }
