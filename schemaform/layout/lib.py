"""Layout tree normalization.

Resolves the authoritative layout of a UI schema and flattens it into the
ordered field list that defaults, validation and submission work from.
"""

from collections.abc import Iterable, Iterator
from typing import Any

from schemaform.schema import (
    ColumnsNode,
    FieldNode,
    FieldType,
    GapSize,
    LayoutChild,
    LayoutNode,
    StackNode,
    UiSchema,
)


def resolve_layout(ui_schema: UiSchema) -> list[LayoutNode]:
    """Return the layout tree to render.

    Precedence:
        1. `layout` when present and non-empty
        2. An implicit vertical stack (gap "md") of all `fields`
        3. Empty list

    Example:
        >>> schema = UiSchema(title="T", fields=[FieldNode(id="a", label="A", type="text")])
        >>> resolve_layout(schema)[0].type
        'stack'
    """
    if ui_schema.layout:
        return list(ui_schema.layout)
    if ui_schema.fields:
        return [StackNode(type="stack", gap=GapSize.MD, children=list(ui_schema.fields))]
    return []


def iter_field_nodes(nodes: Iterable[LayoutChild]) -> Iterator[FieldNode]:
    """Yield fields depth-first, left to right.

    A columns container yields its slots in order, and each slot its
    children in order.
    """
    for node in nodes:
        if isinstance(node, FieldNode):
            yield node
        elif isinstance(node, ColumnsNode):
            for slot in node.columns:
                yield from iter_field_nodes(slot.children)
        else:
            yield from iter_field_nodes(node.children)


def collect_field_nodes(nodes: Iterable[LayoutChild]) -> list[FieldNode]:
    """Flatten a layout tree into its ordered field list."""
    return list(iter_field_nodes(nodes))


def default_value(field: FieldNode) -> Any:
    """Initial value for a field: its default, else False for checkboxes, else ""."""
    if field.default is not None:
        return field.default
    if field.type == FieldType.CHECKBOX:
        return False
    return ""


def build_default_values(fields: Iterable[FieldNode]) -> dict[str, Any]:
    """Seed form state from field defaults.

    Example:
        >>> build_default_values([FieldNode(id="ok", label="OK", type="checkbox")])
        {'ok': False}
    """
    return {field.id: default_value(field) for field in fields}


__all__ = [
    "build_default_values",
    "collect_field_nodes",
    "default_value",
    "iter_field_nodes",
    "resolve_layout",
]
