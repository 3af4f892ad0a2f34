"""UI schema models: fields, layout containers, actions and conditions."""

from .lib import (
    FieldType,
    ActionType,
    ActionStyle,
    FallbackBehavior,
    GapSize,
    CONDITION_OPS,
    LAYOUT_TYPES,
    FIELD_TYPES,
    CONTEXT_REF_PREFIX,
    Condition,
    ConditionValue,
    EqualsCondition,
    NotEqualsCondition,
    InCondition,
    NotInCondition,
    ExistsCondition,
    TruthyCondition,
    FalsyCondition,
    AndCondition,
    OrCondition,
    NotCondition,
    condition_tag,
    FieldValue,
    FieldNode,
    Action,
    DEFAULT_ACTIONS,
    SectionNode,
    StackNode,
    RowNode,
    ColumnSlot,
    ColumnsNode,
    GroupNode,
    ContainerNode,
    LayoutNode,
    LayoutChild,
    layout_tag,
    layout_child_tag,
    UiSchema,
    SchemaEnvelope,
    export_json_schema,
)

__all__ = [
    # Enums and vocabularies
    "FieldType",
    "ActionType",
    "ActionStyle",
    "FallbackBehavior",
    "GapSize",
    "CONDITION_OPS",
    "LAYOUT_TYPES",
    "FIELD_TYPES",
    "CONTEXT_REF_PREFIX",
    # Conditions
    "Condition",
    "ConditionValue",
    "EqualsCondition",
    "NotEqualsCondition",
    "InCondition",
    "NotInCondition",
    "ExistsCondition",
    "TruthyCondition",
    "FalsyCondition",
    "AndCondition",
    "OrCondition",
    "NotCondition",
    "condition_tag",
    # Fields and actions
    "FieldValue",
    "FieldNode",
    "Action",
    "DEFAULT_ACTIONS",
    # Layout
    "SectionNode",
    "StackNode",
    "RowNode",
    "ColumnSlot",
    "ColumnsNode",
    "GroupNode",
    "ContainerNode",
    "LayoutNode",
    "LayoutChild",
    "layout_tag",
    "layout_child_tag",
    # Schema
    "UiSchema",
    "SchemaEnvelope",
    "export_json_schema",
]
