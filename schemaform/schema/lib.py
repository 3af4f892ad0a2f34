"""UI schema models.

This module defines the declarative UI-schema contract: fields, layout
containers, actions, the visibility condition language, and the envelope
that wraps a schema with its version and delivery options. Payloads are
produced by an assistant as JSON and validated against these models before
anything is rendered.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    Discriminator,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    Tag,
    model_validator,
)

from schemaform.version import LEGACY_SCHEMA_VERSION


class FieldType(str, Enum):
    """Input widget kinds a field can render as."""

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"


class ActionType(str, Enum):
    """Behaviour of an action button."""

    BUTTON = "button"
    SUBMIT = "submit"
    RESET = "reset"


class ActionStyle(str, Enum):
    """Visual emphasis of an action button."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    OUTLINE = "outline"


class FallbackBehavior(str, Enum):
    """What happens to an element whose condition evaluates false.

    - HIDDEN: the element is omitted from the tree
    - DISABLED: the element renders inert
    """

    HIDDEN = "hidden"
    DISABLED = "disabled"


class GapSize(str, Enum):
    """Spacing between children of a layout container."""

    SM = "sm"
    MD = "md"
    LG = "lg"


CONDITION_OPS: tuple[str, ...] = (
    "equals",
    "notEquals",
    "in",
    "notIn",
    "exists",
    "truthy",
    "falsy",
    "and",
    "or",
    "not",
)
LAYOUT_TYPES: tuple[str, ...] = ("section", "stack", "row", "columns", "group")
FIELD_TYPES: tuple[str, ...] = tuple(t.value for t in FieldType)
CONTEXT_REF_PREFIX = "context."

FieldValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
ConditionValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class _SchemaModel(BaseModel):
    model_config = {
        "use_enum_values": True,
        "populate_by_name": True,
    }


# =============================================================================
# Condition language
# =============================================================================


def _check_ref(ref: str) -> str:
    if not ref.strip():
        raise ValueError("Refs must not be empty")
    if "." in ref and not ref.startswith(CONTEXT_REF_PREFIX):
        raise ValueError("Refs must be either a field id or start with context.")
    return ref


ConditionRef = Annotated[str, AfterValidator(_check_ref)]


class EqualsCondition(_SchemaModel):
    op: Literal["equals"]
    ref: ConditionRef
    value: ConditionValue


class NotEqualsCondition(_SchemaModel):
    op: Literal["notEquals"]
    ref: ConditionRef
    value: ConditionValue


class InCondition(_SchemaModel):
    op: Literal["in"]
    ref: ConditionRef
    values: list[ConditionValue] = Field(..., min_length=1)


class NotInCondition(_SchemaModel):
    op: Literal["notIn"]
    ref: ConditionRef
    values: list[ConditionValue] = Field(..., min_length=1)


class ExistsCondition(_SchemaModel):
    op: Literal["exists"]
    ref: ConditionRef


class TruthyCondition(_SchemaModel):
    op: Literal["truthy"]
    ref: ConditionRef


class FalsyCondition(_SchemaModel):
    op: Literal["falsy"]
    ref: ConditionRef


class AndCondition(_SchemaModel):
    op: Literal["and"]
    conditions: list["Condition"] = Field(..., min_length=1)


class OrCondition(_SchemaModel):
    op: Literal["or"]
    conditions: list["Condition"] = Field(..., min_length=1)


class NotCondition(_SchemaModel):
    op: Literal["not"]
    condition: "Condition"


def condition_tag(value: Any) -> str | None:
    """Discriminate a raw or parsed condition by its op.

    Booleans map to the "literal" tag. Anything without a string op
    yields None so validation reports a structural error.
    """
    if isinstance(value, bool):
        return "literal"
    if isinstance(value, dict):
        op = value.get("op")
        return op if isinstance(op, str) else None
    if isinstance(value, BaseModel):
        return getattr(value, "op", None)
    return None


Condition = Annotated[
    Union[
        Annotated[bool, Tag("literal")],
        Annotated[EqualsCondition, Tag("equals")],
        Annotated[NotEqualsCondition, Tag("notEquals")],
        Annotated[InCondition, Tag("in")],
        Annotated[NotInCondition, Tag("notIn")],
        Annotated[ExistsCondition, Tag("exists")],
        Annotated[TruthyCondition, Tag("truthy")],
        Annotated[FalsyCondition, Tag("falsy")],
        Annotated[AndCondition, Tag("and")],
        Annotated[OrCondition, Tag("or")],
        Annotated[NotCondition, Tag("not")],
    ],
    Discriminator(condition_tag),
]

AndCondition.model_rebuild()
OrCondition.model_rebuild()
NotCondition.model_rebuild()


# =============================================================================
# Fields and actions
# =============================================================================


class FieldNode(_SchemaModel):
    """A single input field.

    Attributes:
        id: Stable key, unique across the whole schema.
        label: Human-readable label, also used in validation messages.
        type: Widget kind.
        options: Allowed values; required and non-empty for selects.
        min / max: Numeric bounds for number fields.
        min_length / max_length / pattern: Text constraints.
        default: Initial value; otherwise False for checkboxes and "".
        rows: Visible rows for textareas.
        condition: Visibility condition.
        fallback: Behaviour when the condition is false (default hidden).

    Example:
        >>> FieldNode(id="age", label="Age", type="number", min=18)
    """

    id: str = Field(..., min_length=1, description="Unique field identifier")
    label: str = Field(..., description="Human-readable label")
    type: FieldType = Field(..., description="Widget kind")
    placeholder: str | None = Field(default=None)
    required: bool = Field(default=False)
    options: list[str] | None = Field(default=None)
    min: StrictInt | StrictFloat | None = Field(default=None)
    max: StrictInt | StrictFloat | None = Field(default=None)
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    max_length: int | None = Field(default=None, alias="maxLength", ge=0)
    pattern: str | None = Field(default=None)
    default: FieldValue | None = Field(default=None)
    rows: int | None = Field(default=None, ge=1)
    condition: Condition | None = Field(default=None)
    fallback: FallbackBehavior | None = Field(default=None)

    @model_validator(mode="after")
    def _select_needs_options(self) -> "FieldNode":
        if self.type == FieldType.SELECT and not self.options:
            raise ValueError("Select fields require a non-empty options list")
        return self


class Action(_SchemaModel):
    """A form action button."""

    id: str = Field(..., min_length=1)
    label: str
    type: ActionType
    style: ActionStyle | None = None
    condition: Condition | None = None
    fallback: FallbackBehavior | None = None


DEFAULT_ACTIONS: tuple[Action, ...] = (
    Action(id="submit", label="Submit", type=ActionType.SUBMIT, style=ActionStyle.PRIMARY),
    Action(id="reset", label="Reset", type=ActionType.RESET, style=ActionStyle.SECONDARY),
)


# =============================================================================
# Layout containers
# =============================================================================


class _Container(_SchemaModel):
    id: str | None = Field(default=None, description="Optional container id")
    gap: GapSize = Field(default=GapSize.MD, description="Spacing between children")


class SectionNode(_Container):
    """Titled block of content."""

    type: Literal["section"]
    title: str | None = None
    description: str | None = None
    children: list["LayoutChild"] = Field(..., min_length=1)


class StackNode(_Container):
    """Vertical stack of children."""

    type: Literal["stack"]
    children: list["LayoutChild"] = Field(..., min_length=1)


class RowNode(_Container):
    """Horizontal row laid out over a column grid."""

    type: Literal["row"]
    columns: int | None = Field(default=None, ge=1, le=6)
    children: list["LayoutChild"] = Field(..., min_length=1)

    @property
    def column_count(self) -> int:
        """Declared column count, or min(children, 2)."""
        if self.columns is not None:
            return self.columns
        return min(len(self.children), 2)


class ColumnSlot(_SchemaModel):
    """One column of a columns container."""

    id: str | None = None
    children: list["LayoutChild"] = Field(..., min_length=1)


class ColumnsNode(_Container):
    """Explicit side-by-side columns (2-6 slots)."""

    type: Literal["columns"]
    columns: list[ColumnSlot] = Field(..., min_length=2, max_length=6)


class GroupNode(_Container):
    """Labelled group of related children."""

    type: Literal["group"]
    label: str | None = None
    children: list["LayoutChild"] = Field(..., min_length=1)


def layout_tag(value: Any) -> str | None:
    """Discriminate a container by its type."""
    if isinstance(value, dict):
        node_type = value.get("type")
        return node_type if isinstance(node_type, str) else None
    if isinstance(value, _Container):
        return value.type
    return None


def layout_child_tag(value: Any) -> str | None:
    """Discriminate a container child: a container, or a field.

    Dicts whose type names a field type (or that carry no type at all) are
    validated as fields, so a missing type is reported on the field model.
    """
    if isinstance(value, FieldNode):
        return "field"
    if isinstance(value, _Container):
        return value.type
    if isinstance(value, dict):
        node_type = value.get("type")
        if not isinstance(node_type, str) or node_type in FIELD_TYPES:
            return "field"
        return node_type
    return None


LayoutNode = Annotated[
    Union[
        Annotated[SectionNode, Tag("section")],
        Annotated[StackNode, Tag("stack")],
        Annotated[RowNode, Tag("row")],
        Annotated[ColumnsNode, Tag("columns")],
        Annotated[GroupNode, Tag("group")],
    ],
    Discriminator(layout_tag),
]

LayoutChild = Annotated[
    Union[
        Annotated[SectionNode, Tag("section")],
        Annotated[StackNode, Tag("stack")],
        Annotated[RowNode, Tag("row")],
        Annotated[ColumnsNode, Tag("columns")],
        Annotated[GroupNode, Tag("group")],
        Annotated[FieldNode, Tag("field")],
    ],
    Discriminator(layout_child_tag),
]

ContainerNode = Union[SectionNode, StackNode, RowNode, ColumnsNode, GroupNode]

for _model in (SectionNode, StackNode, RowNode, ColumnSlot, ColumnsNode, GroupNode):
    _model.model_rebuild()


# =============================================================================
# Schema and envelope
# =============================================================================


class UiSchema(_SchemaModel):
    """Declarative description of a form.

    Either `fields` or `layout` supplies the content; `layout` wins when both
    are present. Both shapes are accepted for authoring convenience.
    """

    title: str
    description: str | None = None
    fields: list[FieldNode] | None = None
    layout: list[LayoutNode] | None = None
    actions: list[Action] | None = None


class SchemaEnvelope(_SchemaModel):
    """Inbound payload: a UI schema plus version and delivery options."""

    version: StrictStr = Field(default=LEGACY_SCHEMA_VERSION)
    ui_schema: UiSchema = Field(..., alias="uiSchema")
    submit_to_assistant: bool = Field(default=True, alias="submitToAssistant")
    submit_message: str | None = Field(default=None, alias="submitMessage")


def export_json_schema() -> dict:
    """Export the SchemaEnvelope JSON Schema for prompt injection.

    Example:
        >>> export_json_schema()["title"]
        'SchemaEnvelope'
    """
    return SchemaEnvelope.model_json_schema(by_alias=True)


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
