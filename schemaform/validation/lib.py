"""Schema payload validation with actionable error reporting.

Validates untyped JSON against the UI-schema models and turns pydantic
errors into SchemaIssue records: a readable path, the message, and for
enum-style mismatches the allowed values plus a best-guess correction.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from schemaform.config import EnvVar, get_environment
from schemaform.schema import (
    CONDITION_OPS,
    FIELD_TYPES,
    LAYOUT_TYPES,
    ColumnsNode,
    FieldNode,
    SchemaEnvelope,
)
from schemaform.suggest import suggest_closest

ROOT_PATH = "(root)"
MAX_PAYLOAD_DEPTH = 64

_QUOTED = re.compile(r"'([^']*)'")
_CONDITION_TAGS = frozenset((*CONDITION_OPS, "literal"))
_NODE_TAGS = frozenset((*LAYOUT_TYPES, "field"))
_ENUM_ERROR_TYPES = frozenset({"enum", "literal_error"})


@dataclass(frozen=True)
class SchemaIssue:
    """A single schema validation failure.

    Attributes:
        path: Dotted/bracketed location, e.g. "uiSchema.fields[0].type".
        message: Human-readable description.
        allowed_values: Accepted values for enum-style mismatches.
        suggestion: Closest allowed value to what was received, if any.
    """

    path: str
    message: str
    allowed_values: tuple[str, ...] | None = None
    suggestion: str | None = None

    def format(self) -> str:
        """Render as a single line."""
        text = f"{self.path}: {self.message}"
        if self.allowed_values:
            text += f" (allowed: {', '.join(self.allowed_values)})"
        if self.suggestion is not None:
            text += f' Did you mean "{self.suggestion}"?'
        return text


@dataclass
class SchemaValidationResult:
    """Outcome of validating a schema payload.

    Attributes:
        envelope: Parsed payload when validation succeeded.
        issues: Every issue found (empty on success).
        max_issues: How many issues `visible_issues` shows.
    """

    envelope: SchemaEnvelope | None = None
    issues: list[SchemaIssue] = field(default_factory=list)
    max_issues: int = 8

    @property
    def is_valid(self) -> bool:
        return self.envelope is not None and not self.issues

    @property
    def visible_issues(self) -> list[SchemaIssue]:
        return self.issues[: self.max_issues]

    @property
    def hidden_count(self) -> int:
        """Issues beyond the visible cap ("N more")."""
        return max(0, len(self.issues) - self.max_issues)

    def format_issues(self) -> str:
        """Render the capped issue list, one issue per line."""
        lines = [f"- {issue.format()}" for issue in self.visible_issues]
        if self.hidden_count:
            lines.append(f"- ...and {self.hidden_count} more")
        return "\n".join(lines)


# =============================================================================
# Envelope normalization
# =============================================================================


def normalize_envelope(payload: Any) -> Any:
    """Coerce a payload into the enveloped shape before validation.

    Precedence:
        1. A mapping with a "uiSchema" key is already an envelope.
        2. Anything else is treated as a bare UI schema and wrapped as
           {"uiSchema": payload}.

    Example:
        >>> normalize_envelope({"title": "T", "fields": []})
        {'uiSchema': {'title': 'T', 'fields': []}}
    """
    if isinstance(payload, Mapping) and "uiSchema" in payload:
        return dict(payload)
    return {"uiSchema": payload}


# =============================================================================
# Path and message rendering
# =============================================================================


def _is_union_tag(loc: tuple[Any, ...], index: int) -> bool:
    """Check whether loc[index] is a tag inserted by a discriminated union."""
    item = loc[index]
    if not isinstance(item, str) or index == 0:
        return False
    prev = loc[index - 1]
    if prev == "condition" and item in _CONDITION_TAGS:
        return True
    if isinstance(prev, int) and index >= 2:
        container = loc[index - 2]
        if container == "conditions" and item in _CONDITION_TAGS:
            return True
        if container in ("layout", "children") and item in _NODE_TAGS:
            return True
    return False


def format_path(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as a dotted/bracketed path.

    Union tags are dropped so paths mirror the JSON document.

    Example:
        >>> format_path(("uiSchema", "fields", 0, "type"))
        'uiSchema.fields[0].type'
        >>> format_path(())
        '(root)'
    """
    parts: list[str] = []
    for index, item in enumerate(loc):
        if _is_union_tag(loc, index):
            continue
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts) or ROOT_PATH


def _expected_values(text: str) -> list[str]:
    return _QUOTED.findall(text)


def _issue_from_error(error: Mapping[str, Any]) -> SchemaIssue:
    path = format_path(tuple(error.get("loc", ())))
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    message = str(error.get("msg", "Invalid value"))
    received = error.get("input")

    if error_type in _ENUM_ERROR_TYPES:
        allowed = _expected_values(str(ctx.get("expected", "")))
        return SchemaIssue(
            path=path,
            message=message,
            allowed_values=tuple(allowed) or None,
            suggestion=suggest_closest(received, allowed)
            if isinstance(received, str)
            else None,
        )

    if error_type == "union_tag_invalid":
        discriminator = str(ctx.get("discriminator", ""))
        tag = str(ctx.get("tag", ""))
        allowed = [
            t for t in _expected_values(str(ctx.get("expected_tags", ""))) if t != "literal"
        ]
        if "condition_tag" in discriminator:
            noun = "condition op"
        else:
            noun = "node type"
            if "field" in allowed:
                allowed = [t for t in allowed if t != "field"] + list(FIELD_TYPES)
        return SchemaIssue(
            path=path,
            message=f"Unknown {noun} '{tag}'",
            allowed_values=tuple(allowed),
            suggestion=suggest_closest(tag, allowed),
        )

    if error_type == "union_tag_not_found":
        discriminator = str(ctx.get("discriminator", ""))
        if "condition_tag" in discriminator:
            message = "Condition must be a boolean or an object with a string 'op'"
        elif "layout_child_tag" in discriminator:
            message = "Layout child must be a field or container object"
        else:
            message = "Layout node must be an object with a string 'type'"
        return SchemaIssue(path=path, message=message)

    if error_type == "value_error":
        message = message.removeprefix("Value error, ")

    return SchemaIssue(path=path, message=message)


# =============================================================================
# Structural checks
# =============================================================================


def _payload_depth(payload: Any) -> int:
    """Maximum container nesting depth, computed without recursion."""
    deepest = 0
    stack: list[tuple[Any, int]] = [(payload, 0)]
    while stack:
        value, depth = stack.pop()
        if isinstance(value, Mapping):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        depth += 1
        deepest = max(deepest, depth)
        if depth > MAX_PAYLOAD_DEPTH:
            break
        stack.extend((child, depth) for child in children)
    return deepest


def _iter_field_locations(
    nodes: list[Any], loc: tuple[Any, ...]
) -> Iterator[tuple[tuple[Any, ...], FieldNode]]:
    for index, node in enumerate(nodes):
        here = (*loc, index)
        if isinstance(node, FieldNode):
            yield here, node
        elif isinstance(node, ColumnsNode):
            for slot_index, slot in enumerate(node.columns):
                yield from _iter_field_locations(
                    slot.children, (*here, "columns", slot_index, "children")
                )
        else:
            yield from _iter_field_locations(node.children, (*here, "children"))


def _duplicate_id_issues(envelope: SchemaEnvelope) -> list[SchemaIssue]:
    ui_schema = envelope.ui_schema
    if ui_schema.layout:
        located = _iter_field_locations(ui_schema.layout, ("uiSchema", "layout"))
    else:
        located = _iter_field_locations(ui_schema.fields or [], ("uiSchema", "fields"))

    issues: list[SchemaIssue] = []
    seen: dict[str, str] = {}
    for loc, node in located:
        path = format_path(loc)
        if node.id in seen:
            issues.append(
                SchemaIssue(
                    path=f"{path}.id",
                    message=f"Duplicate field id '{node.id}' (first declared at {seen[node.id]})",
                )
            )
        else:
            seen[node.id] = path
    return issues


# =============================================================================
# Main Interface
# =============================================================================


def validate_schema_payload(
    payload: Any, max_issues: int | None = None
) -> SchemaValidationResult:
    """Validate a raw schema payload.

    Accepts fields-only, layout-only, or combined schemas, either bare or
    wrapped in an envelope.

    Args:
        payload: Untyped JSON value.
        max_issues: Visible issue cap; defaults to SCHEMAFORM_MAX_SCHEMA_ISSUES.

    Returns:
        SchemaValidationResult with the parsed envelope or the issues.

    Example:
        >>> result = validate_schema_payload(
        ...     {"title": "T", "fields": [{"id": "a", "label": "A", "type": "txt"}]}
        ... )
        >>> result.issues[0].suggestion
        'text'
    """
    cap = get_environment(EnvVar.SCHEMAFORM_MAX_SCHEMA_ISSUES, override=max_issues)

    if _payload_depth(payload) > MAX_PAYLOAD_DEPTH:
        return SchemaValidationResult(
            issues=[
                SchemaIssue(
                    path=ROOT_PATH,
                    message=f"Payload nesting exceeds {MAX_PAYLOAD_DEPTH} levels",
                )
            ],
            max_issues=cap,
        )

    try:
        envelope = SchemaEnvelope.model_validate(normalize_envelope(payload))
    except PydanticValidationError as e:
        return SchemaValidationResult(
            issues=[_issue_from_error(err) for err in e.errors()],
            max_issues=cap,
        )

    issues = _duplicate_id_issues(envelope)
    if issues:
        return SchemaValidationResult(issues=issues, max_issues=cap)

    return SchemaValidationResult(envelope=envelope, max_issues=cap)


__all__ = [
    "MAX_PAYLOAD_DEPTH",
    "ROOT_PATH",
    "SchemaIssue",
    "SchemaValidationResult",
    "format_path",
    "normalize_envelope",
    "validate_schema_payload",
]
