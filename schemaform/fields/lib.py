"""Per-field input validation with correction suggestions.

Rules run in priority order: required/empty, optional-empty
short-circuit, then type-specific checks. Only visible and enabled fields
are validated by `validate_form`.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from schemaform.condition import MISSING, EvaluationContext
from schemaform.diagnostics import DiagnosticSink
from schemaform.schema import FieldNode, FieldType
from schemaform.suggest import rank_options
from schemaform.visibility import resolve_visibility

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
EMAIL_EXAMPLE = "name@example.com"

NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ValidationIssue:
    """A validation failure attached to one field.

    Attributes:
        field_id: Id of the failing field.
        message: Human-readable message, prefixed with the field label.
        suggestions: Candidate corrections, best first.
    """

    field_id: str
    message: str
    suggestions: list[Any] | None = None


def is_empty_value(value: Any) -> bool:
    """Whether a value counts as empty for required checks.

    Empty means missing, None, a blank string, NaN, or False.

    Example:
        >>> is_empty_value("  "), is_empty_value(False), is_empty_value(0)
        (True, True, False)
    """
    if value is None or value is MISSING:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, str):
        return value.strip() == ""
    return False


def parse_number(value: Any) -> int | float | None:
    """Parse a form value as a number.

    Returns None for booleans, blank strings and unparseable input.
    Non-finite results are returned as-is for the caller to reject.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not NUMBER_PATTERN.fullmatch(text):
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None


def value_to_text(value: Any) -> str:
    """Render a scalar form value as text using JSON spelling.

    Example:
        >>> value_to_text(True), value_to_text(2.0), value_to_text("a")
        ('true', '2', 'a')
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text_issue(field: FieldNode, text: str) -> ValidationIssue | None:
    if field.min_length is not None and len(text) < field.min_length:
        return ValidationIssue(
            field.id, f"{field.label} must be at least {field.min_length} characters"
        )
    if field.max_length is not None and len(text) > field.max_length:
        return ValidationIssue(
            field.id, f"{field.label} must be at most {field.max_length} characters"
        )
    if field.pattern:
        try:
            matched = re.fullmatch(field.pattern, text) is not None
        except re.error as e:
            logger.debug("Ignoring malformed pattern on %s: %s", field.id, e)
            return None
        if not matched:
            return ValidationIssue(field.id, f"{field.label} has an invalid format")
    return None


def _number_issue(field: FieldNode, value: Any) -> ValidationIssue | None:
    number = parse_number(value)
    if number is None or not math.isfinite(number):
        return ValidationIssue(field.id, f"{field.label} must be a number")
    if field.min is not None and number < field.min:
        return ValidationIssue(field.id, f"{field.label} must be at least {field.min}", [field.min])
    if field.max is not None and number > field.max:
        return ValidationIssue(field.id, f"{field.label} must be at most {field.max}", [field.max])
    return None


def _select_issue(field: FieldNode, value: Any) -> ValidationIssue | None:
    if not field.options:
        return ValidationIssue(field.id, f"{field.label} has no options configured")
    received = value_to_text(value)
    if received in field.options:
        return None
    return ValidationIssue(
        field.id,
        f"{field.label} must be one of the available options",
        rank_options(received, field.options),
    )


def validate_field(field: FieldNode, value: Any) -> ValidationIssue | None:
    """Validate one field value.

    Args:
        field: Field definition.
        value: Current value (may be missing or None).

    Returns:
        The first rule violation, or None.

    Example:
        >>> age = FieldNode(id="age", label="Age", type="number", max=99)
        >>> validate_field(age, 150)
        ValidationIssue(field_id='age', message='Age must be at most 99', suggestions=[99])
    """
    if is_empty_value(value):
        if not field.required:
            return None
        suggestions = None
        if field.type == FieldType.SELECT and field.options:
            suggestions = list(field.options)
        return ValidationIssue(field.id, f"{field.label} is required", suggestions)

    match field.type:
        case FieldType.NUMBER:
            return _number_issue(field, value)
        case FieldType.SELECT:
            return _select_issue(field, value)
        case FieldType.EMAIL:
            text = value_to_text(value)
            if not EMAIL_PATTERN.fullmatch(text.strip()):
                return ValidationIssue(
                    field.id, f"{field.label} must be a valid email address", [EMAIL_EXAMPLE]
                )
            return _text_issue(field, text)
        case FieldType.TEXT | FieldType.TEXTAREA:
            return _text_issue(field, value_to_text(value))
        case _:
            return None


def validate_form(
    fields: Iterable[FieldNode],
    values: Mapping[str, Any],
    ctx: EvaluationContext,
    sink: DiagnosticSink | None = None,
) -> list[ValidationIssue]:
    """Validate every active field.

    Hidden and disabled fields are skipped regardless of `required`.
    """
    issues: list[ValidationIssue] = []
    for field in fields:
        visibility = resolve_visibility(field.condition, field.fallback, ctx, sink)
        if not visibility.is_active:
            continue
        issue = validate_field(field, values.get(field.id, MISSING))
        if issue is not None:
            issues.append(issue)
    return issues


__all__ = [
    "EMAIL_EXAMPLE",
    "EMAIL_PATTERN",
    "ValidationIssue",
    "is_empty_value",
    "parse_number",
    "validate_field",
    "validate_form",
    "value_to_text",
]
