"""Field and form-level input validation."""

from .lib import (
    EMAIL_EXAMPLE,
    EMAIL_PATTERN,
    ValidationIssue,
    is_empty_value,
    parse_number,
    validate_field,
    validate_form,
    value_to_text,
)

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
