"""Schema payload validation with path-addressed, suggestion-bearing issues."""

from .lib import (
    MAX_PAYLOAD_DEPTH,
    ROOT_PATH,
    SchemaIssue,
    SchemaValidationResult,
    format_path,
    normalize_envelope,
    validate_schema_payload,
)

__all__ = [
    "MAX_PAYLOAD_DEPTH",
    "ROOT_PATH",
    "SchemaIssue",
    "SchemaValidationResult",
    "format_path",
    "normalize_envelope",
    "validate_schema_payload",
]
