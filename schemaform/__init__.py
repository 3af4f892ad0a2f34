"""schemaform: declarative form schemas rendered and submitted in a chat host."""

from schemaform.form import FormSession, PreparedForm, SchemaDiagnostic, prepare_form
from schemaform.loader import SchemaLoader, load_schema
from schemaform.schema import SchemaEnvelope, UiSchema, export_json_schema
from schemaform.validation import SchemaValidationResult, validate_schema_payload
from schemaform.version import VersionStatus, get_schema_version_info

__all__ = [
    # Schema
    "SchemaEnvelope",
    "UiSchema",
    "export_json_schema",
    # Validation
    "validate_schema_payload",
    "SchemaValidationResult",
    "get_schema_version_info",
    "VersionStatus",
    # Forms
    "prepare_form",
    "PreparedForm",
    "FormSession",
    "SchemaDiagnostic",
    # Loading
    "SchemaLoader",
    "load_schema",
]
