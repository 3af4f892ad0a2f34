"""Remote schema loading with classified errors and stale-response discard."""

from .lib import (
    LoadErrorKind,
    LoadState,
    LoadStatus,
    SchemaLoadError,
    SchemaLoader,
    fetch_json,
    is_supported_schema_url,
    load_schema,
    resolve_schema_url,
)

__all__ = [
    "LoadErrorKind",
    "LoadState",
    "LoadStatus",
    "SchemaLoadError",
    "SchemaLoader",
    "fetch_json",
    "is_supported_schema_url",
    "load_schema",
    "resolve_schema_url",
]
