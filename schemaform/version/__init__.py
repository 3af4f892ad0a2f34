"""Schema version gate."""

from .lib import (
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    SUPPORTED_SCHEMA_MAJOR_VERSIONS,
    ParsedSchemaVersion,
    SchemaVersionInfo,
    VersionStatus,
    describe_version_problem,
    get_schema_version_info,
    legacy_advisory,
    parse_schema_version,
)

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "LEGACY_SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_MAJOR_VERSIONS",
    "ParsedSchemaVersion",
    "SchemaVersionInfo",
    "VersionStatus",
    "describe_version_problem",
    "get_schema_version_info",
    "legacy_advisory",
    "parse_schema_version",
]
