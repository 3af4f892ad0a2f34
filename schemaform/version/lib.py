"""Schema version compatibility gate.

Classifies the version string declared by a schema payload and decides
whether rendering may proceed. Legacy schemas (no version, or major 0)
still render but carry an upgrade advisory.
"""

import re
from dataclasses import dataclass
from enum import Enum

from schemaform.config import is_production

LEGACY_SCHEMA_VERSION = "0"
SUPPORTED_SCHEMA_MAJOR_VERSIONS: frozenset[int] = frozenset({1})
CURRENT_SCHEMA_VERSION = "1"

_VERSION_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?$", re.ASCII)


class VersionStatus(str, Enum):
    """Outcome of the version gate."""

    SUPPORTED = "supported"
    LEGACY = "legacy"
    UNSUPPORTED = "unsupported"
    INVALID = "invalid"


@dataclass(frozen=True)
class ParsedSchemaVersion:
    """Numeric components of a schema version string."""

    major: int
    minor: int | None = None
    patch: int | None = None


@dataclass(frozen=True)
class SchemaVersionInfo:
    """Classified schema version.

    Attributes:
        status: Gate outcome.
        raw: The trimmed version string as declared.
        major: Parsed major version, None when the string was invalid.
    """

    status: VersionStatus
    raw: str
    major: int | None = None

    @property
    def blocks_rendering(self) -> bool:
        """True when a diagnostic view must replace the form."""
        return self.status in (VersionStatus.INVALID, VersionStatus.UNSUPPORTED)

    @property
    def is_legacy(self) -> bool:
        return self.status == VersionStatus.LEGACY


def parse_schema_version(raw: str) -> ParsedSchemaVersion | None:
    """Parse "MAJOR[.MINOR[.PATCH]]" into its components.

    Args:
        raw: Version string; surrounding whitespace is ignored.

    Returns:
        ParsedSchemaVersion, or None when the string does not match.

    Example:
        >>> parse_schema_version("1.2")
        ParsedSchemaVersion(major=1, minor=2, patch=None)
        >>> parse_schema_version("v1") is None
        True
    """
    match = _VERSION_PATTERN.match(raw.strip())
    if not match:
        return None

    major, minor, patch = match.groups()
    return ParsedSchemaVersion(
        major=int(major),
        minor=int(minor) if minor is not None else None,
        patch=int(patch) if patch is not None else None,
    )


def get_schema_version_info(raw: str | None = None) -> SchemaVersionInfo:
    """Classify a declared schema version.

    Args:
        raw: Declared version. None means the payload declared none,
            which is treated as the legacy sentinel "0".

    Returns:
        SchemaVersionInfo with one of the four statuses.

    Example:
        >>> get_schema_version_info("1").status
        <VersionStatus.SUPPORTED: 'supported'>
        >>> get_schema_version_info("7").blocks_rendering
        True
    """
    trimmed = (LEGACY_SCHEMA_VERSION if raw is None else raw).strip()
    parsed = parse_schema_version(trimmed)

    if parsed is None:
        return SchemaVersionInfo(status=VersionStatus.INVALID, raw=trimmed)

    if parsed.major == 0:
        return SchemaVersionInfo(status=VersionStatus.LEGACY, raw=trimmed, major=0)

    if parsed.major in SUPPORTED_SCHEMA_MAJOR_VERSIONS:
        return SchemaVersionInfo(
            status=VersionStatus.SUPPORTED, raw=trimmed, major=parsed.major
        )

    return SchemaVersionInfo(
        status=VersionStatus.UNSUPPORTED, raw=trimmed, major=parsed.major
    )


def legacy_advisory(
    info: SchemaVersionInfo, production: bool | None = None
) -> str | None:
    """Build the upgrade advisory for legacy schemas.

    Returns None for non-legacy versions and in production contexts.
    """
    if not info.is_legacy:
        return None
    if production is None:
        production = is_production()
    if production:
        return None
    return (
        f'Schema declares legacy version "{info.raw}". '
        f'Declare "version": "{CURRENT_SCHEMA_VERSION}" to opt into the current format.'
    )


def describe_version_problem(info: SchemaVersionInfo) -> str | None:
    """Human-readable explanation for a blocking version status."""
    if info.status == VersionStatus.INVALID:
        return (
            f'Schema version "{info.raw}" is not a valid version string. '
            "Expected MAJOR, MAJOR.MINOR or MAJOR.MINOR.PATCH."
        )
    if info.status == VersionStatus.UNSUPPORTED:
        supported = ", ".join(str(v) for v in sorted(SUPPORTED_SCHEMA_MAJOR_VERSIONS))
        return (
            f'Schema version "{info.raw}" is not supported. '
            f"Supported major versions: {supported}."
        )
    return None


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
