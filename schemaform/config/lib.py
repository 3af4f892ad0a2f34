"""Centralized environment configuration management for schemaform.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from schemaform.config import EnvVar, get_environment
    >>>
    >>> timeout = get_environment(EnvVar.SCHEMAFORM_LOAD_TIMEOUT)  # float
    >>> timeout = get_environment(EnvVar.SCHEMAFORM_LOAD_TIMEOUT, override=2.5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SCHEMAFORM_ENV").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by schemaform.

    Categories:
        - runtime: deployment context and logging
        - loader: remote schema loading
        - validation: schema validation reporting
    """

    # -------------------------------------------------------------------------
    # Runtime
    # -------------------------------------------------------------------------
    SCHEMAFORM_ENV = EnvConfig(
        name="SCHEMAFORM_ENV",
        default="development",
        var_type=str,
        description="Deployment context (development, test, production)",
        category="runtime",
    )
    SCHEMAFORM_LOG_LEVEL = EnvConfig(
        name="SCHEMAFORM_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level used by the CLI",
        category="runtime",
    )

    # -------------------------------------------------------------------------
    # Remote schema loading
    # -------------------------------------------------------------------------
    SCHEMAFORM_SCHEMA_BASE_URL = EnvConfig(
        name="SCHEMAFORM_SCHEMA_BASE_URL",
        default="http://localhost:3000",
        var_type=str,
        description="Origin used to resolve /-relative schema URLs",
        category="loader",
    )
    SCHEMAFORM_LOAD_TIMEOUT = EnvConfig(
        name="SCHEMAFORM_LOAD_TIMEOUT",
        default=10.0,
        var_type=float,
        description="Remote schema request timeout in seconds",
        category="loader",
    )

    # -------------------------------------------------------------------------
    # Validation reporting
    # -------------------------------------------------------------------------
    SCHEMAFORM_MAX_SCHEMA_ISSUES = EnvConfig(
        name="SCHEMAFORM_MAX_SCHEMA_ISSUES",
        default=8,
        var_type=int,
        description="Schema issues shown before collapsing into an 'N more' counter",
        category="validation",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.

    Example:
        >>> get_environment(EnvVar.SCHEMAFORM_MAX_SCHEMA_ISSUES)
        8
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def is_production(override: str | None = None) -> bool:
    """Check whether schemaform runs in a production-like context.

    Diagnostic details and legacy-version advisories are suppressed
    when this returns True.
    """
    env = get_environment(EnvVar.SCHEMAFORM_ENV, override=override)
    return str(env).strip().lower() in ("production", "prod")


def get_schema_base_url(override: str | None = None) -> str:
    """Get the origin used for /-relative schema URLs, without a trailing slash."""
    return str(get_environment(EnvVar.SCHEMAFORM_SCHEMA_BASE_URL, override)).rstrip(
        "/"
    )


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (runtime, loader, validation).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "is_production",
    "get_schema_base_url",
    # Introspection
    "list_environment_variables",
]
