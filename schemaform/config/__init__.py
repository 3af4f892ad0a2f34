"""Centralized configuration management for schemaform.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from schemaform.config import EnvVar, get_environment
    >>>
    >>> get_environment(EnvVar.SCHEMAFORM_ENV)  # "development"
    >>> is_production()  # False

Environment Variable Categories:
    runtime: deployment context and log level
    loader: remote schema base URL and timeout
    validation: schema issue reporting limits
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_schema_base_url,
    is_production,
    # Introspection
    list_environment_variables,
)

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
