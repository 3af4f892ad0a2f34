"""Layout resolution and field flattening."""

from .lib import (
    build_default_values,
    collect_field_nodes,
    default_value,
    iter_field_nodes,
    resolve_layout,
)

__all__ = [
    "build_default_values",
    "collect_field_nodes",
    "default_value",
    "iter_field_nodes",
    "resolve_layout",
]
