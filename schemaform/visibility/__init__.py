"""Condition-driven visibility for fields and actions."""

from .lib import DISABLED, HIDDEN, VISIBLE, Visibility, resolve_visibility

__all__ = [
    "DISABLED",
    "HIDDEN",
    "VISIBLE",
    "Visibility",
    "resolve_visibility",
]
