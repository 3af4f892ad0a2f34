"""Fail-open evaluator for the visibility condition language."""

from .lib import (
    MAX_CONDITION_DEPTH,
    MISSING,
    EvaluationContext,
    evaluate_condition,
    is_defined,
    is_supported_ref,
    is_truthy,
    resolve_ref,
    strict_equals,
)

__all__ = [
    "MAX_CONDITION_DEPTH",
    "MISSING",
    "EvaluationContext",
    "evaluate_condition",
    "is_defined",
    "is_supported_ref",
    "is_truthy",
    "resolve_ref",
    "strict_equals",
]
