"""Condition evaluation for dynamic visibility.

Evaluates the closed condition language against live form values and a
context map. Evaluation is fail-open: a condition that cannot be trusted
(malformed shape, unknown op, unsupported ref, excessive nesting, or any
error raised while evaluating) counts as true, so the element it guards
is rendered, and a diagnostic is emitted.

Equality is JSON-typed: booleans never equal numbers, ints and floats
compare by value. Truthiness follows JavaScript: None, missing refs, "",
0 and NaN are falsy; every list or mapping is truthy.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from schemaform.diagnostics import Diagnostic, DiagnosticSink, default_sink
from schemaform.schema import CONTEXT_REF_PREFIX

MAX_CONDITION_DEPTH = 32


class _Missing:
    """Marker for a ref that resolves to nothing."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass
class EvaluationContext:
    """Inputs a condition is evaluated against.

    Attributes:
        values: Current form values keyed by field id.
        context: Extra state addressable as `context.<key>`. Always carries
            `submitted`.
    """

    values: Mapping[str, Any] = field(default_factory=dict)
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.context = {"submitted": False, **self.context}

    @property
    def submitted(self) -> bool:
        return bool(self.context.get("submitted"))


class _FailOpen(Exception):
    def __init__(self, code: str, message: str, node: Any):
        super().__init__(message)
        self.code = code
        self.message = message
        self.node = node


# =============================================================================
# Value semantics
# =============================================================================


def is_truthy(value: Any) -> bool:
    """JavaScript-like truthiness for resolved ref values.

    Example:
        >>> is_truthy([]), is_truthy(0.0), is_truthy(" ")
        (True, False, True)
    """
    if value is MISSING or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def is_defined(value: Any) -> bool:
    """Whether a resolved value counts as present for `exists`."""
    if value is MISSING or value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def strict_equals(left: Any, right: Any) -> bool:
    """JSON-typed strict equality.

    Example:
        >>> strict_equals(True, 1), strict_equals(1, 1.0), strict_equals(None, MISSING)
        (False, True, False)
    """
    if left is MISSING or right is MISSING:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


# =============================================================================
# Ref resolution
# =============================================================================


def is_supported_ref(ref: str) -> bool:
    """A ref is a bare field id or `context.<key>`."""
    return ref.startswith(CONTEXT_REF_PREFIX) or "." not in ref


def resolve_ref(
    ref: str, ctx: EvaluationContext, sink: DiagnosticSink | None = None
) -> Any:
    """Resolve a ref to its current value, or MISSING.

    Unknown keys and unsupported ref forms emit a diagnostic.

    Example:
        >>> resolve_ref("context.submitted", EvaluationContext())
        False
    """
    sink = sink or default_sink()

    if ref.startswith(CONTEXT_REF_PREFIX):
        key = ref[len(CONTEXT_REF_PREFIX) :]
        if key not in ctx.context:
            sink.emit(Diagnostic("unknown-context-ref", f"Unknown context ref: {ref}", {"ref": ref}))
            return MISSING
        return ctx.context[key]

    if "." in ref:
        sink.emit(
            Diagnostic(
                "unsupported-ref",
                f"Unsupported nested ref: {ref}; only field ids or context.* refs are supported",
                {"ref": ref},
            )
        )
        return MISSING

    if ref not in ctx.values:
        sink.emit(Diagnostic("unknown-field-ref", f"Unknown field ref: {ref}", {"ref": ref}))
        return MISSING
    return ctx.values[ref]


# =============================================================================
# Evaluation
# =============================================================================


def _ref_value(node: Mapping[str, Any], ctx: EvaluationContext, sink: DiagnosticSink) -> Any:
    ref = node.get("ref")
    if not isinstance(ref, str) or not ref.strip():
        raise _FailOpen(
            "missing-ref", f'Condition op "{node["op"]}" requires a non-empty string ref', node
        )
    if not is_supported_ref(ref):
        raise _FailOpen(
            "unsupported-ref",
            f"Unsupported nested ref: {ref}; only field ids or context.* refs are supported",
            node,
        )
    return resolve_ref(ref, ctx, sink)


def _literal(node: Mapping[str, Any]) -> Any:
    if "value" not in node:
        raise _FailOpen("missing-value", f'Condition op "{node["op"]}" requires a value', node)
    return node["value"]


def _literals(node: Mapping[str, Any]) -> list[Any]:
    values = node.get("values")
    if not isinstance(values, list) or not values:
        raise _FailOpen(
            "missing-values", f'Condition op "{node["op"]}" requires a non-empty values array', node
        )
    return values


def _children(node: Mapping[str, Any]) -> list[Any]:
    children = node.get("conditions")
    if not isinstance(children, list) or not children:
        raise _FailOpen(
            "missing-conditions",
            f'Condition op "{node["op"]}" requires a non-empty conditions array',
            node,
        )
    return children


def _evaluate(condition: Any, ctx: EvaluationContext, sink: DiagnosticSink, depth: int) -> bool:
    if depth > MAX_CONDITION_DEPTH:
        raise _FailOpen(
            "max-depth", f"Condition nesting exceeds {MAX_CONDITION_DEPTH} levels", condition
        )
    if isinstance(condition, BaseModel):
        condition = condition.model_dump()

    match condition:
        case bool():
            return condition
        case {"op": "equals"}:
            return strict_equals(_ref_value(condition, ctx, sink), _literal(condition))
        case {"op": "notEquals"}:
            return not strict_equals(_ref_value(condition, ctx, sink), _literal(condition))
        case {"op": "in"}:
            value = _ref_value(condition, ctx, sink)
            return any(strict_equals(value, v) for v in _literals(condition))
        case {"op": "notIn"}:
            value = _ref_value(condition, ctx, sink)
            return not any(strict_equals(value, v) for v in _literals(condition))
        case {"op": "exists"}:
            return is_defined(_ref_value(condition, ctx, sink))
        case {"op": "truthy"}:
            return is_truthy(_ref_value(condition, ctx, sink))
        case {"op": "falsy"}:
            return not is_truthy(_ref_value(condition, ctx, sink))
        case {"op": "and"}:
            return all(_evaluate(c, ctx, sink, depth + 1) for c in _children(condition))
        case {"op": "or"}:
            return any(_evaluate(c, ctx, sink, depth + 1) for c in _children(condition))
        case {"op": "not"}:
            nested = condition.get("condition")
            if nested is None:
                raise _FailOpen("missing-condition", 'Condition op "not" requires a nested condition', condition)
            return not _evaluate(nested, ctx, sink, depth + 1)
        case {"op": str(op)}:
            raise _FailOpen("unknown-op", f"Unsupported condition op: {op}", condition)
        case Mapping():
            raise _FailOpen("missing-op", "Condition missing op", condition)
        case _:
            raise _FailOpen("unsupported-condition", "Unsupported condition type", condition)


def evaluate_condition(
    condition: Any, ctx: EvaluationContext, sink: DiagnosticSink | None = None
) -> bool:
    """Evaluate a condition, failing open.

    Args:
        condition: None, a boolean, a raw JSON condition object, or a parsed
            condition model.
        ctx: Values and context to resolve refs against.
        sink: Receives a diagnostic for every fail-open outcome. Defaults
            to the logging sink.

    Returns:
        The condition's value; True when absent or untrustworthy.

    Example:
        >>> ctx = EvaluationContext(values={"a": "yes"})
        >>> evaluate_condition({"op": "equals", "ref": "a", "value": "yes"}, ctx)
        True
    """
    if condition is None:
        return True

    sink = sink or default_sink()
    try:
        return _evaluate(condition, ctx, sink, 0)
    except _FailOpen as e:
        sink.emit(
            Diagnostic(e.code, f"{e.message}; rendering element.", {"condition": e.node})
        )
    except Exception as e:
        sink.emit(
            Diagnostic(
                "evaluation-error",
                "Failed to evaluate condition; rendering element.",
                {"condition": condition, "error": repr(e)},
            )
        )
    return True


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
