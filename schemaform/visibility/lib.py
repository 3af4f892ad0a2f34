"""Visibility resolution for conditional fields and actions."""

from dataclasses import dataclass
from typing import Any

from schemaform.condition import EvaluationContext, evaluate_condition
from schemaform.diagnostics import DiagnosticSink
from schemaform.schema import FallbackBehavior


@dataclass(frozen=True)
class Visibility:
    """How an element renders.

    Attributes:
        should_render: False when the element is omitted from the tree.
        disabled: True when the element renders but is inert.
    """

    should_render: bool
    disabled: bool

    @property
    def is_active(self) -> bool:
        """Rendered and enabled; only active fields are validated and submitted."""
        return self.should_render and not self.disabled


VISIBLE = Visibility(should_render=True, disabled=False)
HIDDEN = Visibility(should_render=False, disabled=False)
DISABLED = Visibility(should_render=True, disabled=True)


def resolve_visibility(
    condition: Any,
    fallback: FallbackBehavior | str | None,
    ctx: EvaluationContext,
    sink: DiagnosticSink | None = None,
) -> Visibility:
    """Map a condition and its fallback to a Visibility.

    A met condition renders the element enabled. Otherwise the fallback
    decides: "disabled" renders it inert, anything else hides it.

    Example:
        >>> resolve_visibility(False, "disabled", EvaluationContext())
        Visibility(should_render=True, disabled=True)
    """
    if evaluate_condition(condition, ctx, sink):
        return VISIBLE
    if fallback == FallbackBehavior.DISABLED:
        return DISABLED
    return HIDDEN


__all__ = [
    "DISABLED",
    "HIDDEN",
    "VISIBLE",
    "Visibility",
    "resolve_visibility",
]
