"""Render pipeline and interactive form sessions."""

from .lib import (
    DiagnosticKind,
    FormSession,
    PreparedForm,
    RenderedAction,
    RenderedContainer,
    RenderedField,
    RenderedForm,
    SchemaDiagnostic,
    SubmitResult,
    format_rendered,
    prepare_form,
)

__all__ = [
    "DiagnosticKind",
    "FormSession",
    "PreparedForm",
    "RenderedAction",
    "RenderedContainer",
    "RenderedField",
    "RenderedForm",
    "SchemaDiagnostic",
    "SubmitResult",
    "format_rendered",
    "prepare_form",
]
