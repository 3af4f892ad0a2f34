"""Form pipeline: schema payload to rendered, interactive form.

`prepare_form` runs a raw payload through the version gate, schema
validation and layout resolution, producing either a PreparedForm or a
SchemaDiagnostic that replaces the form. `FormSession` holds the mutable
state of one form instance and recomputes visibility, validation and
the rendered tree from scratch on every call.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from schemaform.condition import EvaluationContext
from schemaform.core import UnknownFieldError
from schemaform.diagnostics import Diagnostic, DiagnosticSink, default_sink
from schemaform.fields import ValidationIssue, validate_form
from schemaform.layout import build_default_values, collect_field_nodes, resolve_layout
from schemaform.schema import (
    DEFAULT_ACTIONS,
    Action,
    ActionType,
    ColumnsNode,
    FieldNode,
    LayoutChild,
    LayoutNode,
    RowNode,
    SchemaEnvelope,
)
from schemaform.submission import (
    DeliveryState,
    MessageSink,
    build_submission_message,
    deliver_submission,
    normalize_submission,
)
from schemaform.validation import SchemaIssue, normalize_envelope, validate_schema_payload
from schemaform.version import (
    SchemaVersionInfo,
    VersionStatus,
    describe_version_problem,
    get_schema_version_info,
    legacy_advisory,
)
from schemaform.visibility import resolve_visibility

logger = logging.getLogger(__name__)


# =============================================================================
# Preparation
# =============================================================================


class DiagnosticKind(str, Enum):
    """Reasons a payload cannot be rendered as a form."""

    INVALID_VERSION = "invalid-version"
    UNSUPPORTED_VERSION = "unsupported-version"
    INVALID_SCHEMA = "invalid-schema"
    EMPTY_LAYOUT = "empty-layout"


@dataclass
class SchemaDiagnostic:
    """A diagnostic panel shown instead of the form.

    Attributes:
        kind: Classification of the failure.
        title: Panel headline.
        message: Explanation for the schema author.
        version: Version gate outcome, when known.
        issues: Schema issues for INVALID_SCHEMA.
        max_issues: How many issues the panel lists.
    """

    kind: DiagnosticKind
    title: str
    message: str
    version: SchemaVersionInfo | None = None
    issues: list[SchemaIssue] = field(default_factory=list)
    max_issues: int = 8

    @property
    def visible_issues(self) -> list[SchemaIssue]:
        return self.issues[: self.max_issues]

    @property
    def hidden_count(self) -> int:
        return max(0, len(self.issues) - self.max_issues)

    def format(self) -> str:
        """Render the panel as plain text."""
        lines = [self.title, self.message]
        lines.extend(f"- {issue.format()}" for issue in self.visible_issues)
        if self.hidden_count:
            lines.append(f"- ...and {self.hidden_count} more")
        return "\n".join(lines)


@dataclass
class PreparedForm:
    """A validated schema ready to back form sessions."""

    envelope: SchemaEnvelope
    version: SchemaVersionInfo
    layout: list[LayoutNode]
    fields: list[FieldNode]
    actions: list[Action]
    advisory: str | None = None

    @property
    def title(self) -> str:
        return self.envelope.ui_schema.title

    @property
    def description(self) -> str | None:
        return self.envelope.ui_schema.description

    def get_field(self, field_id: str) -> FieldNode:
        """Look up a field by id; raises UnknownFieldError."""
        for node in self.fields:
            if node.id == field_id:
                return node
        raise UnknownFieldError(field_id)

    def create_session(self, sink: DiagnosticSink | None = None) -> "FormSession":
        return FormSession(self, sink=sink)


def _gate_version(raw: Any) -> SchemaVersionInfo:
    if raw is None or isinstance(raw, str):
        return get_schema_version_info(raw)
    return SchemaVersionInfo(status=VersionStatus.INVALID, raw=str(raw))


def prepare_form(
    payload: Any, sink: DiagnosticSink | None = None
) -> "PreparedForm | SchemaDiagnostic":
    """Run a raw payload through the render pipeline.

    Accepts raw JSON (bare or enveloped) or an already validated
    SchemaEnvelope, such as the result of `load_schema`.

    Order:
        1. Envelope normalization
        2. Version gate (invalid and unsupported versions stop here)
        3. Schema validation
        4. Layout resolution (an empty layout stops here)

    Legacy versions proceed; the upgrade advisory is emitted to the sink
    and attached to the PreparedForm outside production.

    Example:
        >>> form = prepare_form({"title": "T", "fields": [{"id": "a", "label": "A", "type": "text"}]})
        >>> [f.id for f in form.fields]
        ['a']
    """
    sink = sink or default_sink()
    if isinstance(payload, SchemaEnvelope):
        envelope_data = None
        version = _gate_version(payload.version)
    else:
        envelope_data = normalize_envelope(payload)
        version = _gate_version(envelope_data.get("version"))

    if version.blocks_rendering:
        invalid = version.status == VersionStatus.INVALID
        return SchemaDiagnostic(
            kind=DiagnosticKind.INVALID_VERSION if invalid else DiagnosticKind.UNSUPPORTED_VERSION,
            title="Invalid schema version" if invalid else "Unsupported schema version",
            message=describe_version_problem(version) or "",
            version=version,
        )

    if envelope_data is None:
        envelope = payload
    else:
        result = validate_schema_payload(envelope_data)
        if not result.is_valid:
            return SchemaDiagnostic(
                kind=DiagnosticKind.INVALID_SCHEMA,
                title="Invalid schema",
                message=f"The schema failed validation with {len(result.issues)} issue(s).",
                version=version,
                issues=result.issues,
                max_issues=result.max_issues,
            )
        envelope = result.envelope

    layout = resolve_layout(envelope.ui_schema)
    if not layout:
        return SchemaDiagnostic(
            kind=DiagnosticKind.EMPTY_LAYOUT,
            title="Empty form",
            message="The schema declares no fields or layout to render.",
            version=version,
        )

    advisory = legacy_advisory(version)
    if advisory is not None:
        sink.emit(Diagnostic("legacy-version", advisory, {"version": version.raw}))

    fields = collect_field_nodes(layout)
    actions = list(envelope.ui_schema.actions or DEFAULT_ACTIONS)
    logger.debug(
        "Prepared form %r (version %s, %d fields)", envelope.ui_schema.title, version.raw, len(fields)
    )
    return PreparedForm(
        envelope=envelope,
        version=version,
        layout=layout,
        fields=fields,
        actions=actions,
        advisory=advisory,
    )


# =============================================================================
# Rendered tree
# =============================================================================


@dataclass
class RenderedField:
    """A field as it should be displayed."""

    id: str
    label: str
    type: str
    value: Any
    required: bool = False
    disabled: bool = False
    error: str | None = None
    suggestions: list[Any] | None = None
    placeholder: str | None = None
    options: list[str] | None = None
    rows: int | None = None


@dataclass
class RenderedContainer:
    """A layout container with its visible children.

    Columns slots render as containers of type "column".
    """

    type: str
    id: str | None = None
    gap: str | None = None
    title: str | None = None
    description: str | None = None
    label: str | None = None
    columns: int | None = None
    children: list["RenderedContainer | RenderedField"] = field(default_factory=list)


@dataclass
class RenderedAction:
    """An action button as it should be displayed."""

    id: str
    label: str
    type: str
    style: str | None = None
    disabled: bool = False


@dataclass
class RenderedForm:
    """Snapshot of a form session's display state."""

    title: str
    description: str | None
    children: list[RenderedContainer]
    actions: list[RenderedAction]
    advisory: str | None = None

    def iter_fields(self) -> Iterator[RenderedField]:
        """Yield rendered fields depth-first."""
        stack: list[RenderedContainer | RenderedField] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if isinstance(node, RenderedField):
                yield node
            else:
                stack.extend(reversed(node.children))

    def get_field(self, field_id: str) -> RenderedField | None:
        return next((f for f in self.iter_fields() if f.id == field_id), None)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SubmitResult:
    """Outcome of a submit attempt.

    Attributes:
        ok: True when validation passed.
        issues: Validation issues blocking the submit.
        payload: Normalized submission (only when ok).
        message: Outbound message text, when the schema forwards submissions.
    """

    ok: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    payload: dict[str, Any] | None = None
    message: str | None = None


# =============================================================================
# Session
# =============================================================================


class FormSession:
    """Mutable state of one form instance.

    Values start at field defaults and change only through `update_value`.
    Visibility, validation and rendering are recomputed from the current
    values on every call.

    Example:
        >>> session = prepare_form(payload).create_session()
        >>> session.update_value("a", "yes")
        >>> session.render().get_field("b") is not None
        True
    """

    def __init__(self, form: PreparedForm, sink: DiagnosticSink | None = None):
        self.form = form
        self._sink = sink
        self._defaults = build_default_values(form.fields)
        self._field_ids = {node.id for node in form.fields}
        self.values: dict[str, Any] = dict(self._defaults)
        self.errors: dict[str, ValidationIssue] = {}
        self.submitted = False
        self.delivery = DeliveryState()

    @property
    def context(self) -> EvaluationContext:
        return EvaluationContext(values=self.values, context={"submitted": self.submitted})

    def update_value(self, field_id: str, value: Any) -> None:
        """Set a field value and clear that field's error."""
        if field_id not in self._field_ids:
            raise UnknownFieldError(field_id)
        self.values[field_id] = value
        self.errors.pop(field_id, None)

    def update_values(self, values: Mapping[str, Any]) -> None:
        for field_id, value in values.items():
            self.update_value(field_id, value)

    def validate(self) -> list[ValidationIssue]:
        """Validate active fields and replace the error map."""
        issues = validate_form(self.form.fields, self.values, self.context, self._sink)
        self.errors = {issue.field_id: issue for issue in issues}
        return issues

    def submit(self) -> SubmitResult:
        """Validate and, when valid, build the submission.

        The payload is normalized against the pre-submit context, then
        `submitted` flips to True.
        """
        issues = self.validate()
        if issues:
            return SubmitResult(ok=False, issues=issues)

        payload = normalize_submission(self.form.fields, self.values, self.context, self._sink)
        self.submitted = True

        message = None
        if self.form.envelope.submit_to_assistant:
            message = build_submission_message(payload, self.form.envelope.submit_message)
        return SubmitResult(ok=True, payload=payload, message=message)

    async def deliver(self, sink: MessageSink) -> SubmitResult:
        """Submit and forward the message to a sink.

        Delivery is skipped when validation fails, when the schema does not
        forward submissions, or while a previous delivery is pending. The
        outcome is tracked on `self.delivery`.
        """
        result = self.submit()
        if not result.ok or result.message is None or self.delivery.is_pending:
            return result
        await deliver_submission(sink, result.message, self.delivery)
        return result

    def reset(self) -> None:
        """Restore defaults and clear errors, submitted flag and delivery state."""
        self.values = dict(self._defaults)
        self.errors = {}
        self.submitted = False
        self.delivery = DeliveryState()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> RenderedForm:
        """Build the display tree for the current state."""
        ctx = self.context
        return RenderedForm(
            title=self.form.title,
            description=self.form.description,
            children=[self._render_container(node, ctx) for node in self.form.layout],
            actions=self._render_actions(ctx),
            advisory=self.form.advisory,
        )

    def _render_children(
        self, nodes: list[LayoutChild], ctx: EvaluationContext
    ) -> list[RenderedContainer | RenderedField]:
        rendered: list[RenderedContainer | RenderedField] = []
        for node in nodes:
            if isinstance(node, FieldNode):
                item = self._render_field(node, ctx)
                if item is not None:
                    rendered.append(item)
            else:
                rendered.append(self._render_container(node, ctx))
        return rendered

    def _render_container(self, node: Any, ctx: EvaluationContext) -> RenderedContainer:
        container = RenderedContainer(type=node.type, id=node.id, gap=node.gap)
        match node:
            case ColumnsNode():
                container.columns = len(node.columns)
                container.children = [
                    RenderedContainer(
                        type="column",
                        id=slot.id,
                        children=self._render_children(slot.children, ctx),
                    )
                    for slot in node.columns
                ]
                return container
            case RowNode():
                container.columns = node.column_count
            case _:
                container.title = getattr(node, "title", None)
                container.description = getattr(node, "description", None)
                container.label = getattr(node, "label", None)
        container.children = self._render_children(node.children, ctx)
        return container

    def _render_field(self, node: FieldNode, ctx: EvaluationContext) -> RenderedField | None:
        visibility = resolve_visibility(node.condition, node.fallback, ctx, self._sink)
        if not visibility.should_render:
            return None
        issue = None if visibility.disabled else self.errors.get(node.id)
        return RenderedField(
            id=node.id,
            label=node.label,
            type=node.type,
            value=self.values.get(node.id),
            required=node.required and not visibility.disabled,
            disabled=visibility.disabled,
            error=issue.message if issue else None,
            suggestions=issue.suggestions if issue else None,
            placeholder=node.placeholder,
            options=node.options,
            rows=node.rows,
        )

    def _render_actions(self, ctx: EvaluationContext) -> list[RenderedAction]:
        rendered: list[RenderedAction] = []
        for action in self.form.actions:
            visibility = resolve_visibility(action.condition, action.fallback, ctx, self._sink)
            if not visibility.should_render:
                continue
            busy = action.type == ActionType.SUBMIT and self.delivery.is_pending
            rendered.append(
                RenderedAction(
                    id=action.id,
                    label=action.label,
                    type=action.type,
                    style=action.style,
                    disabled=visibility.disabled or busy,
                )
            )
        return rendered


def format_rendered(form: RenderedForm) -> str:
    """Render a RenderedForm as an indented plain-text outline."""
    lines = [form.title]
    if form.description:
        lines.append(form.description)
    if form.advisory:
        lines.append(f"[advisory] {form.advisory}")

    def walk(nodes: list[RenderedContainer | RenderedField], depth: int) -> None:
        indent = "  " * depth
        for node in nodes:
            if isinstance(node, RenderedField):
                marker = "*" if node.required else ""
                state = " (disabled)" if node.disabled else ""
                lines.append(f"{indent}{node.label}{marker} [{node.type}] = {node.value!r}{state}")
                if node.error:
                    lines.append(f"{indent}  ! {node.error}")
            else:
                heading = node.title or node.label or ""
                lines.append(f"{indent}<{node.type}> {heading}".rstrip())
                walk(node.children, depth + 1)

    walk(form.children, 1)
    labels = [a.label + (" (disabled)" if a.disabled else "") for a in form.actions]
    lines.append("Actions: " + ", ".join(labels))
    return "\n".join(lines)


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
