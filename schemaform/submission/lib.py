"""Submission normalization and outbound delivery.

Builds the outbound payload from active fields only, renders it into a
message, and hands the message to an asynchronous sink. Delivery outcome
is tracked separately from form validity.
"""

import json
import logging
import math
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TextIO

from schemaform.condition import MISSING, EvaluationContext, is_truthy
from schemaform.diagnostics import DiagnosticSink
from schemaform.fields import parse_number, value_to_text
from schemaform.schema import FieldNode, FieldType
from schemaform.visibility import resolve_visibility

logger = logging.getLogger(__name__)

JSON_PLACEHOLDER = "{{json}}"
DEFAULT_SUBMIT_TEMPLATE = "Form submission:\n\n" + JSON_PLACEHOLDER


# =============================================================================
# Normalization
# =============================================================================


def normalize_submission_value(field: FieldNode, value: Any) -> Any | None:
    """Normalize one value for submission.

    Returns None when the key should be omitted.

    - checkbox: boolean coercion (never omitted)
    - number: parsed number, integral floats collapsed to int; omitted when
      empty, unparseable or non-finite
    - others: trimmed string; omitted when blank

    Example:
        >>> normalize_submission_value(FieldNode(id="n", label="N", type="number"), " 4.0 ")
        4
    """
    if field.type == FieldType.CHECKBOX:
        return is_truthy(value)

    if value is None or value is MISSING:
        return None

    if field.type == FieldType.NUMBER:
        number = parse_number(value)
        if number is None or not math.isfinite(number):
            return None
        if isinstance(number, float) and number.is_integer():
            return int(number)
        return number

    text = value_to_text(value).strip()
    return text or None


def normalize_submission(
    fields: Iterable[FieldNode],
    values: Mapping[str, Any],
    ctx: EvaluationContext,
    sink: DiagnosticSink | None = None,
) -> dict[str, Any]:
    """Build the outbound payload from active fields.

    Hidden and disabled fields are excluded, as are empty values.
    """
    payload: dict[str, Any] = {}
    for field in fields:
        if not resolve_visibility(field.condition, field.fallback, ctx, sink).is_active:
            continue
        normalized = normalize_submission_value(field, values.get(field.id, MISSING))
        if normalized is not None:
            payload[field.id] = normalized
    return payload


def build_submission_message(payload: Mapping[str, Any], template: str | None = None) -> str:
    """Render a payload into the outbound message text.

    Every `{{json}}` in the template is replaced with the payload as
    pretty-printed JSON. A template without the placeholder gets the JSON
    appended. Without a template DEFAULT_SUBMIT_TEMPLATE is used.

    Example:
        >>> build_submission_message({"a": 1}, "Data: {{json}}")
        'Data: {\\n  "a": 1\\n}'
    """
    body = json.dumps(payload, indent=2, ensure_ascii=False)
    template = template or DEFAULT_SUBMIT_TEMPLATE
    if JSON_PLACEHOLDER in template:
        return template.replace(JSON_PLACEHOLDER, body)
    return f"{template.rstrip()}\n\n{body}"


# =============================================================================
# Delivery
# =============================================================================


class MessageSink(Protocol):
    """Receiver of outbound submission messages."""

    async def deliver(self, text: str) -> None:
        """Deliver a message; raise on failure."""
        ...


class StreamMessageSink:
    """Sink that writes messages to a text stream."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream or sys.stdout

    async def deliver(self, text: str) -> None:
        self._stream.write(text + "\n")
        self._stream.flush()


class DeliveryStatus(str, Enum):
    """Outbound delivery progress."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class DeliveryState:
    """Delivery outcome, independent of form validity."""

    status: DeliveryStatus = DeliveryStatus.IDLE
    error: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == DeliveryStatus.PENDING


async def deliver_submission(
    sink: MessageSink, text: str, state: DeliveryState | None = None
) -> DeliveryState:
    """Deliver a message and record the outcome.

    Sink failures are recorded on the state rather than raised.

    Args:
        sink: Outbound message sink.
        text: Message text.
        state: State to update in place; a new one is created if omitted.

    Returns:
        The updated DeliveryState.
    """
    state = state or DeliveryState()
    state.status = DeliveryStatus.PENDING
    state.error = None
    try:
        await sink.deliver(text)
    except Exception as e:
        logger.warning("Submission delivery failed: %s", e)
        state.status = DeliveryStatus.ERROR
        state.error = str(e) or e.__class__.__name__
        return state
    state.status = DeliveryStatus.SUCCESS
    return state


__all__ = [
    "DEFAULT_SUBMIT_TEMPLATE",
    "JSON_PLACEHOLDER",
    "DeliveryState",
    "DeliveryStatus",
    "MessageSink",
    "StreamMessageSink",
    "build_submission_message",
    "deliver_submission",
    "normalize_submission",
    "normalize_submission_value",
]
