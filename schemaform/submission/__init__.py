"""Submission payloads, message templating and delivery tracking."""

from .lib import (
    DEFAULT_SUBMIT_TEMPLATE,
    JSON_PLACEHOLDER,
    DeliveryState,
    DeliveryStatus,
    MessageSink,
    StreamMessageSink,
    build_submission_message,
    deliver_submission,
    normalize_submission,
    normalize_submission_value,
)

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
