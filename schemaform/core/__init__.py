"""Core utilities shared across schemaform modules."""

from .errors import SchemaFormError, UnknownFieldError
from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging", "SchemaFormError", "UnknownFieldError"]
