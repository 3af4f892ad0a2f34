"""Error micro API for schemaform."""

from .lib import SchemaFormError, UnknownFieldError

__all__ = ["SchemaFormError", "UnknownFieldError"]
