"""Exception hierarchy shared by schemaform modules."""


class SchemaFormError(Exception):
    """Base class for all schemaform errors."""


class UnknownFieldError(SchemaFormError, KeyError):
    """Raised when form state is addressed with a field id the schema lacks."""

    def __init__(self, field_id: str):
        super().__init__(field_id)
        self.field_id = field_id

    def __str__(self) -> str:
        return f"Unknown field id: {self.field_id!r}"


__all__ = ["SchemaFormError", "UnknownFieldError"]
