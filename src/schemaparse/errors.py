"""Exception hierarchy for schemaparse.

Every failure raised by the engine itself derives from SchemaParseError.
Failures raised by caller-supplied leaf transforms are never wrapped and
reach the caller as-is.
"""

from typing import Any


class SchemaParseError(Exception):
    """Base class for errors raised by schemaparse."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.details = details or {}
        super().__init__(message)


class MissingRequiredValue(SchemaParseError):
    """Value is absent, no default is available and the parser is required."""


class TypeMismatch(SchemaParseError, TypeError):
    """Input does not have the structural shape an array/object parser expects."""

    def __init__(self, expected: str, value: Any):
        actual = type(value).__name__
        super().__init__(
            f"expected {expected}, got {actual}: {value!r}",
            {"expected": expected, "actual": actual},
        )


class ValidationFailed(SchemaParseError, ValueError):
    """A validate() predicate returned a falsy result."""

    def __init__(self, predicate: Any, value: Any):
        name = getattr(predicate, "__name__", repr(predicate))
        super().__init__(
            f"value {value!r} does not match validator {name}",
            {"predicate": name, "value": value},
        )


class LeafTransformError(SchemaParseError, ValueError):
    """Raised by the bundled leaf transforms when a raw value cannot be canonicalized."""


class UnsupportedSchemaType(SchemaParseError, TypeError):
    """Schema descriptor is not a parser, callable, one-element list or mapping."""

    def __init__(self, schema: Any, reason: str | None = None):
        schema_type = type(schema).__name__
        message = f'unknown schema type "{schema_type}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"schema_type": schema_type})
