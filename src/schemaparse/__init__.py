"""schemaparse - Schema-driven value parsing and validation.

Compile a declarative schema (callables, one-element lists, dicts) into a
tree of callable parsers, then run that tree against raw values to validate
and canonicalize them.

Basic usage:
    from schemaparse import compile

    parse_user = compile({"name": str, "age": compile(int, default=0)})
    parse_user({"name": "ada", "extra": True})
    # {'name': 'ada', 'extra': True, 'age': 0}
"""

__version__ = "0.1.0"
__author__ = "schemaparse contributors"
__description__ = "Schema-driven value parsing and validation"

from schemaparse import leaves
from schemaparse.compiler import compile, compile_schema
from schemaparse.config import ParserOptions, SchemaparseConfig
from schemaparse.constants import MISSING
from schemaparse.errors import (
    LeafTransformError,
    MissingRequiredValue,
    SchemaParseError,
    TypeMismatch,
    UnsupportedSchemaType,
    ValidationFailed,
)
from schemaparse.parser import ArrayParser, ObjectParser, Parser

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "compile",
    "compile_schema",
    "Parser",
    "ArrayParser",
    "ObjectParser",
    "MISSING",
    "ParserOptions",
    "SchemaparseConfig",
    "SchemaParseError",
    "MissingRequiredValue",
    "TypeMismatch",
    "ValidationFailed",
    "LeafTransformError",
    "UnsupportedSchemaType",
    "leaves",
]
