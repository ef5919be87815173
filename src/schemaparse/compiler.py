"""Schema compiler: turns a declarative schema descriptor into a Parser tree.

Recognized descriptors, checked in order:

- an existing Parser, returned unchanged
- any callable, wrapped as a leaf Parser
- a one-element list or tuple ``[element]``, compiled to an ArrayParser
- a mapping ``{name: descriptor}``, compiled to an ObjectParser

Nested descriptors are compiled without options; to make a nested field
required or give it a default, nest an already compiled parser.

Example:
    order = compile_schema({
        "id": compile_schema(int, required=True),
        "tags": [str],
        "lines": [{"sku": str, "qty": compile_schema(int, default=1)}],
    })
    order({"id": "7", "lines": [{"sku": "A"}]})
"""

import logging
from collections.abc import Mapping
from typing import Any

from schemaparse.config import ParserOptions
from schemaparse.errors import UnsupportedSchemaType
from schemaparse.parser import ArrayParser, ObjectParser, Parser

logger = logging.getLogger(__name__)


def compile_schema(schema: Any, options: ParserOptions | dict | None = None, **overrides: Any) -> Parser:
    """Compile a schema descriptor into a Parser.

    Args:
        schema: Parser, callable, one-element list/tuple or mapping
        options: ParserOptions or dict with ``required`` / ``default`` for the
                 top-level parser (ignored when ``schema`` is already a Parser)
        **overrides: Individual options, taking precedence over ``options``

    Returns:
        Parser: Executable parser tree

    Raises:
        UnsupportedSchemaType: If a descriptor (at any depth) is not recognized
    """
    if isinstance(schema, Parser):
        return schema

    if callable(schema):
        logger.debug(f"Compiling leaf schema {getattr(schema, '__qualname__', schema)!r}")
        return Parser(schema, options, **overrides)

    if isinstance(schema, (list, tuple)):
        if len(schema) != 1:
            raise UnsupportedSchemaType(
                schema, f"array schema must have exactly one element, got {len(schema)}"
            )
        logger.debug("Compiling array schema")
        return ArrayParser(compile_schema(schema[0]), options, **overrides)

    if isinstance(schema, Mapping):
        logger.debug(f"Compiling object schema with fields {list(schema)}")
        fields = {key: compile_schema(value) for key, value in schema.items()}
        return ObjectParser(fields, options, **overrides)

    raise UnsupportedSchemaType(schema)


compile = compile_schema  # noqa: A001
