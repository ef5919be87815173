"""Executable parser units.

A Parser wraps one transform together with a required flag and a default
that is transformed once, at construction. Parsers are callable and
immutable; the combinators parse(), validate() and or_() build new parsers
around an existing one.

ArrayParser and ObjectParser are the structural specializations: the first
maps one element parser over a list, the second applies a table of field
parsers to a mapping and merges the results over a copy of the input.
"""

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from schemaparse.config import ParserOptions, resolve_options
from schemaparse.constants import MISSING
from schemaparse.errors import MissingRequiredValue, TypeMismatch, ValidationFailed

logger = logging.getLogger(__name__)


class Parser:
    """Callable wrapper around a single transform function."""

    __slots__ = ("func", "required", "default")

    def __init__(self, func: Callable[[Any], Any],
                 options: ParserOptions | dict | None = None, **overrides: Any):
        """Initialize parser.

        Args:
            func: Transform applied to every non-absent value
            options: ParserOptions or dict with ``required`` / ``default``
            **overrides: Individual options, taking precedence over ``options``

        Raises:
            Whatever ``func`` raises while transforming the raw default
        """
        resolved = resolve_options(options, **overrides)
        object.__setattr__(self, "func", func)
        object.__setattr__(self, "required", resolved.required)
        cached = func(resolved.default) if resolved.has_default else MISSING
        object.__setattr__(self, "default", cached)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"{type(self).__name__}({name}, required={self.required}, default={self.default!r})"

    def __call__(self, value: Any = MISSING) -> Any:
        if value is MISSING:
            # cached default is already transformed
            if self.default is not MISSING:
                return self.default
            if self.required:
                raise MissingRequiredValue(f"value is required, got {value!r}")
            return MISSING

        return self.func(value)

    def parse(self, func: Callable[[Any], Any]) -> "Parser":
        """Chain ``func`` after this parser."""
        def chained(value):
            return func(self(value))

        return Parser(chained)

    def validate(self, predicate: Callable[[Any], Any]) -> "Parser":
        """Require ``predicate`` to hold for this parser's result."""
        def checked(value):
            result = self(value)
            if not predicate(result):
                raise ValidationFailed(predicate, result)
            return result

        return Parser(checked)

    def or_(self, fallback: Callable[[Any], Any]) -> "Parser":
        """Fall back to ``fallback(value)`` when this parser fails for any reason.

        ``fallback`` is a plain callable applied to the original raw value;
        it gets no default or required handling of its own.
        """
        def attempt(value):
            try:
                return self(value)
            except Exception as e:
                logger.debug(f"Parser {self!r} failed with {type(e).__name__}: {e}; using fallback")
                return fallback(value)

        return Parser(attempt)


class ArrayParser(Parser):
    """Parser for lists: applies one element parser to every entry."""

    __slots__ = ("element",)

    def __init__(self, element: Parser, options: ParserOptions | dict | None = None, **overrides: Any):
        object.__setattr__(self, "element", element)
        super().__init__(self._parse_array, options, **overrides)

    def _parse_array(self, value: Any) -> list:
        if not isinstance(value, (list, tuple)):
            raise TypeMismatch("a list", value)
        return [self.element(item) for item in value]

    def __repr__(self) -> str:
        return f"ArrayParser([{self.element!r}], required={self.required})"


class ObjectParser(Parser):
    """Parser for mappings with open merge semantics.

    Declared fields are parsed and written over a shallow copy of the input.
    Undeclared fields pass through untouched, and a declared field that
    resolves to MISSING keeps whatever the input had (including nothing).
    """

    __slots__ = ("fields",)

    def __init__(self, fields: Mapping[Any, Parser], options: ParserOptions | dict | None = None,
                 **overrides: Any):
        object.__setattr__(self, "fields", MappingProxyType(dict(fields)))
        super().__init__(self._parse_object, options, **overrides)

    def _parse_object(self, value: Any) -> dict:
        if not isinstance(value, Mapping):
            raise TypeMismatch("a mapping", value)

        picked = {name: parser(value.get(name, MISSING)) for name, parser in self.fields.items()}

        result = dict(value)
        for name, parsed in picked.items():
            if parsed is not MISSING:
                result[name] = parsed
        return result

    def __repr__(self) -> str:
        return f"ObjectParser({{{', '.join(map(repr, self.fields))}}}, required={self.required})"
