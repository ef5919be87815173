"""Unit tests for the schema compiler."""

import pytest

import schemaparse
from schemaparse.compiler import compile_schema
from schemaparse.config import ParserOptions
from schemaparse.constants import MISSING
from schemaparse.errors import TypeMismatch, UnsupportedSchemaType, ValidationFailed
from schemaparse.parser import ArrayParser, ObjectParser, Parser


def double(value):
    return value * 2


class TestDispatch:
    """Test descriptor dispatch."""

    def test_parser_returned_unchanged(self):
        """Test the identity short-circuit for already compiled parsers."""
        parser = Parser(int)
        assert compile_schema(parser) is parser
        assert compile_schema(parser, required=True) is parser
        assert compile_schema(parser).required is False

    def test_callable_wrapped(self):
        """Test that callables, including classes, become leaf parsers."""
        assert type(compile_schema(double)) is Parser
        assert compile_schema(int)("3") == 3
        assert compile_schema(lambda v: v.upper())("a") == "A"

    def test_list_compiles_to_array_parser(self):
        """Test one-element list and tuple schemas."""
        parser = compile_schema([double])
        assert isinstance(parser, ArrayParser)
        assert parser([1, 2, 3]) == [2, 4, 6]
        assert compile_schema((int,))(["1"]) == [1]

    def test_dict_compiles_to_object_parser(self):
        """Test mapping schemas."""
        parser = compile_schema({"a": double})
        assert isinstance(parser, ObjectParser)
        assert parser({"a": 1, "b": 2}) == {"a": 2, "b": 2}

    @pytest.mark.parametrize("schema", [[], [int, str]])
    def test_list_must_have_one_element(self, schema):
        """Test that empty and multi-element lists are rejected."""
        with pytest.raises(UnsupportedSchemaType, match="exactly one element"):
            compile_schema(schema)

    @pytest.mark.parametrize("schema, type_name", [
        (1, "int"),
        ("str", "str"),
        (None, "NoneType"),
        ({int}, "set"),
    ])
    def test_unsupported_schema(self, schema, type_name):
        """Test that unknown descriptors name their runtime type."""
        with pytest.raises(UnsupportedSchemaType, match=type_name) as exc_info:
            compile_schema(schema)
        assert exc_info.value.details["schema_type"] == type_name

    def test_unsupported_nested_schema(self):
        """Test that errors surface from any depth."""
        with pytest.raises(UnsupportedSchemaType):
            compile_schema({"items": [{"x": 42}]})

    def test_compile_alias(self):
        """Test the package-level compile entry point."""
        assert schemaparse.compile is compile_schema


class TestOptions:
    """Test top-level options."""

    def test_required(self):
        """Test required option on a compiled schema."""
        parser = compile_schema(int, {"required": True})
        with pytest.raises(schemaparse.MissingRequiredValue):
            parser()

    def test_default_keyword(self):
        """Test default option passed as keyword."""
        parser = compile_schema([int], default=["1", "2"])
        assert parser() == [1, 2]

    def test_options_model(self):
        """Test options passed as a ParserOptions model."""
        parser = compile_schema({"a": int}, ParserOptions(default={"a": "1", "z": 0}))
        assert parser() == {"a": 1, "z": 0}

    def test_nested_descriptors_get_no_options(self):
        """Test that options apply to the top-level parser only."""
        parser = compile_schema({"a": int}, required=True)
        assert parser.required is True
        assert parser.fields["a"].required is False
        assert parser({}) == {}


class TestCompiledTrees:
    """Test behaviour of compiled parser trees."""

    def test_independent_trees(self):
        """Test that compiling the same descriptor twice gives separate trees."""
        schema = {"a": [int]}
        first = compile_schema(schema)
        second = compile_schema(schema)

        assert first is not second
        assert first.fields["a"] is not second.fields["a"]
        assert first({"a": ["1"]}) == second({"a": ["1"]}) == {"a": [1]}

    def test_reused_subschema_shared(self):
        """Test that an already compiled sub-schema is embedded verbatim."""
        amount = compile_schema(int, default=0)
        parser = compile_schema({"debit": amount, "credit": amount})

        assert parser.fields["debit"] is amount
        assert parser({"debit": "5"}) == {"debit": 5, "credit": 0}

    def test_nested_array_of_objects(self):
        """Test a nested object/array/object schema."""
        parser = compile_schema({"list": [{"x": double}]})
        assert parser({"list": [{"x": 1}]}) == {"list": [{"x": 2}]}

    def test_deeply_nested(self):
        """Test arbitrarily nested array-of-object-of-array schemas."""
        parser = compile_schema([{"rows": [[int]]}])
        assert parser([{"rows": [["1", "2"], []], "id": "r"}]) == [{"rows": [[1, 2], []], "id": "r"}]

    def test_nested_type_mismatch(self):
        """Test that structural errors propagate from nested parsers."""
        parser = compile_schema({"list": [{"x": int}]})
        with pytest.raises(TypeMismatch):
            parser({"list": ["not an object"]})

    def test_optional_with_or_fallback(self):
        """Test union-like schemas built with or_()."""
        parser = compile_schema({
            "to": compile_schema(int).or_(lambda v: None),
            "tags": compile_schema([str]).validate(lambda tags: len(tags) <= 2),
        })

        assert parser({"to": "x", "tags": ["a"]}) == {"to": None, "tags": ["a"]}
        assert parser({"to": "3"}) == {"to": 3}
        with pytest.raises(ValidationFailed):
            parser({"tags": ["a", "b", "c"]})

    def test_repeated_calls_are_pure(self):
        """Test that invoking a tree does not change its behaviour."""
        parser = compile_schema({"a": compile_schema(int, default="1")})
        results = [parser({"b": i}) for i in range(3)]
        assert results == [{"b": 0, "a": 1}, {"b": 1, "a": 1}, {"b": 2, "a": 1}]
        assert parser({}) == {"a": 1}

    def test_missing_top_level(self):
        """Test that an optional tree returns MISSING for absent input."""
        assert compile_schema({"a": int})() is MISSING
