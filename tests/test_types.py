"""
Tests for type descriptors and type spellings.
"""
import datetime
from collections.abc import Sized
from types import SimpleNamespace
from typing import Protocol, runtime_checkable

import pytest

from configurator.types import (
    CallbackType,
    NamedType,
    ScalarKind,
    ScalarType,
    callback,
    describe_type,
    parse_type,
    split_type_tag,
    type_name_of,
)
from errors import ErrorCode, MisconfiguredError
from sample_containers import Address, Point


class Greeter(Protocol):
    def greet(self) -> str:
        ...


@runtime_checkable
class CheckedGreeter(Protocol):
    def greet(self) -> str:
        ...


class TestParseType:
    """Tests for turning declared types into descriptors."""

    @pytest.mark.parametrize("spelling, kind", [
        ("boolean", ScalarKind.BOOLEAN),
        ("bool", ScalarKind.BOOLEAN),
        ("integer", ScalarKind.INTEGER),
        ("int", ScalarKind.INTEGER),
        ("double", ScalarKind.FLOAT),
        ("float", ScalarKind.FLOAT),
        ("string", ScalarKind.STRING),
        ("array", ScalarKind.ARRAY),
        (" dict ", ScalarKind.ARRAY),
        (int, ScalarKind.INTEGER),
        (tuple, ScalarKind.ARRAY),
    ])
    def test_scalar_spellings(self, spelling, kind):
        assert parse_type(spelling, "Owner", "field") == ScalarType(kind)

    def test_registered_container_name(self):
        descriptor = parse_type("Address", "Owner", "field")
        assert descriptor == NamedType("Address", Address)

    def test_dotted_path(self):
        descriptor = parse_type("datetime.datetime", "Owner", "field")
        assert descriptor == NamedType("datetime.datetime", datetime.datetime)

    def test_namespace_alias(self):
        descriptor = parse_type("namespace", "Owner", "field")
        assert descriptor.target is SimpleNamespace

    def test_class_object(self):
        descriptor = parse_type(Point, "Owner", "field")
        assert descriptor == NamedType("sample_containers.Point", Point)

    def test_abstract_base_class(self):
        descriptor = parse_type(Sized, "Owner", "field")
        assert descriptor.matches([1])
        assert not descriptor.matches(1)

    def test_runtime_checkable_protocol(self):
        class Person:
            def greet(self):
                return "hi"

        descriptor = parse_type(CheckedGreeter, "Owner", "field")
        assert descriptor.matches(Person())
        assert not descriptor.matches(object())

    def test_unchecked_protocol_is_rejected(self):
        with pytest.raises(MisconfiguredError) as exc_info:
            parse_type(Greeter, "Owner", "field")
        assert exc_info.value.code == ErrorCode.SCHEMA_INVALID_TYPE

    @pytest.mark.parametrize("spelling", ["callback", "callback string", "callback  Address "])
    def test_callback_spellings(self, spelling):
        descriptor = parse_type(spelling, "Owner", "field")
        assert isinstance(descriptor, CallbackType)

    def test_callback_return_type(self):
        assert parse_type("callback integer", "Owner", "field").returns == ScalarType(ScalarKind.INTEGER)
        assert parse_type("callback", "Owner", "field").returns is None

    def test_callback_helper(self):
        assert callback() == CallbackType()
        assert callback("string") == CallbackType(ScalarType(ScalarKind.STRING))
        assert callback(Address).returns.target is Address

    @pytest.mark.parametrize("spec", ["", "   ", 42, None])
    def test_invalid_specifications(self, spec):
        with pytest.raises(MisconfiguredError) as exc_info:
            parse_type(spec, "Owner", "field")
        assert exc_info.value.code == ErrorCode.SCHEMA_INVALID_TYPE

    def test_unknown_name(self):
        with pytest.raises(MisconfiguredError) as exc_info:
            parse_type("Adress", "Owner", "field")

        assert exc_info.value.message == 'Owner: The type "Adress" of setting "field" is not a known type.'

    def test_dotted_path_to_a_function(self):
        with pytest.raises(MisconfiguredError):
            parse_type("os.path.join", "Owner", "field")


class TestMatching:
    """Tests for checking values against descriptors."""

    def test_integer_excludes_booleans(self):
        integer = ScalarType(ScalarKind.INTEGER)
        assert integer.matches(3)
        assert not integer.matches(True)
        assert not integer.matches(3.0)

    def test_float_is_strict(self):
        assert not ScalarType(ScalarKind.FLOAT).matches(3)

    def test_array_accepts_sequences_and_mappings(self):
        array = ScalarType(ScalarKind.ARRAY)
        assert array.matches([])
        assert array.matches(())
        assert array.matches({"a": 1})
        assert not array.matches("abc")

    def test_callback_matches_any_callable(self):
        descriptor = CallbackType(ScalarType(ScalarKind.INTEGER))
        assert descriptor.matches(len)
        assert descriptor.matches(lambda: "not checked until invoked")
        assert not descriptor.matches(3)

    def test_descriptor_names(self):
        assert ScalarType(ScalarKind.FLOAT).name == "float"
        assert CallbackType().name == "callback"
        assert CallbackType(NamedType("Address", Address)).name == "callback Address"


class TestTypeNames:
    """Tests for naming types in messages and type tags."""

    @pytest.mark.parametrize("value, name", [
        (None, "null"),
        (True, "boolean"),
        (1, "integer"),
        (1.5, "float"),
        ("a", "string"),
        ([1], "array"),
        ({"a": 1}, "array"),
        ({1}, "set"),
        (datetime.date(2024, 1, 1), "datetime.date"),
    ])
    def test_describe_type(self, value, name):
        assert describe_type(value) == name

    def test_registered_container(self):
        assert type_name_of(Address) == "Address"
        assert describe_type(Address({"street": "x"})) == "Address"

    def test_unregistered_class(self):
        assert type_name_of(Point) == "sample_containers.Point"

    def test_split_type_tag(self):
        data = {"street": "x", "_class_name": "Address"}

        tag, fields = split_type_tag(data, "_class_name")

        assert tag == "Address"
        assert fields == {"street": "x"}
        assert data == {"street": "x", "_class_name": "Address"}

    def test_split_without_tag(self):
        assert split_type_tag({"street": "x"}, "_class_name") == (None, {"street": "x"})
