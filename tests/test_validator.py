"""
Tests for value validation, access control and per-instance storage.
"""
import functools
from types import SimpleNamespace

import pytest

from configurator.guard import Access, AccessToken, authorize, is_privileged
from configurator.lazy import takes_no_arguments
from configurator.schema import compile_entry
from configurator.state import InstanceState
from configurator.types import CallbackType, NamedType, ScalarKind, ScalarType, parse_type
from configurator.validator import check_value, is_container_type
from errors import ErrorCode, InvalidArgumentError
from sample_containers import Account, Address, Person, Point, PostalAddress


class TestCheckValue:
    """Tests for check_value()."""

    def test_matching_scalar(self):
        assert check_value(ScalarType(ScalarKind.STRING), "Ann") == ("Ann", "string", True)

    def test_mismatching_scalar(self):
        assert check_value(ScalarType(ScalarKind.STRING), 5) == (5, "integer", False)

    def test_callback(self):
        _, observed, ok = check_value(CallbackType(), "not callable")
        assert observed == "string"
        assert not ok

    def test_instance_of_named_type(self):
        address = PostalAddress({"street": "x", "postcode": "1"})

        value, _, ok = check_value(parse_type("Address", "Owner", "field"), address)

        assert ok
        assert value is address

    def test_mapping_becomes_container(self):
        value, observed, ok = check_value(parse_type("Address", "Owner", "field"), {"street": "x"})

        assert ok
        assert observed == "array"
        assert type(value) is Address
        assert value.street == "x"

    def test_tagged_mapping_becomes_subtype(self):
        data = {"street": "x", "postcode": "1", "_class_name": "PostalAddress"}

        value, _, ok = check_value(parse_type("Address", "Owner", "field"), data)

        assert ok
        assert type(value) is PostalAddress

    def test_tag_of_unrelated_container(self):
        data = {"name": "Ann", "_class_name": "Person"}

        value, _, ok = check_value(parse_type("Address", "Owner", "field"), data)

        assert not ok
        assert value is data

    def test_nested_construction_errors_propagate(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            check_value(parse_type("Address", "Owner", "field"), {"city": "Springfield"})
        assert exc_info.value.code == ErrorCode.MISSING_REQUIRED_SETTING

    def test_mapping_becomes_dataclass(self):
        value, _, ok = check_value(parse_type(Point, "Owner", "field"), {"x": 1, "y": 2})

        assert ok
        assert value == Point(1, 2)

    def test_mapping_with_wrong_dataclass_fields(self):
        _, _, ok = check_value(parse_type(Point, "Owner", "field"), {"x": 1, "z": 2})
        assert not ok

    def test_mapping_becomes_namespace(self):
        value, _, ok = check_value(parse_type("namespace", "Owner", "field"), {"a": 1})

        assert ok
        assert value == SimpleNamespace(a=1)

    def test_mapping_for_other_named_type(self):
        _, _, ok = check_value(parse_type("datetime.date", "Owner", "field"), {"year": 2024})
        assert not ok

    def test_mapping_for_mapping_type_is_kept(self):
        data = {"a": 1}

        value, _, ok = check_value(NamedType("dict", dict), data)

        assert ok
        assert value is data

    def test_is_container_type(self):
        assert is_container_type(Person)
        assert not is_container_type(Point)
        assert not is_container_type(Person({"name": "Ann"}))


class TestAuthorize:
    """Tests for the access guard."""

    @pytest.fixture
    def secret_entry(self):
        return compile_entry(
            "Account", "secret",
            {"required": False, "type": "string", "gettable": False, "settable": False}
        )

    def test_open_entry(self, account):
        entry = Account.schema()["balance"]
        authorize(account, entry, Access.READ)
        authorize(account, entry, Access.WRITE)

    @pytest.mark.parametrize("access, code, word", [
        (Access.READ, ErrorCode.NOT_GETTABLE, "gettable"),
        (Access.WRITE, ErrorCode.NOT_SETTABLE, "settable"),
    ])
    def test_external_access_is_refused(self, account, secret_entry, access, code, word):
        with pytest.raises(InvalidArgumentError) as exc_info:
            authorize(account, secret_entry, access)

        assert exc_info.value.code == code
        assert exc_info.value.message == f'Account: The setting "secret" is not {word}.'

    def test_owner_token_is_privileged(self, account, secret_entry):
        authorize(account, secret_entry, Access.READ, account._access_token)
        authorize(account, secret_entry, Access.WRITE, account._access_token)

    def test_fresh_token_is_not_privileged(self, account, secret_entry):
        assert not is_privileged(account, None)
        assert not is_privileged(account, AccessToken())

        with pytest.raises(InvalidArgumentError):
            authorize(account, secret_entry, Access.READ, AccessToken())


class TestInstanceState:
    """Tests for per-instance storage."""

    @pytest.fixture
    def entry(self):
        return compile_entry("Owner", "score", {"required": False, "type": "integer"})

    def test_store_and_lookup(self, entry):
        state = InstanceState()
        state.store(entry, 3)

        assert state.lookup("score").value == 3
        assert state.lookup("score").entry is entry
        assert state.lookup("other") is None

    def test_storing_evicts_cached_result(self, entry):
        state = InstanceState()
        state.cache_result("score", 1)

        state.store(entry, 2)

        assert not state.has_cached("score")
        assert state.lookup("score").value == 2

    def test_stored_names_are_not_cached(self, entry):
        state = InstanceState()
        state.store(entry, 2)

        state.cache_result("score", 1)

        assert not state.has_cached("score")


class TestTakesNoArguments:
    """Tests for deciding whether a callback can be resolved on export."""

    def test_plain_callables(self):
        assert takes_no_arguments(lambda: 1)
        assert takes_no_arguments(lambda *args, **kwargs: 1)
        assert takes_no_arguments(lambda key="a": key)
        assert not takes_no_arguments(lambda key: key)

    def test_partial_and_bound_methods(self):
        assert takes_no_arguments(functools.partial(lambda key: key, "a"))
        assert takes_no_arguments(Person({"name": "Ann"}).to_dict)
