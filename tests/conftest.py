"""
Pytest configuration and fixtures for the configurator tests.

This module provides shared fixtures and configuration for all tests.
"""
import pytest

from config import config
from sample_containers import Account, Customer, Person


@pytest.fixture
def person():
    """A person with only the required setting supplied."""
    return Person({"name": "Ann"})


@pytest.fixture
def account():
    """An account with a read-only id and a write-only secret."""
    return Account({"account_id": 1, "secret": "hunter2"})


@pytest.fixture
def customer():
    """A customer with a nested address given as plain data."""
    return Customer({
        "name": "Cleo",
        "address": {"street": "Main Street 1", "city": "Springfield"},
        "tags": ["vip"],
    })


@pytest.fixture
def strict_unknown_keys(monkeypatch):
    """Reject unknown setting names for the duration of a test."""
    monkeypatch.setattr(config.validation, "strict_unknown_keys", True)


@pytest.fixture
def type_tag_key(monkeypatch):
    """Use a different reserved type tag key for the duration of a test."""
    monkeypatch.setattr(config.export, "type_tag_key", "__type__")
    return "__type__"
