"""
Container classes shared by the test suite.

Type names are registered globally, so every container used by more than one
test module lives here.
"""
from dataclasses import dataclass

from configurator import DependencyConfigurator


class Person(DependencyConfigurator):
    settings_schema = {
        "name": {"required": True, "type": "string"},
        "age": {"required": False, "type": "integer", "default": 0},
    }


class Address(DependencyConfigurator):
    settings_schema = {
        "street": {"required": True, "type": "string"},
        "city": {"required": False, "type": "string"},
    }


class PostalAddress(Address):
    settings_schema = {
        "postcode": {"required": True, "type": "string"},
    }


class Customer(DependencyConfigurator):
    settings_schema = {
        "name": {"required": True, "type": "string"},
        "address": {"required": False, "type": "Address"},
        "tags": {"required": False, "type": "array", "default": []},
    }


class Account(DependencyConfigurator):
    settings_schema = {
        "account_id": {"required": True, "type": "integer", "settable": False},
        "secret": {"required": False, "type": "string", "gettable": False},
        "balance": {"required": False, "type": "float", "default": 0.0},
    }

    def rotate_id(self, new_id):
        self._internal.set("account_id", new_id)

    def get_secret(self):
        secret = self._internal.get("secret")
        return "*" * len(secret or "")

    def secret_matches(self, candidate):
        return self._internal.get("secret") == candidate


class Scoreboard(DependencyConfigurator):
    settings_schema = {
        "score_getter": {"required": True, "type": "callback integer"},
    }


class Report(DependencyConfigurator):
    settings_schema = {
        "title": {"required": True, "type": "string"},
        "summary_getter": {"required": False, "type": "callback string"},
        "lookup_getter": {"required": False, "type": "callback"},
        "created": {"required": False, "type": "datetime.datetime"},
        "metadata": {"required": False, "type": "namespace"},
    }


class Node(DependencyConfigurator):
    settings_schema = {
        "label": {"required": True, "type": "string"},
        "next": {"required": False, "type": "Node"},
    }


class Holder(DependencyConfigurator):
    settings_schema = {
        "thing": {"required": True, "type": "object"},
    }


@dataclass
class Point:
    x: int
    y: int
    _scale: int = 1


class Shape(DependencyConfigurator):
    settings_schema = {
        "origin": {"required": True, "type": Point},
        "points": {"required": False, "type": list},
    }


class Money:
    """Value object exporting itself through to_dict()."""

    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency

    def to_dict(self):
        return {"amount": self.amount, "currency": self.currency}


class Hooked(DependencyConfigurator):
    settings_schema = {
        "name": {"required": True, "type": "string"},
        "on_change": {"required": False, "type": "callback"},
    }
