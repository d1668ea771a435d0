"""
Configurator - declaratively configured property containers.

Subclasses of DependencyConfigurator declare a schema of named settings
(required or optional, typed, with read/write/export visibility, defaults and
lazy callbacks). Instances are validated at construction, expose guarded
attribute and get_/set_ accessors, and export to plain nested data that can
be fed back into from_dict().
"""

from configurator.base import DependencyConfigurator
from configurator.exporter import Exportable
from configurator.schema import SchemaEntry
from configurator.types import CallbackType, NamedType, ScalarKind, ScalarType, callback

__version__ = "0.1.0"
__all__ = [
    "DependencyConfigurator",
    "Exportable",
    "SchemaEntry",
    "CallbackType",
    "NamedType",
    "ScalarKind",
    "ScalarType",
    "callback",
]
