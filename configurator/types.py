"""
Type descriptors for declared settings.

Every setting declares one of three kinds of type:

- ScalarType: a plain runtime kind (boolean, integer, float, string, array)
- NamedType: a class, abstract base class or runtime-checkable protocol
- CallbackType: any callable, optionally with a declared return type

Schemas may spell a type as a string ("integer", "callback string",
"Address", "datetime.datetime") or hand over a class directly. Spellings are
parsed into descriptors once per container class.
"""
import builtins
import importlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import Any, Optional, Tuple, Type, Union

from config import registry
from errors import ErrorCode, MisconfiguredError, error_context

logger = logging.getLogger(__name__)

CALLBACK = "callback"


class ScalarKind(Enum):
    """Runtime kinds that are checked by kind equality."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"


_SCALAR_SPELLINGS = {
    "boolean": ScalarKind.BOOLEAN,
    "bool": ScalarKind.BOOLEAN,
    "integer": ScalarKind.INTEGER,
    "int": ScalarKind.INTEGER,
    "double": ScalarKind.FLOAT,
    "float": ScalarKind.FLOAT,
    "string": ScalarKind.STRING,
    "str": ScalarKind.STRING,
    "array": ScalarKind.ARRAY,
    "list": ScalarKind.ARRAY,
    "dict": ScalarKind.ARRAY,
}

_SCALAR_PYTHON_TYPES = {
    bool: ScalarKind.BOOLEAN,
    int: ScalarKind.INTEGER,
    float: ScalarKind.FLOAT,
    str: ScalarKind.STRING,
    list: ScalarKind.ARRAY,
    tuple: ScalarKind.ARRAY,
    dict: ScalarKind.ARRAY,
}

_NAMED_ALIASES = {
    "namespace": SimpleNamespace,
}


@dataclass(frozen=True)
class ScalarType:
    """A plain runtime kind."""
    kind: ScalarKind

    @property
    def name(self) -> str:
        return self.kind.value

    def matches(self, value: Any) -> bool:
        if self.kind is ScalarKind.BOOLEAN:
            return isinstance(value, bool)
        if self.kind is ScalarKind.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        if self.kind is ScalarKind.FLOAT:
            return isinstance(value, float)
        if self.kind is ScalarKind.STRING:
            return isinstance(value, str)
        return isinstance(value, (list, tuple, Mapping))


@dataclass(frozen=True)
class NamedType:
    """A class or interface that values must be instances of."""
    name: str
    target: type

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.target)


@dataclass(frozen=True)
class CallbackType:
    """Any callable; the return type, if any, is checked when it is invoked."""
    returns: Optional[Union[ScalarType, NamedType]] = None

    @property
    def name(self) -> str:
        if self.returns is None:
            return CALLBACK
        return f"{CALLBACK} {self.returns.name}"

    def matches(self, value: Any) -> bool:
        return callable(value)


TypeDescriptor = Union[ScalarType, NamedType, CallbackType]


def callback(returns: Any = None) -> CallbackType:
    """
    Declare a callback type in a schema without the string spelling.

    Args:
        returns: Optional return type, spelled as for any other setting

    Returns:
        The callback descriptor
    """
    if returns is None:
        return CallbackType()
    return CallbackType(_parse_value_type(returns, "callback()", "returns"))


def type_name_of(cls: type) -> str:
    """
    Get the canonical name of a type, as used in export type tags.

    Registered containers use their registry name, builtins their bare name,
    and everything else its dotted module path. Containers are registered
    under the dotted path as well, so a container whose type_name was taken
    over by another class still exports a tag that resolves.
    """
    container_name = getattr(cls, "type_name", None)
    if isinstance(container_name, str) and container_name and registry.get(container_name) is cls:
        return container_name
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def describe_type(value: Any) -> str:
    """Get the observed type of a value for error messages."""
    if value is None:
        return "null"
    for python_type, kind in _SCALAR_PYTHON_TYPES.items():
        if type(value) is python_type:
            return kind.value
    if isinstance(value, Mapping):
        return "array"
    return type_name_of(type(value))


def _is_unchecked_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False)) and not getattr(cls, "_is_runtime_protocol", False)


def _named(target: type, owner: str, setting: str) -> NamedType:
    if _is_unchecked_protocol(target):
        raise MisconfiguredError(
            f"{owner}: The type of setting \"{setting}\" is a protocol that is not runtime checkable.",
            ErrorCode.SCHEMA_INVALID_TYPE,
            {"owner": owner, "setting": setting, "type": target.__qualname__}
        )
    return NamedType(type_name_of(target), target)


def _resolve_name(name: str, owner: str, setting: str) -> type:
    target = registry.get(name)
    if target is not None:
        return target

    if name in _NAMED_ALIASES:
        return _NAMED_ALIASES[name]

    builtin = getattr(builtins, name, None)
    if isinstance(builtin, type):
        return builtin

    module_name, _, attribute = name.rpartition(".")
    if module_name:
        with error_context(
            component_name=owner,
            operation=f"resolving the type of setting \"{setting}\"",
            error_class=MisconfiguredError,
            error_code=ErrorCode.SCHEMA_INVALID_TYPE,
            logger=logger
        ):
            module = importlib.import_module(module_name)
            target = getattr(module, attribute)
        if isinstance(target, type):
            return target

    raise MisconfiguredError(
        f"{owner}: The type \"{name}\" of setting \"{setting}\" is not a known type.",
        ErrorCode.SCHEMA_INVALID_TYPE,
        {"owner": owner, "setting": setting, "type": name}
    )


def _parse_value_type(spec: Any, owner: str, setting: str) -> Union[ScalarType, NamedType]:
    if isinstance(spec, (ScalarType, NamedType)):
        return spec
    if isinstance(spec, type):
        if spec in _SCALAR_PYTHON_TYPES:
            return ScalarType(_SCALAR_PYTHON_TYPES[spec])
        return _named(spec, owner, setting)
    if isinstance(spec, str) and spec.strip():
        name = spec.strip()
        if name in _SCALAR_SPELLINGS:
            return ScalarType(_SCALAR_SPELLINGS[name])
        return _named(_resolve_name(name, owner, setting), owner, setting)
    raise MisconfiguredError(
        f"{owner}: The type specification {spec!r} for setting \"{setting}\" is not valid.",
        ErrorCode.SCHEMA_INVALID_TYPE,
        {"owner": owner, "setting": setting}
    )


def parse_type(spec: Any, owner: str, setting: str) -> TypeDescriptor:
    """
    Parse a declared type into a descriptor.

    Args:
        spec: The declared type: a descriptor, a class, or a string spelling
        owner: Type name of the declaring container (for error messages)
        setting: Name of the declaring setting (for error messages)

    Returns:
        The type descriptor

    Raises:
        MisconfiguredError: If the type cannot be parsed or resolved
    """
    if isinstance(spec, CallbackType):
        return spec
    if isinstance(spec, str):
        head, _, rest = spec.strip().partition(" ")
        if head == CALLBACK:
            rest = rest.strip()
            return CallbackType(_parse_value_type(rest, owner, setting) if rest else None)
    return _parse_value_type(spec, owner, setting)


def split_type_tag(data: Mapping, tag_key: str) -> Tuple[Optional[str], dict]:
    """Split a mapping into its type tag (if any) and the remaining fields."""
    fields = dict(data)
    tag = fields.pop(tag_key, None)
    return tag, fields
