"""
Accessor generation for container classes.

When a container class is created, every declared setting (and every lazy
property derived from a `<name>_getter` setting) gets:

- a data descriptor, so `obj.name` and `obj.name = value` work,
- a `get_<name>(*args)` method,
- a `set_<name>(value)` method (declared settings only).

All of them route through the container's guarded read/write path, so the
attribute form and the method form behave the same. Methods a class defines
itself are never replaced.
"""
import keyword
import logging
from typing import Any, Callable, Iterable, Set

from configurator.schema import GETTER_SUFFIX
from errors import BadMethodCallError, ErrorCode, MisconfiguredError

logger = logging.getLogger(__name__)

GENERATED_MARKER = "__generated_accessor__"


class SettingProperty:
    """Data descriptor exposing one setting as an attribute."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance: Any, owner: type = None) -> Any:
        if instance is None:
            return self
        return instance._read(self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        instance._write(self.name, value)

    def __repr__(self) -> str:
        return f"<SettingProperty {self.name!r}>"


def _is_accessor_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name) and not name.startswith("_")


def _make_getter(name: str) -> Callable:
    def getter(self, *args, **kwargs):
        return self.get(name, *args, **kwargs)

    getter.__name__ = f"get_{name}"
    getter.__doc__ = f"Get the \"{name}\" setting."
    setattr(getter, GENERATED_MARKER, True)
    return getter


def _make_setter(name: str) -> Callable:
    def setter(self, *args):
        if len(args) != 1:
            raise BadMethodCallError(
                f"{self.type_name}: set_{name}(): When using the setter function, specify exactly one argument.",
                ErrorCode.SETTER_ARGUMENT_COUNT,
                {"owner": self.type_name, "setting": name, "arguments": len(args)}
            )
        self._write(name, args[0])
        return self

    setter.__name__ = f"set_{name}"
    setter.__doc__ = f"Set the \"{name}\" setting and return the container."
    setattr(setter, GENERATED_MARKER, True)
    return setter


def _install_method(cls: type, method_name: str, factory: Callable[[str], Callable], name: str) -> None:
    existing = getattr(cls, method_name, None)
    if existing is not None and not getattr(existing, GENERATED_MARKER, False):
        # The class wraps this accessor itself
        return
    method = factory(name)
    method.__qualname__ = f"{cls.__qualname__}.{method_name}"
    setattr(cls, method_name, method)


def _install_property(cls: type, name: str, reserved: Set[str]) -> None:
    existing = getattr(cls, name, None)
    if name in reserved or (existing is not None and not isinstance(existing, SettingProperty)):
        raise MisconfiguredError(
            f"{cls.__name__}: The setting name \"{name}\" clashes with an existing attribute.",
            ErrorCode.SCHEMA_RESERVED_NAME,
            {"owner": cls.__name__, "setting": name}
        )
    if not isinstance(existing, SettingProperty):
        setattr(cls, name, SettingProperty(name))


def install_accessors(cls: type, names: Iterable[str], reserved: Set[str]) -> None:
    """
    Install attribute and method accessors for declared settings.

    Args:
        cls: The container class being created
        names: Declared setting names, in declaration order
        reserved: Attribute names of the base container API

    Raises:
        MisconfiguredError: If a setting name clashes with an existing attribute
    """
    names = list(names)
    for name in names:
        if not _is_accessor_name(name):
            logger.debug(f"{cls.__name__}: no attribute accessors for setting {name!r}")
            continue
        _install_property(cls, name, reserved)
        _install_method(cls, f"get_{name}", _make_getter, name)
        _install_method(cls, f"set_{name}", _make_setter, name)

        if name.endswith(GETTER_SUFFIX) and len(name) > len(GETTER_SUFFIX):
            derived = name[:-len(GETTER_SUFFIX)]
            if derived in names:
                continue
            _install_property(cls, derived, reserved)
            _install_method(cls, f"get_{derived}", _make_getter, derived)
