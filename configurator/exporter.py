"""
Export of containers to plain, nested data.

export() walks a container's exportable settings in declaration order and
flattens every value into dicts, lists and plain values. Objects that are
converted on the way (nested containers, other `to_dict()` objects,
dataclasses, namespaces) are tagged with their type name under the
configured tag key so the validator can rebuild the right type later. A tag
that merely repeats the setting's declared type is dropped.
"""
import dataclasses
import datetime
import decimal
import logging
import uuid
from collections.abc import Mapping
from enum import Enum
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Set, runtime_checkable

from config import config
from configurator.lazy import invoke_getter, takes_no_arguments
from configurator.types import CallbackType, NamedType, type_name_of
from errors import ErrorCode, ExportError

if TYPE_CHECKING:
    from configurator.base import DependencyConfigurator

logger = logging.getLogger(__name__)

# Values exported as they are
PLAIN_TYPES = (
    str, int, float, bool,
    datetime.date, datetime.time, datetime.timedelta,
    uuid.UUID, decimal.Decimal, Enum,
)


@runtime_checkable
class Exportable(Protocol):
    """Anything that knows how to export itself to a dict."""

    def to_dict(self) -> Dict[str, Any]:
        ...


class _Walk:
    """State of one export call: the owning type and the objects being walked."""

    def __init__(self, owner: str):
        self.owner = owner
        self.tag_key = config.export.type_tag_key
        self.active: Set[int] = set()

    def enter(self, value: Any, path: str) -> None:
        if id(value) in self.active:
            raise ExportError(
                f"{self.owner}: The \"{path}\" property refers back to an object that is already being exported.",
                ErrorCode.CIRCULAR_REFERENCE,
                {"owner": self.owner, "setting": path}
            )
        self.active.add(id(value))

    def leave(self, value: Any) -> None:
        self.active.discard(id(value))

    def tagged(self, value: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields[self.tag_key] = type_name_of(type(value))
        return fields

    def flatten(self, value: Any, path: str) -> Any:
        if value is None or isinstance(value, PLAIN_TYPES):
            return value

        if isinstance(value, (Mapping, list, tuple)):
            self.enter(value, path)
            try:
                if isinstance(value, Mapping):
                    return {key: self.flatten(item, f"{path}.{key}") for key, item in value.items()}
                return [self.flatten(item, f"{path}[{index}]") for index, item in enumerate(value)]
            finally:
                self.leave(value)

        if _is_container(value):
            self.enter(value, path)
            try:
                return self.tagged(value, export_settings(value, self))
            finally:
                self.leave(value)

        if isinstance(value, Exportable):
            self.enter(value, path)
            try:
                return self.tagged(value, self.flatten(dict(value.to_dict()), path))
            finally:
                self.leave(value)

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            return self._walk_fields(value, fields, path)

        if isinstance(value, SimpleNamespace):
            return self._walk_fields(value, vars(value), path)

        raise ExportError(
            f"{self.owner}: The \"{path}\" property is of an unsupported type (\"{type(value).__qualname__}\") for export.",
            ErrorCode.UNSUPPORTED_EXPORT_TYPE,
            {"owner": self.owner, "setting": path, "type": type(value).__qualname__}
        )

    def _walk_fields(self, value: Any, fields: Dict[str, Any], path: str) -> Dict[str, Any]:
        self.enter(value, path)
        try:
            flattened = {
                name: self.flatten(item, f"{path}.{name}")
                for name, item in fields.items()
                if not name.startswith("_")
            }
        finally:
            self.leave(value)
        return self.tagged(value, flattened)


def _is_container(value: Any) -> bool:
    from configurator.base import DependencyConfigurator
    return isinstance(value, DependencyConfigurator)


def _resolve_lazy(container: "DependencyConfigurator", name: str) -> Any:
    state = container._state
    if state.has_cached(name):
        return state.cache[name]
    return invoke_getter(container, name)


def export_settings(container: "DependencyConfigurator", walk: Optional[_Walk] = None) -> Dict[str, Any]:
    """
    Export the exportable settings of a container.

    Args:
        container: The container to export
        walk: State of an enclosing export; nested containers share it so
            reference cycles are detected across them

    Returns:
        Ordered dict of setting name to plain value

    Raises:
        ExportError: If a value cannot be flattened
    """
    if walk is None:
        walk = _Walk(container.type_name)
        walk.enter(container, container.type_name)

    owner = walk.owner
    walk.owner = container.type_name
    try:
        exported: Dict[str, Any] = {}
        for name, entry in container.schema().items():
            if not entry.is_exportable:
                continue

            stored = container._state.lookup(name)
            if stored is not None:
                value = stored.value
            elif entry.default is not None and not entry.required:
                value = entry.default
            else:
                continue

            key = name
            if isinstance(entry.type, CallbackType) and callable(value):
                if not takes_no_arguments(value):
                    logger.debug(f"{container.type_name}: skipping \"{name}\" on export; its callback needs arguments")
                    continue
                if entry.is_getter:
                    key = entry.derived_name
                    value = _resolve_lazy(container, key)
                else:
                    value = value()

            flattened = walk.flatten(value, key)
            declared = entry.type
            if (
                isinstance(flattened, dict)
                and isinstance(declared, NamedType)
                and flattened.get(walk.tag_key) == declared.name
            ):
                del flattened[walk.tag_key]
            exported[key] = flattened
        return exported
    finally:
        walk.owner = owner


def export(container: "DependencyConfigurator") -> Dict[str, Any]:
    """Export a container to an ordered, nested dict of plain values."""
    return export_settings(container)
