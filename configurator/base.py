"""
Base class for declaratively configured containers.

Subclasses declare their settings in `settings_schema` and are constructed
from a mapping of raw values:

    class Person(DependencyConfigurator):
        settings_schema = {
            "name": {"required": True, "type": "string"},
            "age": {"required": False, "type": "integer", "default": 0},
            "id": {"required": True, "type": "integer", "settable": False},
            "greeting_getter": {"required": False, "type": "callback string"},
        }

    person = Person({"name": "Ann", "id": 7})
    person.name          # "Ann"
    person.get_age()     # 0
    person.id = 8        # InvalidArgumentError: not settable
    person.to_dict()     # {"name": "Ann", "age": 0, "id": 7}

Code inside the class reaches its own settings without the gettable and
settable restrictions through `self._internal`.
"""
import copy
import logging
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from config import config, registry
from configurator.accessors import install_accessors
from configurator.exporter import export
from configurator.guard import Access, AccessToken, InternalAccess, authorize
from configurator.lazy import invoke_getter
from configurator.schema import SchemaEntry, compile_schema, getter_name
from configurator.state import InstanceState
from configurator.types import split_type_tag
from configurator.validator import check_value
from errors import BadMethodCallError, ErrorCode, InvalidArgumentError
from serialization import from_json as decode_json, to_json

logger = logging.getLogger(__name__)


class DependencyConfigurator:
    """
    Container whose settings are declared by a schema.

    Class Attributes:
        settings_schema (Dict[str, Any]): Declared settings of this class;
            merged with the schemas of its bases.
        type_name (str): Name under which the class is registered and tagged
            in exported data. Defaults to the class name.
    """

    settings_schema: ClassVar[Dict[str, Any]] = {}
    type_name: ClassVar[str] = "DependencyConfigurator"

    _declared_settings: ClassVar[Dict[str, Any]] = {}
    _compiled_schema: ClassVar[Optional[Dict[str, SchemaEntry]]] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        declared: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            declared.update(klass.__dict__.get("settings_schema") or {})
        cls._declared_settings = declared
        cls._compiled_schema = None

        if "type_name" not in cls.__dict__:
            cls.type_name = cls.__name__

        install_accessors(cls, declared, _RESERVED_NAMES)
        registry.register(cls.type_name, cls)

        # Tags fall back to the dotted path once type_name is taken by another class
        qualified_name = f"{cls.__module__}.{cls.__qualname__}"
        if qualified_name != cls.type_name:
            registry.register(qualified_name, cls)

    @classmethod
    def schema(cls) -> Dict[str, SchemaEntry]:
        """
        Get the compiled schema of this class.

        Returns:
            Ordered mapping of setting name to SchemaEntry

        Raises:
            MisconfiguredError: If the declared schema is incomplete or malformed
        """
        if cls.__dict__.get("_compiled_schema") is None:
            cls._compiled_schema = compile_schema(cls.type_name, cls._declared_settings)
        return cls._compiled_schema

    def __init__(self, settings: Optional[Mapping[str, Any]] = None):
        """
        Create a new container from raw setting values.

        Args:
            settings: Mapping of setting name to raw value. Keys the schema
                does not declare are ignored.

        Raises:
            MisconfiguredError: If the class's schema is malformed
            InvalidArgumentError: If a required setting is missing or a value
                does not match its declared type
        """
        self._state = InstanceState()
        self._access_token = AccessToken()

        schema = self.schema()
        settings = dict(settings or {})
        for name, entry in schema.items():
            if entry.required and settings.get(name) is None:
                raise InvalidArgumentError(
                    f"{self.type_name}: The required setting \"{name}\" is missing. (Expected \"{entry.type.name}\".)",
                    ErrorCode.MISSING_REQUIRED_SETTING,
                    {"owner": self.type_name, "setting": name, "expected": entry.type.name}
                )

        for name, value in settings.items():
            self._internal.set(name, value)

    @property
    def _internal(self) -> InternalAccess:
        """Privileged access to this container's own settings."""
        return InternalAccess(self, self._access_token)

    def _write(self, name: str, value: Any, token: Optional[AccessToken] = None) -> None:
        entry = self.schema().get(name)
        if entry is None:
            if config.validation.strict_unknown_keys:
                raise InvalidArgumentError(
                    f"{self.type_name}: There is no setting called \"{name}\".",
                    ErrorCode.UNKNOWN_SETTING,
                    {"owner": self.type_name, "setting": name}
                )
            logger.debug(f"{self.type_name}: ignoring unknown setting \"{name}\"")
            return

        authorize(self, entry, Access.WRITE, token)

        # None is accepted for every setting but never stored
        if value is None:
            return

        result, observed, ok = check_value(entry.type, value)
        if not ok:
            raise InvalidArgumentError(
                f"{self.type_name}: The {entry.requirement} setting \"{name}\" was not \"{entry.type.name}\", but \"{observed}\".",
                ErrorCode.TYPE_MISMATCH,
                {
                    "owner": self.type_name,
                    "setting": name,
                    "requirement": entry.requirement,
                    "expected": entry.type.name,
                    "observed": observed,
                }
            )
        self._state.store(entry, result)

    def _lazy_entry(self, name: str) -> Optional[SchemaEntry]:
        entry = self.schema().get(getter_name(name))
        if entry is not None and entry.is_getter:
            return entry
        return None

    def _read(self, name: str, token: Optional[AccessToken] = None) -> Any:
        stored = self._state.lookup(name)
        if stored is not None:
            authorize(self, stored.entry, Access.READ, token)
            return stored.value

        lazy_entry = self._lazy_entry(name)
        if lazy_entry is not None:
            authorize(self, lazy_entry, Access.READ, token)
            if not self._state.has_cached(name):
                self._state.cache_result(name, invoke_getter(self, name))
            return self._state.cache[name]

        entry = self.schema().get(name)
        if entry is not None and not entry.required:
            authorize(self, entry, Access.READ, token)
            # Optional settings that have not been specified return their default
            return copy.deepcopy(entry.default)

        raise InvalidArgumentError(
            f"{self.type_name}: There is no setting called \"{name}\".",
            ErrorCode.NO_SUCH_SETTING,
            {"owner": self.type_name, "setting": name}
        )

    def _call_getter(
        self,
        name: str,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
        token: Optional[AccessToken] = None
    ) -> Any:
        lazy_entry = self._lazy_entry(name)
        if lazy_entry is None:
            raise BadMethodCallError(
                f"{self.type_name}: get_{name}(): There is no callback setting \"{getter_name(name)}\".",
                ErrorCode.NO_VALID_CALLBACK,
                {"owner": self.type_name, "setting": getter_name(name)}
            )
        authorize(self, lazy_entry, Access.READ, token)
        return invoke_getter(self, name, args, kwargs)

    def get(self, name: str, *args, **kwargs) -> Any:
        """
        Read a setting.

        For a lazy property backed by `<name>_getter`, the callback is
        invoked with the given arguments on every call and the result is not
        cached.

        Args:
            name: Setting or lazy property name
            *args: Arguments for a lazy property's callback
            **kwargs: Keyword arguments for a lazy property's callback

        Returns:
            The setting's value
        """
        if name not in self.schema() and self._lazy_entry(name) is not None:
            return self._call_getter(name, args, kwargs)
        return self._read(name)

    def set(self, name: str, value: Any) -> "DependencyConfigurator":
        """
        Write a setting.

        Args:
            name: Setting name
            value: New value; None leaves the setting unchanged

        Returns:
            The container, for chaining
        """
        self._write(name, value)
        return self

    def __contains__(self, name: str) -> bool:
        return self._state.lookup(name) is not None

    def to_dict(self) -> Dict[str, Any]:
        """
        Export all exportable settings as an ordered, nested dict.

        Returns:
            Plain data suitable for from_dict() or JSON rendering

        Raises:
            ExportError: If a value cannot be exported
        """
        return export(self)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Export the container and render it as JSON."""
        if indent is None:
            indent = config.export.json_indent
        return to_json(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DependencyConfigurator":
        """
        Rebuild a container from exported data.

        A type tag in the data selects the concrete class; it must be this
        class or one of its subclasses.

        Args:
            data: Mapping produced by to_dict()

        Returns:
            The new container

        Raises:
            InvalidArgumentError: If the data is not a mapping or the type tag
                names an unknown or unrelated type
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(
                f"{cls.type_name}: Cannot build from {type(data).__name__}, expected a mapping.",
                ErrorCode.TYPE_MISMATCH,
                {"owner": cls.type_name, "observed": type(data).__name__}
            )

        tag, fields = split_type_tag(data, config.export.type_tag_key)
        concrete = cls
        if tag is not None:
            concrete = registry.require(tag)
            if not (isinstance(concrete, type) and issubclass(concrete, cls)):
                raise InvalidArgumentError(
                    f"{cls.type_name}: The type tag \"{tag}\" does not name a subtype of \"{cls.type_name}\".",
                    ErrorCode.UNKNOWN_TYPE_TAG,
                    {"owner": cls.type_name, "type_name": tag}
                )
        return concrete(fields)

    @classmethod
    def from_json(cls, json_str: str, parse_dates: bool = False) -> "DependencyConfigurator":
        """
        Rebuild a container from JSON produced by to_json().

        Args:
            json_str: The JSON text
            parse_dates: Turn ISO datetime strings with a time zone back into
                datetimes, for datetime-typed settings

        Raises:
            InvalidArgumentError: If the text is not valid JSON or does not
                describe this class
        """
        return decode_json(json_str, cls, parse_dates=parse_dates)

    def __repr__(self) -> str:
        return f"<{self.type_name} settings={list(self._state.settings)}>"


_RESERVED_NAMES = {
    name for name in dir(DependencyConfigurator) if not name.startswith("__")
}
