"""
Schema definitions for container settings.

A container class declares its settings as a mapping of setting name to a
plain dict of rules:

    settings_schema = {
        "name": {"required": True, "type": "string"},
        "age": {"required": False, "type": "integer", "default": 0},
        "score_getter": {"required": True, "type": "callback integer"},
    }

compile_schema() turns that declaration into immutable SchemaEntry models.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from configurator.types import CallbackType, parse_type
from errors import ErrorCode, MisconfiguredError

logger = logging.getLogger(__name__)

GETTER_SUFFIX = "_getter"

# Keys accepted in a plain dict entry
_ENTRY_KEYS = {"required", "type", "gettable", "settable", "exportable", "default", "description"}


class SchemaEntry(BaseModel):
    """One declared setting and its rules."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str = Field(
        default="",
        description="Setting name; filled in from the schema key"
    )
    required: bool = Field(
        description="Whether the setting must be supplied at construction time"
    )
    type: Any = Field(
        description="Declared type descriptor"
    )
    gettable: bool = Field(
        default=True,
        description="Whether external code may read the setting"
    )
    settable: bool = Field(
        default=True,
        description="Whether external code may write the setting"
    )
    exportable: Optional[bool] = Field(
        default=None,
        description="Whether the setting is exported; defaults to gettable"
    )
    default: Any = Field(
        default=None,
        description="Value returned for an unset optional setting"
    )
    description: str = Field(
        default="",
        description="Human-readable description of the setting"
    )

    @property
    def requirement(self) -> str:
        return "required" if self.required else "optional"

    @property
    def is_exportable(self) -> bool:
        return self.gettable if self.exportable is None else self.exportable

    @property
    def is_getter(self) -> bool:
        """Whether this is a `<name>_getter` callback backing a lazy property."""
        return (
            self.name.endswith(GETTER_SUFFIX)
            and len(self.name) > len(GETTER_SUFFIX)
            and isinstance(self.type, CallbackType)
        )

    @property
    def derived_name(self) -> Optional[str]:
        if not self.is_getter:
            return None
        return self.name[:-len(GETTER_SUFFIX)]


def getter_name(name: str) -> str:
    return f"{name}{GETTER_SUFFIX}"


def _entry_data(owner: str, name: str, raw: Any) -> Dict[str, Any]:
    if isinstance(raw, SchemaEntry):
        return {field: getattr(raw, field) for field in SchemaEntry.model_fields}
    if not isinstance(raw, Mapping):
        raise MisconfiguredError(
            f"{owner}: The specification for setting \"{name}\" must be a mapping, not {type(raw).__name__}.",
            ErrorCode.SCHEMA_INVALID_ENTRY,
            {"owner": owner, "setting": name}
        )

    data = dict(raw)
    if data.get("required") is None:
        raise MisconfiguredError(
            f"{owner}: The \"required\" specification for setting \"{name}\" is missing.",
            ErrorCode.SCHEMA_MISSING_REQUIRED_FLAG,
            {"owner": owner, "setting": name}
        )
    if data.get("type") is None:
        raise MisconfiguredError(
            f"{owner}: The \"type\" specification for setting \"{name}\" is missing.",
            ErrorCode.SCHEMA_MISSING_TYPE,
            {"owner": owner, "setting": name}
        )

    unknown = sorted(set(data) - _ENTRY_KEYS)
    if unknown:
        raise MisconfiguredError(
            f"{owner}: The specification for setting \"{name}\" has unknown keys: {', '.join(unknown)}.",
            ErrorCode.SCHEMA_INVALID_ENTRY,
            {"owner": owner, "setting": name, "unknown_keys": unknown}
        )
    return data


def compile_entry(owner: str, name: str, raw: Any) -> SchemaEntry:
    """
    Compile one declared setting.

    Args:
        owner: Type name of the declaring container
        name: Setting name
        raw: Plain dict of rules, or a SchemaEntry

    Returns:
        The compiled entry

    Raises:
        MisconfiguredError: If the declaration is incomplete or malformed
    """
    data = _entry_data(owner, name, raw)
    data["name"] = name
    data["type"] = parse_type(data["type"], owner, name)

    try:
        return SchemaEntry.model_validate(data)
    except ValidationError as e:
        raise MisconfiguredError(
            f"{owner}: The specification for setting \"{name}\" is not valid: {e}",
            ErrorCode.SCHEMA_INVALID_ENTRY,
            {"owner": owner, "setting": name}
        ) from e


def compile_schema(owner: str, declared: Mapping[str, Any]) -> Dict[str, SchemaEntry]:
    """
    Compile a container's declared settings, preserving declaration order.

    Args:
        owner: Type name of the declaring container
        declared: Mapping of setting name to its declaration

    Returns:
        Ordered mapping of setting name to SchemaEntry

    Raises:
        MisconfiguredError: If any declaration is incomplete or malformed
    """
    schema = {name: compile_entry(owner, name, raw) for name, raw in declared.items()}
    logger.debug(f"Compiled schema for {owner} with {len(schema)} settings")
    return schema
