"""
Value validation against declared types.

check_value() is the single dispatch point used by construction, writes and
callback results. Besides checking, it converts plain mappings into the
structured type a setting declares: nested containers (honouring the type
tag left by export), dataclasses and namespaces.
"""
import dataclasses
import logging
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Tuple

from config import config, registry
from configurator.types import (
    CallbackType,
    NamedType,
    ScalarType,
    TypeDescriptor,
    describe_type,
    split_type_tag,
)

logger = logging.getLogger(__name__)


def is_container_type(target: type) -> bool:
    """Whether a class belongs to the configurator container family."""
    # Deferred import; the base class depends on this module
    from configurator.base import DependencyConfigurator
    return isinstance(target, type) and issubclass(target, DependencyConfigurator)


def _convert_mapping(descriptor: NamedType, value: Mapping) -> Tuple[Any, bool]:
    target = descriptor.target
    tag, fields = split_type_tag(value, config.export.type_tag_key)

    if is_container_type(target):
        concrete = target
        if tag is not None:
            concrete = registry.require(tag)
            if not (isinstance(concrete, type) and issubclass(concrete, target)):
                logger.debug(f"Type tag {tag!r} does not name a subtype of {descriptor.name}")
                return value, False
        # Re-enters full construction validation of the nested type
        return concrete(fields), True

    if target is SimpleNamespace:
        return SimpleNamespace(**fields), True

    if dataclasses.is_dataclass(target):
        try:
            return target(**fields), True
        except TypeError as e:
            logger.debug(f"Cannot build {descriptor.name} from mapping: {e}")
            return value, False

    return value, False


def check_value(descriptor: TypeDescriptor, value: Any) -> Tuple[Any, str, bool]:
    """
    Check a value against a declared type.

    Args:
        descriptor: The declared type
        value: The candidate value

    Returns:
        Tuple of (validated value, observed type name, whether it is acceptable).
        The validated value differs from the input only when a mapping was
        converted into the declared structured type.
    """
    observed = describe_type(value)

    if isinstance(descriptor, (CallbackType, ScalarType)):
        return value, observed, descriptor.matches(value)

    if isinstance(value, Mapping) and not descriptor.matches(value):
        converted, ok = _convert_mapping(descriptor, value)
        return converted, observed, ok

    return value, observed, descriptor.matches(value)
