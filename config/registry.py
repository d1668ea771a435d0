"""
Container registry module.

This module provides a registry of container classes keyed by their type
name. It is independent of the containers themselves: every container
subclass registers itself on creation, and the validator and exporter look
classes up by the type tag found in exported data without importing the
modules that define them.
"""

import logging
from typing import Dict, Type, Any, Optional

from errors import ErrorCode, InvalidArgumentError

logger = logging.getLogger(__name__)


class ContainerRegistry:
    """
    Registry for container classes.

    Exported data only carries a type name; this registry turns that name
    back into the class that produced it.
    """

    def __init__(self):
        self._registry: Dict[str, Type[Any]] = {}

    def register(self, name: str, container_class: Type[Any]) -> None:
        """
        Register a container class.

        Args:
            name: The type name to register the class under
            container_class: The container class
        """
        existing = self._registry.get(name)
        if existing is not None and existing is not container_class:
            logger.warning(
                f"Type name {name!r} was registered by {existing.__module__}.{existing.__qualname__}; "
                f"replacing it with {container_class.__module__}.{container_class.__qualname__}"
            )
        logger.debug(f"Registering container class for: {name}")
        self._registry[name] = container_class

    def get(self, name: str) -> Optional[Type[Any]]:
        """
        Get a registered container class.

        Args:
            name: The type name to look up

        Returns:
            The container class, or None if not found
        """
        return self._registry.get(name)

    def require(self, name: str) -> Type[Any]:
        """
        Get a registered container class that must exist.

        Args:
            name: The type name found in a type tag

        Returns:
            The container class

        Raises:
            InvalidArgumentError: If no class is registered under the name
        """
        container_class = self.get(name)
        if container_class is None:
            raise InvalidArgumentError(
                f"Unknown type tag: {name!r} is not a registered container type",
                ErrorCode.UNKNOWN_TYPE_TAG,
                {"type_name": name}
            )
        return container_class

    def list_registered(self) -> Dict[str, str]:
        """
        List all registered containers.

        Returns:
            A dictionary mapping type names to class names
        """
        return {name: container_class.__name__ for name, container_class in self._registry.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._registry


# Global singleton instance
registry = ContainerRegistry()
