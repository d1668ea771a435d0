"""
Access control for container settings.

Every container owns an AccessToken. The token is passed along only by the
container's constructor and by its own methods (through `self._internal`);
calls made with the owner's token are privileged and bypass the gettable and
settable flags. Public attribute access and the public get/set methods pass
no token.
"""
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from configurator.schema import SchemaEntry
from errors import ErrorCode, InvalidArgumentError, NotGettableError

if TYPE_CHECKING:
    from configurator.base import DependencyConfigurator

logger = logging.getLogger(__name__)


class Access(Enum):
    READ = "gettable"
    WRITE = "settable"


class AccessToken:
    """Opaque capability identifying a container's own code paths."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<AccessToken>"


def is_privileged(container: "DependencyConfigurator", token: Optional[AccessToken]) -> bool:
    return token is not None and token is container._access_token


def authorize(
    container: "DependencyConfigurator",
    entry: SchemaEntry,
    access: Access,
    token: Optional[AccessToken] = None
) -> None:
    """
    Check that a read or write of a setting is allowed.

    Args:
        container: The container being accessed
        entry: The setting being accessed
        access: Direction of the access
        token: The caller's access token, if it has one

    Raises:
        NotGettableError: If an external caller reads a setting that is not
            gettable
        InvalidArgumentError: If an external caller writes a setting that is
            not settable
    """
    allowed = entry.gettable if access is Access.READ else entry.settable
    if allowed or is_privileged(container, token):
        return

    details = {"owner": container.type_name, "setting": entry.name, "access": access.value}
    if access is Access.READ:
        raise NotGettableError(
            f"{container.type_name}: The setting \"{entry.name}\" is not gettable.",
            ErrorCode.NOT_GETTABLE,
            details
        )
    raise InvalidArgumentError(
        f"{container.type_name}: The setting \"{entry.name}\" is not settable.",
        ErrorCode.NOT_SETTABLE,
        details
    )


class InternalAccess:
    """
    Privileged handle to a container's own settings.

    Obtained through `self._internal` inside container methods. Reads and
    writes made through it skip the gettable/settable flags but are still
    validated.
    """

    def __init__(self, container: "DependencyConfigurator", token: AccessToken):
        self._container = container
        self._token = token

    def get(self, name: str) -> Any:
        return self._container._read(name, self._token)

    def set(self, name: str, value: Any) -> None:
        self._container._write(name, value, self._token)

    def call(self, name: str, *args, **kwargs) -> Any:
        """Invoke the callback behind a lazy property with explicit arguments."""
        return self._container._call_getter(name, args, kwargs, self._token)
