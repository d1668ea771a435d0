"""
Resolution of lazy callback settings.

A setting named `<name>_getter` holding a callback backs the derived
property `<name>`. Reading the property invokes the callback once and caches
the result; calling `get_<name>(...)` invokes it every time with the given
arguments.
"""
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

from configurator.schema import getter_name
from configurator.validator import check_value
from errors import BadMethodCallError, ErrorCode

if TYPE_CHECKING:
    from configurator.base import DependencyConfigurator

logger = logging.getLogger(__name__)


def takes_no_arguments(callback: Callable) -> bool:
    """Whether a callback can be invoked without arguments."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if parameter.default is inspect.Parameter.empty:
            return False
    return True


def invoke_getter(
    container: "DependencyConfigurator",
    name: str,
    args: Tuple[Any, ...] = (),
    kwargs: Optional[Dict[str, Any]] = None
) -> Any:
    """
    Invoke the callback behind the lazy property `name`.

    Args:
        container: The container owning the callback
        name: The derived property name (without the getter suffix)
        args: Positional arguments for the callback
        kwargs: Keyword arguments for the callback

    Returns:
        The callback's result, converted like a direct write if the callback
        declares a structured return type

    Raises:
        BadMethodCallError: If the callback is missing, not callable, or
            returns a value of the wrong type
    """
    source = getter_name(name)
    accessor = f"get_{name}()"
    entry = container.schema()[source]
    stored = container._state.lookup(source)

    if stored is None:
        if not entry.required:
            return None
        raise BadMethodCallError(
            f"{container.type_name}: {accessor}: There is no valid callback for \"{source}\".",
            ErrorCode.NO_VALID_CALLBACK,
            {"owner": container.type_name, "setting": source}
        )

    callback = stored.value
    if not callable(callback):
        raise BadMethodCallError(
            f"{container.type_name}: {accessor}: There is no valid callback for \"{source}\".",
            ErrorCode.NO_VALID_CALLBACK,
            {"owner": container.type_name, "setting": source}
        )

    logger.debug(f"{container.type_name}: invoking \"{source}\"")
    result = callback(*args, **(kwargs or {}))

    returns = entry.type.returns
    if returns is None:
        return result
    if result is None and not entry.required:
        return result

    checked, observed, ok = check_value(returns, result)
    if not ok:
        raise BadMethodCallError(
            f"{container.type_name}: {accessor}: The \"{source}\" callback did not return \"{returns.name}\", but \"{observed}\".",
            ErrorCode.CALLBACK_RETURN_TYPE,
            {"owner": container.type_name, "setting": source, "expected": returns.name, "observed": observed}
        )
    return checked
