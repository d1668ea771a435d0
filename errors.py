"""
Custom exception hierarchy for the dependency configurator.

This module defines standardized error codes, messages, and categorization
for the different kinds of failure a configurator can report: broken schemas,
rejected caller data or access, failing derived accessors, and values that
cannot be exported.
"""
from contextlib import contextmanager
from enum import Enum
import logging
from typing import Optional, Dict, Any, Type, Union
import uuid

# Import dedicated error loggers
from utils.error_logging import schema_error_logger, access_error_logger


class ErrorCode(Enum):
    """
    Enumeration of error codes for standardized error handling.

    Error codes are grouped by category for easier identification:
    - 1xx: Configuration and schema errors
    - 2xx: Invalid argument errors
    - 3xx: Bad method call errors
    - 4xx: Export errors
    - 9xx: Uncategorized/system errors
    """
    # Configuration and schema errors (1xx)
    CONFIG_NOT_FOUND = 101
    INVALID_CONFIG = 102
    CONFIG_PARSE_ERROR = 103
    SCHEMA_MISSING_REQUIRED_FLAG = 104
    SCHEMA_MISSING_TYPE = 105
    SCHEMA_INVALID_TYPE = 106
    SCHEMA_INVALID_ENTRY = 107
    SCHEMA_RESERVED_NAME = 108

    # Invalid argument errors (2xx)
    MISSING_REQUIRED_SETTING = 201
    TYPE_MISMATCH = 202
    NOT_GETTABLE = 203
    NOT_SETTABLE = 204
    NO_SUCH_SETTING = 205
    UNKNOWN_SETTING = 206
    UNKNOWN_TYPE_TAG = 207
    INVALID_JSON = 208

    # Bad method call errors (3xx)
    NO_VALID_CALLBACK = 301
    CALLBACK_RETURN_TYPE = 302
    SETTER_ARGUMENT_COUNT = 303

    # Export errors (4xx)
    UNSUPPORTED_EXPORT_TYPE = 401
    CIRCULAR_REFERENCE = 402

    # Uncategorized/system errors (9xx)
    UNKNOWN_ERROR = 901


class ConfiguratorError(Exception):
    """
    Base exception class for all configurator errors.

    All other custom exceptions inherit from this class, allowing for
    standardized error handling throughout the system.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize a new ConfiguratorError.

        Args:
            message: Human-readable error message
            code: Error code from the ErrorCode enum
            details: Additional error details for debugging or logging
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


class ConfigError(ConfiguratorError):
    """Exception raised when the library configuration cannot be loaded."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_CONFIG,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


class MisconfiguredError(ConfiguratorError):
    """
    Exception raised when a container's schema is incomplete or malformed.

    This is a programming error in the class declaring the schema; callers
    cannot recover from it by passing different data.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SCHEMA_INVALID_ENTRY,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


class InvalidArgumentError(ConfiguratorError):
    """Exception raised when caller data or caller access violates a schema."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TYPE_MISMATCH,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


class NotGettableError(InvalidArgumentError, AttributeError):
    """
    Exception raised when external code reads a setting that is not gettable.

    Also an AttributeError, so hasattr() and getattr() with a default treat
    the hidden setting as absent.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NOT_GETTABLE,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


class BadMethodCallError(ConfiguratorError):
    """Exception raised when a derived accessor cannot be serviced."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.NO_VALID_CALLBACK,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


class ExportError(ConfiguratorError):
    """Exception raised when a value cannot be flattened for export."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNSUPPORTED_EXPORT_TYPE,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)


def _error_logger_for(error: Union[ConfiguratorError, Type[ConfiguratorError]]) -> logging.Logger:
    error_type = error if isinstance(error, type) else type(error)
    if issubclass(error_type, (MisconfiguredError, ConfigError)):
        return schema_error_logger
    return access_error_logger


@contextmanager
def error_context(
    component_name: str,
    operation: Optional[str] = None,
    error_class: Type[ConfiguratorError] = ConfiguratorError,
    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
    logger: Optional[logging.Logger] = None
):
    """
    Context manager for standardized error handling across the system.

    Provides consistent error handling, logging, and error wrapping
    for any component operation. Use with a 'with' statement to wrap code
    that may raise exceptions.

    Args:
        component_name: Name of the component (for error messages)
        operation: Description of the operation (for error messages)
        error_class: The ConfiguratorError subclass to use for wrapping
        error_code: Error code to use for foreign exceptions
        logger: Logger to use (if None, creates a new one)

    Yields:
        Control to the wrapped code block

    Raises:
        ConfiguratorError: With appropriate error information
    """
    if logger is None:
        logger = logging.getLogger(f"error.{component_name}")

    try:
        yield
    except Exception as e:
        # Generate a unique error ID for tracking
        error_id = str(uuid.uuid4())

        # Library errors already carry a code; log and pass them on
        if isinstance(e, ConfiguratorError):
            _error_logger_for(e).error(f"[{error_id}] {component_name} - {e}")
            raise

        error_msg = f"Error in {component_name}"
        if operation:
            error_msg += f" during {operation}"

        # Redact potentially sensitive information
        error_string = str(e)
        if any(sensitive in error_string.lower() for sensitive in ["token", "bearer", "key", "auth", "password", "secret"]):
            error_string = "[REDACTED SENSITIVE INFORMATION]"

        wrapped_error = error_class(
            f"{error_msg}: {error_string}",
            error_code,
            {"original_error": error_string, "error_id": error_id}
        )

        logger.debug(f"[{error_id}] wrapping {type(e).__name__} from {component_name}")
        _error_logger_for(error_class).error(f"[{error_id}] {error_msg}: {error_string}")

        raise wrapped_error from e
