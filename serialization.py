"""
JSON rendering of exported containers.

Containers first export themselves to plain data (see configurator.exporter);
this module turns that data into JSON and back. Values the json module does
not know natively are rendered as follows:

- objects with to_dict(): their exported dict
- dates, times and datetimes: ISO 8601 strings
- timedeltas: seconds as a float
- UUIDs and Decimals: strings
- enums: their value

Reading is lossless only for JSON types; ISO datetimes can optionally be
parsed back so datetime-typed settings survive the round trip.
"""

import datetime
import decimal
import json
import logging
import uuid
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union

from errors import ErrorCode, InvalidArgumentError, error_context

T = TypeVar('T')

logger = logging.getLogger(__name__)


def to_json(obj: Any, indent: Optional[int] = 2, **kwargs) -> str:
    """
    Render an exported container, or any plain data, as JSON.

    Args:
        obj: Data to render; objects with to_dict() are exported first
        indent: Indentation width, or None for a single line
        **kwargs: Passed through to json.dumps()

    Returns:
        The JSON text
    """
    return json.dumps(obj, indent=indent, default=_encode_value, **kwargs)


def from_json(
    json_str: str,
    cls: Optional[Type[T]] = None,
    parse_dates: bool = False
) -> Union[T, Dict[str, Any]]:
    """
    Read JSON text, optionally rebuilding a container from it.

    Args:
        json_str: The JSON text
        cls: Class whose from_dict() receives the decoded data
        parse_dates: Turn ISO datetime strings with a time zone into datetimes

    Returns:
        The rebuilt object when cls has from_dict(), otherwise the decoded data

    Raises:
        InvalidArgumentError: If the text is not valid JSON
    """
    with error_context(
        component_name="serialization",
        operation="decoding JSON",
        error_class=InvalidArgumentError,
        error_code=ErrorCode.INVALID_JSON,
        logger=logger
    ):
        data = json.loads(json_str, object_hook=_decode_datetimes if parse_dates else None)

    if cls is not None and hasattr(cls, 'from_dict'):
        return cls.from_dict(data)
    return data


def _decode_datetimes(obj: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in obj.items():
        # Only full timestamps with an offset; plain dates stay strings
        if not isinstance(value, str) or len(value) < 19 or value[10:11] != 'T':
            continue
        if not (value.endswith('Z') or '+' in value[19:] or '-' in value[19:]):
            continue
        try:
            obj[key] = datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            logger.debug(f"Leaving {key!r} as a string; not an ISO datetime")
    return obj


def _encode_value(obj: Any) -> Any:
    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    if isinstance(obj, (datetime.datetime, datetime.date, datetime.time)):
        return obj.isoformat()
    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()
    if isinstance(obj, (uuid.UUID, decimal.Decimal)):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
