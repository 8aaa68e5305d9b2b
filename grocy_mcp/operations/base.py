"""
Shared helpers for operation handlers.

Handlers are ``async (client, arguments, options) -> CallToolResult``.
They call the blocking Grocy client through ``call_api`` and report
expected failures (bad arguments, downstream errors) as error results via
the ``handle_errors`` decorator instead of raising.
"""

import asyncio
import functools
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mcp.types import CallToolResult

from ..api.client import ApiError, GrocyApiClient
from ..utils.response import error_response, success_response

logger = logging.getLogger(__name__)


class ArgumentError(ValueError):
    """Invalid or missing operation arguments."""
    pass


def handle_errors(handler):
    """Turn ArgumentError and ApiError raised by ``handler`` into error results."""

    @functools.wraps(handler)
    async def wrapper(client: GrocyApiClient, arguments: Dict[str, Any], options: Mapping[str, Any]) -> CallToolResult:
        try:
            return await handler(client, arguments or {}, options)
        except ArgumentError as e:
            return error_response(str(e))
        except ApiError as e:
            logger.warning(f"{handler.__name__}: {e.operation or 'API call'} failed: {e}")
            details = {"operation": e.operation, "status": e.status_code}
            details.update(e.details)
            return error_response(f"Tool execution failed: {e}", details)

    return wrapper


async def call_api(
    client: GrocyApiClient,
    endpoint: str,
    method: str = "GET",
    body: Any = None,
    query_params: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Run one blocking client request off the event loop and return its data."""
    response = await asyncio.to_thread(
        client.request, endpoint, method, body, query_params
    )
    return response.data


def success(client: GrocyApiClient, data: Any, message: Optional[str] = None) -> CallToolResult:
    """Success result capped at the client's response size limit."""
    return success_response(data, message, size_limit=client.response_size_limit)


def require(arguments: Mapping[str, Any], *fields: str) -> None:
    """
    Raises:
        ArgumentError: Listing every missing (None or empty string) field
    """
    missing = [f for f in fields if arguments.get(f) is None or arguments.get(f) == ""]
    if missing:
        raise ArgumentError(f"Missing required parameters: {', '.join(missing)}")


def parse_number(value: Any, name: str, required: bool = True) -> Optional[float]:
    """Coerce ``value`` to a number, keeping ints as ints."""
    if value is None or value == "":
        if required:
            raise ArgumentError(f"{name} is required")
        return None
    if isinstance(value, bool):
        raise ArgumentError(f"{name} must be a valid number")
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ArgumentError(f"{name} must be a valid number")
    return int(number) if number.is_integer() else number


def parse_list(value: Any, name: str) -> List[Any]:
    """Require a non-empty list."""
    if value is None:
        raise ArgumentError(f"{name} is required")
    if not isinstance(value, list):
        raise ArgumentError(f"{name} must be an array")
    if not value:
        raise ArgumentError(f"{name} cannot be empty")
    return value


def pick_fields(objects: Iterable[Mapping[str, Any]], fields: Iterable[str]) -> List[Dict[str, Any]]:
    """Keep only ``fields`` of every object."""
    fields = list(fields)
    return [{f: obj[f] for f in fields if f in obj} for obj in objects]


def as_list(data: Any) -> List[Any]:
    return data if isinstance(data, list) else []


def object_schema(properties: Optional[Dict[str, Any]] = None, required: Iterable[str] = ()) -> Dict[str, Any]:
    """JSON schema for an operation's arguments object."""
    return {"type": "object", "properties": properties or {}, "required": list(required)}


def id_property(description: str) -> Dict[str, Any]:
    return {"type": "number", "description": description}
