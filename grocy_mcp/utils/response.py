"""Standardized result envelopes for MCP operations."""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.types import CallToolResult, TextContent

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully"


def is_success(result: CallToolResult) -> bool:
    """Check if an operation result is clean (no error marker)."""
    return not result.isError


def result_texts(result: CallToolResult) -> List[str]:
    """Text of every text entry in a result, in order."""
    return [item.text for item in result.content if isinstance(item, TextContent)]


def safe_dumps(data: Any) -> str:
    """JSON-format data for display, falling back to str()."""
    try:
        return json.dumps(data, indent=2, default=str)
    except (TypeError, ValueError) as e:
        logger.warning(f"Failed to serialize data: {e}")
        return "[Unable to format data]"


def truncate(text: str, size_limit: Optional[int]) -> str:
    """Cut ``text`` to ``size_limit`` characters and say how much was dropped."""
    if not size_limit or len(text) <= size_limit:
        return text
    omitted = len(text) - size_limit
    return (
        f"{text[:size_limit]}\n"
        f"... [truncated {omitted} characters; response_size_limit is {size_limit}]"
    )


def success_response(
    data: Any,
    message: Optional[str] = None,
    size_limit: Optional[int] = None,
) -> CallToolResult:
    """Create a successful result.

    Args:
        data: The response data, rendered as JSON
        message: Optional summary line shown before the data
        size_limit: Maximum characters of rendered data

    Returns:
        Result with a message entry followed by a data entry
    """
    return CallToolResult(
        content=[
            TextContent(type="text", text=message or DEFAULT_SUCCESS_MESSAGE),
            TextContent(type="text", text=truncate(safe_dumps(data), size_limit)),
        ],
        isError=False,
    )


def error_response(
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> CallToolResult:
    """Create an error result.

    Args:
        message: Error message
        details: Optional structured details, rendered as JSON

    Returns:
        Result flagged with ``isError``
    """
    content = [TextContent(type="text", text=f"Error: {message}")]
    if details:
        content.append(TextContent(type="text", text=safe_dumps(details)))
    return CallToolResult(content=content, isError=True)
