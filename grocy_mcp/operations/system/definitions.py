"""System operation definitions: reference data and raw API access."""

from ...registry.operation_registry import OperationDefinition
from ..base import object_schema

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE"]

definitions = [
    OperationDefinition(
        name="system_locations_get",
        description="[SYSTEM/LOCATIONS] Get all storage locations.",
    ),
    OperationDefinition(
        name="system_units_get",
        description="[SYSTEM/UNITS] Get all quantity units.",
    ),
    OperationDefinition(
        name="system_users_get",
        description="[SYSTEM/USERS] Get all users.",
    ),
    OperationDefinition(
        name="system_dev_call_api",
        description="[SYSTEM/DEV] Call an arbitrary Grocy API endpoint and return its response.",
        input_schema=object_schema(
            {
                "endpoint": {"type": "string", "description": 'API endpoint, e.g. "objects/products"'},
                "method": {"type": "string", "enum": HTTP_METHODS, "description": "HTTP method (default: GET)"},
                "body": {"type": "object", "description": "JSON body for POST and PUT"},
            },
            required=["endpoint"],
        ),
    ),
    OperationDefinition(
        name="system_dev_test_request",
        description="[SYSTEM/DEV] Send a request and report the request, response status, headers and timing.",
        input_schema=object_schema(
            {
                "method": {"type": "string", "enum": HTTP_METHODS, "description": "HTTP method"},
                "endpoint": {"type": "string", "description": "API endpoint"},
                "body": {"type": "object", "description": "JSON body for POST and PUT"},
                "headers": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                    "description": "Extra request headers",
                },
            },
            required=["method", "endpoint"],
        ),
    ),
]
