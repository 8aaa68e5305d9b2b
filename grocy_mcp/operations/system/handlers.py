"""System operation handlers."""

import asyncio
import time

from ...api.client import ApiError, normalize_endpoint
from ...utils.response import error_response
from ..base import call_api, handle_errors, require, success


@handle_errors
async def get_locations(client, arguments, options):
    data = await call_api(client, "/objects/locations")
    return success(client, data)


@handle_errors
async def get_quantity_units(client, arguments, options):
    data = await call_api(client, "/objects/quantity_units")
    return success(client, data)


@handle_errors
async def get_users(client, arguments, options):
    data = await call_api(client, "/users")
    return success(client, data)


@handle_errors
async def call_grocy_api(client, arguments, options):
    require(arguments, "endpoint")
    method = str(arguments.get("method") or "GET").upper()
    data = await call_api(client, arguments["endpoint"], method, arguments.get("body"))
    return success(client, data)


@handle_errors
async def test_request(client, arguments, options):
    require(arguments, "method", "endpoint")
    method = str(arguments["method"]).upper()
    path = normalize_endpoint(str(arguments["endpoint"]).strip("/"))
    headers = arguments.get("headers") or {}
    request_info = {
        "url": f"{client.base_url}{path}",
        "method": method,
        "headers": headers,
        "body": arguments.get("body"),
        "authMethod": "apikey" if getattr(client, "has_api_key", False) else "none",
    }

    started = time.monotonic()
    try:
        response = await asyncio.to_thread(
            client.request, path, method, arguments.get("body"), None, headers
        )
    except ApiError as e:
        return error_response(
            f"Test request failed: {e}",
            {"request": request_info, "status": e.status_code, "details": e.details},
        )
    elapsed_ms = round((time.monotonic() - started) * 1000)

    return success(client, {
        "request": request_info,
        "response": {
            "statusCode": response.status,
            "timing": f"{elapsed_ms}ms",
            "headers": response.headers,
            "body": response.data,
        },
    })
