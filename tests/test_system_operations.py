"""Tests for system handlers."""

import json

import pytest

from grocy_mcp.api import ApiError
from grocy_mcp.operations.system import MODULE, handlers
from grocy_mcp.utils.response import result_texts


def test_module_bundle_complete():
    assert {d.name for d in MODULE.definitions} == set(MODULE.handlers)


@pytest.mark.asyncio
async def test_reference_data_endpoints(fake_client):
    await handlers.get_locations(fake_client, {}, {})
    await handlers.get_quantity_units(fake_client, {}, {})
    await handlers.get_users(fake_client, {}, {})

    assert [c["endpoint"] for c in fake_client.calls] == [
        "/objects/locations",
        "/objects/quantity_units",
        "/users",
    ]


@pytest.mark.asyncio
async def test_call_api_passes_method_and_body(fake_client):
    await handlers.call_grocy_api(
        fake_client, {"endpoint": "objects/products", "method": "post", "body": {"name": "Tea"}}, {}
    )

    call = fake_client.calls[0]
    assert (call["method"], call["endpoint"], call["body"]) == ("POST", "objects/products", {"name": "Tea"})


@pytest.mark.asyncio
async def test_test_request_reports_response(make_client):
    client = make_client({("GET", "/api/system/info"): {"grocy_version": {"Version": "4.2.0"}}})

    result = await handlers.test_request(
        client, {"method": "get", "endpoint": "/system/info/", "headers": {"X-Debug": "1"}}, {}
    )

    data = json.loads(result_texts(result)[1])
    assert data["request"]["url"] == "http://grocy.test/api/system/info"
    assert data["request"]["headers"] == {"X-Debug": "1"}
    assert data["response"]["statusCode"] == 200
    assert data["response"]["body"] == {"grocy_version": {"Version": "4.2.0"}}
    assert client.calls[0]["headers"] == {"X-Debug": "1"}


@pytest.mark.asyncio
async def test_test_request_failure(make_client):
    client = make_client({("GET", "/api/nope"): ApiError("HTTP 404 error", status_code=404)})

    result = await handlers.test_request(client, {"method": "GET", "endpoint": "nope"}, {})

    assert result.isError
    assert "Test request failed: HTTP 404 error" in result_texts(result)[0]
    assert '"status": 404' in result_texts(result)[1]
