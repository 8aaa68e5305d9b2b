"""Shared fixtures: a fake Grocy client and configuration helpers."""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from grocy_mcp.api.client import ApiResponse
from grocy_mcp.config import load_config


class FakeClient:
    """Stands in for GrocyApiClient.

    ``responses`` maps ``(METHOD, endpoint)`` to the data to return, an
    exception to raise, or a callable ``(body, query_params) -> data``.
    Unmapped calls return None. Every call is recorded in ``calls``.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, str], Any]] = None, response_size_limit: int = 10000):
        self.responses = dict(responses or {})
        self.response_size_limit = response_size_limit
        self.base_url = "http://grocy.test"
        self.has_api_key = True
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, endpoint, method="GET", body=None, query_params=None, headers=None):
        method = method.upper()
        self.calls.append({
            "endpoint": endpoint,
            "method": method,
            "body": body,
            "query_params": query_params,
            "headers": headers,
        })
        response = self.responses.get((method, endpoint))
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(body, query_params)
        return ApiResponse(data=response, status=200, headers={"Content-Type": "application/json"})

    def calls_to(self, endpoint: str, method: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            c for c in self.calls
            if c["endpoint"] == endpoint and (method is None or c["method"] == method)
        ]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def make_client():
    """Factory for FakeClient instances with canned responses."""
    return FakeClient


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a config file and return its path."""
    def _write(text: str, name: str = "grocy-mcp.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write


@pytest.fixture
def make_config(write_config):
    """Resolve a configuration from YAML text with an empty environment."""
    def _make(text: str = "", environ: Optional[Dict[str, str]] = None):
        return load_config(write_config(text), environ=environ or {})
    return _make
