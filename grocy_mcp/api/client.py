"""Thin REST client for the Grocy API."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import requests

from ..config.settings import DownstreamSettings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "GROCY-API-KEY"
BODY_METHODS = ("POST", "PUT", "PATCH")


class ApiError(Exception):
    """A downstream request failed.

    Attributes:
        status_code: HTTP status, None for network failures
        operation: "<METHOD> <endpoint>" of the failed call
        details: Response body or other context
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.operation = operation
        self.details = details or {}


@dataclass
class ApiResponse:
    data: Any
    status: int
    headers: Dict[str, str] = field(default_factory=dict)


def normalize_endpoint(endpoint: str) -> str:
    """Map ``stock``, ``/stock``, ``api/stock`` and ``/api/stock`` to ``/api/stock``."""
    if endpoint.startswith("/api/"):
        return endpoint
    if endpoint.startswith("api/"):
        return f"/{endpoint}"
    if endpoint.startswith("/"):
        return f"/api{endpoint}"
    return f"/api/{endpoint}"


class GrocyApiClient:
    """Synchronous Grocy client sharing one requests session."""

    def __init__(
        self,
        settings: DownstreamSettings,
        custom_headers: Optional[Mapping[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.response_size_limit = settings.response_size_limit
        self.session = session or requests.Session()
        self.session.verify = settings.verify_tls

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        headers.update(custom_headers or {})
        if settings.api_key:
            headers[API_KEY_HEADER] = settings.api_key
        self.session.headers.update(headers)

    @property
    def has_api_key(self) -> bool:
        return bool(self.settings.api_key)

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        query_params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ApiResponse:
        """
        Issue one request.

        Args:
            endpoint: Path below the API root, with or without "/api"
            method: HTTP method
            body: JSON body (sent for POST, PUT and PATCH only)
            query_params: Query string parameters
            headers: Extra headers for this request

        Returns:
            ApiResponse with the decoded JSON (or text) body

        Raises:
            ApiError: On HTTP status >= 400 or a network failure
        """
        method = method.upper()
        path = normalize_endpoint(endpoint)
        url = f"{self.base_url}{path}"
        if query_params:
            url = f"{url}?{urlencode(query_params, doseq=True)}"
        operation = f"{method} {path}"

        kwargs: Dict[str, Any] = {"timeout": self.settings.timeout}
        if headers:
            kwargs["headers"] = dict(headers)
        if method in BODY_METHODS and body is not None:
            kwargs["json"] = body

        logger.debug(f"API {operation}")
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"API {operation} failed: {e}")
            raise ApiError(
                "Network error - unable to reach server",
                operation=operation,
                details={"url": url, "error": str(e)},
            ) from e

        data = self._decode(response)
        if response.status_code >= 400:
            logger.warning(f"HTTP {response.status_code} for {operation}")
            message = None
            if isinstance(data, dict):
                message = data.get("error_message") or data.get("message")
            raise ApiError(
                message or f"HTTP {response.status_code} error",
                status_code=response.status_code,
                operation=operation,
                details={"responseData": data},
            )

        return ApiResponse(data=data, status=response.status_code, headers=dict(response.headers))

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Convenience methods

    def get(self, endpoint: str, query_params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request(endpoint, "GET", query_params=query_params).data

    def post(self, endpoint: str, body: Any = None) -> Any:
        return self.request(endpoint, "POST", body=body).data

    def put(self, endpoint: str, body: Any = None) -> Any:
        return self.request(endpoint, "PUT", body=body).data

    def delete(self, endpoint: str) -> Any:
        return self.request(endpoint, "DELETE").data

    def close(self) -> None:
        self.session.close()
