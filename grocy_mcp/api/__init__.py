"""Downstream Grocy REST client."""

from .client import ApiError, ApiResponse, GrocyApiClient, normalize_endpoint

__all__ = [
    'ApiError',
    'ApiResponse',
    'GrocyApiClient',
    'normalize_endpoint',
]
