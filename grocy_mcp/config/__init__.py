"""
Configuration for grocy-mcp.

Layered YAML + environment configuration resolved into a frozen AppConfig.
"""

from .settings import (
    AppConfig,
    ConfigurationError,
    DownstreamSettings,
    OperationSettings,
    RegistrySettings,
    TransportSettings,
    ENV_OVERRIDES,
    RESERVED_OPERATION_KEYS,
    load_config,
)

__all__ = [
    'AppConfig',
    'ConfigurationError',
    'DownstreamSettings',
    'OperationSettings',
    'RegistrySettings',
    'TransportSettings',
    'ENV_OVERRIDES',
    'RESERVED_OPERATION_KEYS',
    'load_config',
]
