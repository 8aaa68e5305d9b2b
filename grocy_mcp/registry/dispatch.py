"""
Dispatch facade used by the transport layer.

Combines the registry, the enablement result, option validation outcomes
and the acknowledgment annotator behind four calls: list_definitions,
get_handler, get_options and invoke.

Everything here is computed in the constructor and read-only afterwards.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from mcp.types import CallToolResult

from ..api.client import GrocyApiClient
from ..config.settings import AppConfig
from ..utils.response import error_response
from .acknowledgment import AcknowledgmentAnnotator
from .enablement import EnablementResult, resolve_enablement
from .operation_registry import (
    OperationDefinition,
    OperationHandler,
    OperationRegistry,
    OperationRegistryError,
)
from .validation import SubConfigValidationError, validate_operation_options

logger = logging.getLogger(__name__)


class OperationNotEnabledError(OperationRegistryError):
    """Operation is unknown or not enabled in the configuration."""
    pass


class OperationDispatcher:
    """Entry point for listing and invoking enabled operations."""

    def __init__(
        self,
        registry: OperationRegistry,
        enablement: EnablementResult,
        annotator: AcknowledgmentAnnotator,
        client: GrocyApiClient,
    ):
        self.registry = registry
        self.enablement = enablement
        self.annotator = annotator
        self.client = client

        errors: Dict[str, SubConfigValidationError] = {}
        for name in sorted(enablement.enabled):
            try:
                validate_operation_options(registry, name, enablement.options_for(name))
            except SubConfigValidationError as e:
                logger.error(f"Invalid options for {name}: {e}")
                errors[name] = e
        self.option_errors: Mapping[str, SubConfigValidationError] = MappingProxyType(errors)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        registry: OperationRegistry,
        client: Optional[GrocyApiClient] = None,
    ) -> "OperationDispatcher":
        """
        Wire a dispatcher from resolved configuration.

        Raises:
            UnknownOperationError: If an enabled operation is not registered
        """
        enablement = resolve_enablement(config, registry)
        annotator = AcknowledgmentAnnotator.from_config(config)
        if client is None:
            client = GrocyApiClient(config.downstream, config.custom_headers)
        return cls(registry, enablement, annotator, client)

    # ========================================================================
    # Lookup
    # ========================================================================

    def list_definitions(self) -> List[OperationDefinition]:
        """Definitions of enabled operations, sorted by name."""
        return [
            definition for definition in self.registry.get_definitions()
            if self.enablement.is_enabled(definition.name)
        ]

    def get_handler(self, name: str) -> Optional[OperationHandler]:
        return self.registry.get_handler(name)

    def get_options(self, name: str) -> Mapping[str, Any]:
        return self.enablement.options_for(name)

    def is_enabled(self, name: str) -> bool:
        return self.enablement.is_enabled(name)

    # ========================================================================
    # Invocation
    # ========================================================================

    async def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> CallToolResult:
        """
        Run an enabled operation and annotate its result.

        Raises:
            OperationNotEnabledError: For unknown or disabled operations
        """
        if not self.enablement.is_enabled(name):
            raise OperationNotEnabledError(
                f"Tool '{name}' is not enabled. Enable it in your configuration."
            )

        handler = self.registry.get_handler(name)
        if handler is None:
            raise OperationNotEnabledError(f"Unknown tool: {name}")

        option_error = self.option_errors.get(name)
        if option_error is not None:
            return error_response(
                f"Invalid configuration for {name}: {option_error}",
                option_error.to_dict(),
            )

        try:
            result = await handler(self.client, dict(arguments or {}), self.get_options(name))
        except Exception as e:
            logger.exception(f"Error executing operation {name}")
            return error_response(f"Tool execution failed: {e}", {"tool": name})

        return self.annotator.annotate(name, result)
