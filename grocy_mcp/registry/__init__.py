"""
Operation registry for grocy-mcp.

Discovery, aggregation, enablement, option validation, acknowledgment and
dispatch of operations.
"""

from .operation_registry import (
    OperationRegistry,
    OperationDefinition,
    OperationModule,
    OperationHandler,
    SubConfigValidator,
    # Exceptions
    OperationRegistryError,
    OperationNotFound,
    InvalidOperationModule,
    DuplicateOperationError,
)
from .module_loader import ModuleLoader, CachedModule, is_operation_module
from .enablement import EnablementResult, UnknownOperationError, resolve_enablement
from .validation import SubConfigValidationError, validate_operation_options
from .acknowledgment import AcknowledgmentAnnotator, annotate_result
from .dispatch import OperationDispatcher, OperationNotEnabledError

__all__ = [
    'OperationRegistry',
    'OperationDefinition',
    'OperationModule',
    'OperationHandler',
    'SubConfigValidator',
    'ModuleLoader',
    'CachedModule',
    'is_operation_module',
    'EnablementResult',
    'resolve_enablement',
    'SubConfigValidationError',
    'validate_operation_options',
    'AcknowledgmentAnnotator',
    'annotate_result',
    'OperationDispatcher',
    # Exceptions
    'OperationRegistryError',
    'OperationNotFound',
    'InvalidOperationModule',
    'DuplicateOperationError',
    'UnknownOperationError',
    'OperationNotEnabledError',
]
