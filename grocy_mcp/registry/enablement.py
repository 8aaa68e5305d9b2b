"""
Enablement resolution.

Cross-references the configured operations against the registry:

- every name configured ``enabled: true`` must be a registered operation,
  otherwise UnknownOperationError is raised (the entry point exits on it);
- names that are configured but disabled, or unknown and disabled, have no
  effect;
- enabled operations with extra keys get an options entry.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, FrozenSet, List, Mapping

from ..config.settings import AppConfig
from .operation_registry import OperationRegistry, OperationRegistryError

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class UnknownOperationError(OperationRegistryError):
    """Enabled operation names that no loaded module provides.

    Attributes:
        invalid: Sorted unknown names
        valid: Sorted names the registry knows
    """

    def __init__(self, invalid: List[str], valid: List[str]):
        self.invalid = sorted(invalid)
        self.valid = sorted(valid)
        super().__init__(
            f"Invalid operations: {', '.join(self.invalid)}. "
            f"Valid: {', '.join(self.valid)}"
        )


@dataclass(frozen=True)
class EnablementResult:
    """Enabled operation names and their options. Read-only."""
    enabled: FrozenSet[str] = frozenset()
    options: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: _EMPTY)

    def is_enabled(self, name: str) -> bool:
        return name in self.enabled

    def options_for(self, name: str) -> Mapping[str, Any]:
        return self.options.get(name, _EMPTY)


def resolve_enablement(config: AppConfig, registry: OperationRegistry) -> EnablementResult:
    """
    Build the enabled set and options map.

    Args:
        config: Resolved configuration
        registry: Operation registry built from the loaded modules

    Returns:
        EnablementResult

    Raises:
        UnknownOperationError: If any enabled name is not in the registry
    """
    enabled = set(config.enabled_operations())

    invalid = [name for name in enabled if not registry.exists(name)]
    if invalid:
        raise UnknownOperationError(invalid, registry.get_names())

    options = {}
    for name in sorted(enabled):
        op_options = config.operation_options(name)
        if op_options:
            options[name] = op_options

    if not enabled:
        logger.warning("No operations enabled; the catalog is empty")
    else:
        logger.info(f"Enabled operations ({len(enabled)}): {', '.join(sorted(enabled))}")

    ignored = sorted(
        name for name, op in config.operations.items()
        if not op.enabled and not registry.exists(name)
    )
    if ignored:
        logger.debug(f"Ignoring disabled unknown operations: {', '.join(ignored)}")

    return EnablementResult(enabled=frozenset(enabled), options=MappingProxyType(options))
