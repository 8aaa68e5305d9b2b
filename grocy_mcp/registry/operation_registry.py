"""
Operation Registry - flat catalog of Grocy operations.

Aggregates the bundles exported by every operation module into one catalog
keyed by operation name:

- definitions: name -> OperationDefinition
- handlers:    name -> OperationHandler
- validators:  name -> SubConfigValidator (optional per operation)

Operation names must be unique across modules. Under the default
``"error"`` policy a collision aborts registry construction with
DuplicateOperationError; the ``"overwrite"`` policy keeps the last
registration and logs a warning.
"""

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
)

from mcp.types import CallToolResult, Tool

if TYPE_CHECKING:
    from ..api.client import GrocyApiClient

logger = logging.getLogger(__name__)

# Type aliases
JSONSchema = Dict[str, Any]
OperationHandler = Callable[
    ["GrocyApiClient", Dict[str, Any], Mapping[str, Any]], Awaitable[CallToolResult]
]
SubConfigValidator = Callable[[Mapping[str, Any]], None]

DUPLICATE_POLICIES = ("error", "overwrite")


# ============================================================================
# Data Classes
# ============================================================================

def _empty_schema() -> JSONSchema:
    return {"type": "object", "properties": {}, "required": []}


@dataclass(frozen=True)
class OperationDefinition:
    """Describes an operation to callers. Immutable once created."""
    name: str                          # Globally unique (e.g., "shopping_list_get")
    description: str                   # Human-readable description
    input_schema: JSONSchema = field(default_factory=_empty_schema)

    def to_tool(self) -> Tool:
        """Convert to the MCP tool description."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


@dataclass
class OperationModule:
    """
    Bundle exported by one functional area (inventory, shopping, ...).

    A loadable module must carry a non-empty ``definitions`` list and a
    ``handlers`` dict; ``validators`` may be empty.
    """
    name: str
    definitions: List[OperationDefinition]
    handlers: Dict[str, OperationHandler]
    validators: Dict[str, SubConfigValidator] = field(default_factory=dict)


# ============================================================================
# Exceptions
# ============================================================================

class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class OperationNotFound(OperationRegistryError):
    """Operation not found in registry."""
    pass


class InvalidOperationModule(OperationRegistryError):
    """A module bundle does not have the expected shape."""
    pass


class DuplicateOperationError(OperationRegistryError):
    """Two modules declared the same operation name.

    Attributes:
        duplicates: ``(name, first_module, second_module)`` triples
    """

    def __init__(self, duplicates: List[Tuple[str, str, str]]):
        self.duplicates = list(duplicates)
        details = ", ".join(
            f"'{name}' ({first} and {second})" for name, first, second in self.duplicates
        )
        super().__init__(f"Duplicate operation names: {details}")


# ============================================================================
# Operation Registry
# ============================================================================

class OperationRegistry:
    """
    Central catalog of operations.

    Built once at startup from the loaded module bundles and read-only
    afterwards.
    """

    def __init__(self, duplicate_policy: str = "error"):
        """
        Initialize an empty registry.

        Args:
            duplicate_policy: "error" (collisions are fatal) or "overwrite"
                (last registration wins)
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicate policy: '{duplicate_policy}'. "
                f"Available policies: {', '.join(DUPLICATE_POLICIES)}"
            )
        self.duplicate_policy = duplicate_policy
        self._definitions: Dict[str, OperationDefinition] = {}
        self._handlers: Dict[str, OperationHandler] = {}
        self._validators: Dict[str, SubConfigValidator] = {}
        self._owners: Dict[str, str] = {}

    @classmethod
    def from_modules(
        cls,
        modules: Iterable[OperationModule],
        duplicate_policy: str = "error",
    ) -> "OperationRegistry":
        """
        Build a registry from loaded module bundles.

        Bundles are processed in module-name order so the outcome does not
        depend on load completion order.

        Raises:
            DuplicateOperationError: Under the "error" policy, listing every
                collision found across all modules
        """
        registry = cls(duplicate_policy)
        duplicates: List[Tuple[str, str, str]] = []
        for module in sorted(modules, key=lambda m: m.name):
            duplicates.extend(registry._register(module))

        if duplicates and duplicate_policy == "error":
            raise DuplicateOperationError(duplicates)

        logger.info(
            f"OperationRegistry built: {len(registry._definitions)} operations "
            f"from {len(set(registry._owners.values()))} modules"
        )
        return registry

    # ========================================================================
    # Registration
    # ========================================================================

    def register_module(self, module: OperationModule) -> None:
        """
        Register every operation of one module.

        Raises:
            InvalidOperationModule: If the bundle has the wrong shape
            DuplicateOperationError: Under the "error" policy
        """
        duplicates = self._register(module)
        if duplicates and self.duplicate_policy == "error":
            raise DuplicateOperationError(duplicates)

    def _register(self, module: OperationModule) -> List[Tuple[str, str, str]]:
        self.validate_module(module)
        duplicates = []

        for definition in module.definitions:
            name = definition.name
            handler = module.handlers.get(name)
            if handler is None:
                logger.warning(
                    f"Module '{module.name}' defines '{name}' without a handler; skipping"
                )
                continue

            if name in self._definitions:
                previous = self._owners[name]
                duplicates.append((name, previous, module.name))
                if self.duplicate_policy == "error":
                    continue
                logger.warning(
                    f"Operation '{name}' from module '{module.name}' "
                    f"overwrites the one from '{previous}'"
                )
                self._validators.pop(name, None)

            self._definitions[name] = definition
            self._handlers[name] = handler
            self._owners[name] = module.name
            if name in module.validators:
                self._validators[name] = module.validators[name]

        defined = {d.name for d in module.definitions}
        for name in set(module.handlers) - defined:
            logger.warning(f"Module '{module.name}' has a handler for undefined operation '{name}'")
        for name in set(module.validators) - defined:
            logger.warning(f"Module '{module.name}' has a validator for undefined operation '{name}'")

        logger.debug(f"Registered module '{module.name}' ({len(module.definitions)} operations)")
        return duplicates

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_definitions(self) -> List[OperationDefinition]:
        """All definitions, sorted by name."""
        return [self._definitions[name] for name in sorted(self._definitions)]

    def get_definition(self, name: str) -> OperationDefinition:
        """
        Retrieve a definition by name.

        Raises:
            OperationNotFound: If the operation doesn't exist
        """
        if name not in self._definitions:
            raise OperationNotFound(f"Operation '{name}' not found")
        return self._definitions[name]

    def get_handler(self, name: str) -> Optional[OperationHandler]:
        """Handler for ``name``, or None when the operation is unknown."""
        return self._handlers.get(name)

    def get_validator(self, name: str) -> Optional[SubConfigValidator]:
        """Options validator for ``name``, or None when none is registered."""
        return self._validators.get(name)

    def get_names(self) -> List[str]:
        """All operation names, sorted."""
        return sorted(self._definitions)

    def get_module_name(self, name: str) -> Optional[str]:
        """Module that contributed ``name``."""
        return self._owners.get(name)

    def exists(self, name: str) -> bool:
        """Check if operation exists."""
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    # ========================================================================
    # Module Checks
    # ========================================================================

    @staticmethod
    def validate_module(module: OperationModule) -> None:
        """
        Raises:
            InvalidOperationModule: If the bundle has the wrong shape
        """
        if not isinstance(module.definitions, list) or not module.definitions:
            raise InvalidOperationModule(
                f"Module '{module.name}' must define a non-empty list of definitions"
            )
        if not isinstance(module.handlers, dict):
            raise InvalidOperationModule(f"Module '{module.name}' must define a handlers dict")
        if not isinstance(module.validators, dict):
            raise InvalidOperationModule(f"Module '{module.name}' validators must be a dict")
        for definition in module.definitions:
            if not isinstance(definition, OperationDefinition) or not definition.name:
                raise InvalidOperationModule(
                    f"Module '{module.name}' contains an invalid definition: {definition!r}"
                )
