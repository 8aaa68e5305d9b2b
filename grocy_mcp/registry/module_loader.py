"""
Discovery and loading of operation modules.

Every sub-package of ``grocy_mcp.operations`` is a candidate module. Each one
is imported in a worker thread and all imports are awaited together, so a
module that fails (import error, wrong export shape) is logged and skipped
without affecting the others.

Load outcomes are cached on the loader: a second ``load_all()`` reuses them.
"""

import asyncio
import importlib
import logging
import pkgutil
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Dict, List, Optional

from .operation_registry import (
    InvalidOperationModule,
    OperationDefinition,
    OperationModule,
    OperationRegistry,
)

logger = logging.getLogger(__name__)

DEFAULT_OPERATIONS_PACKAGE = "grocy_mcp.operations"


@dataclass
class CachedModule:
    """Outcome of one load attempt."""
    name: str
    loaded: bool = False
    module: Optional[OperationModule] = None
    error: Optional[str] = None


def is_operation_module(obj: Any) -> bool:
    """Structural check: non-empty list of ``OperationDefinition`` and a ``handlers`` dict."""
    definitions = getattr(obj, "definitions", None)
    handlers = getattr(obj, "handlers", None)
    return (
        isinstance(definitions, list)
        and len(definitions) > 0
        and all(isinstance(d, OperationDefinition) for d in definitions)
        and isinstance(handlers, dict)
    )


class ModuleLoader:
    """Finds, imports and caches operation modules."""

    def __init__(self, package: str = DEFAULT_OPERATIONS_PACKAGE):
        """
        Args:
            package: Dotted name of the package whose sub-packages are
                operation modules
        """
        self.package = package
        self._cache: Dict[str, CachedModule] = {}
        self._discovered: Optional[List[str]] = None

    # ========================================================================
    # Discovery
    # ========================================================================

    def discover(self) -> List[str]:
        """Candidate module names (cached after the first call)."""
        if self._discovered is not None:
            return self._discovered

        try:
            package = importlib.import_module(self.package)
            search_path = getattr(package, "__path__", None)
            if search_path is None:
                raise ImportError(f"'{self.package}' is not a package")
            self._discovered = sorted(
                info.name
                for info in pkgutil.iter_modules(search_path)
                if info.ispkg and not info.name.startswith("_")
            )
            logger.info(f"Discovered {len(self._discovered)} operation modules in {self.package}")
        except ImportError as e:
            logger.error(f"Failed to discover operation modules in {self.package}: {e}")
            self._discovered = []

        return self._discovered

    # ========================================================================
    # Loading
    # ========================================================================

    async def load_all(self) -> List[OperationModule]:
        """
        Load every discovered module concurrently.

        Returns:
            Bundles of the modules that loaded, in module-name order. Never
            raises for a partial failure.
        """
        names = self.discover()
        results = await asyncio.gather(
            *(self._load(name) for name in names),
            return_exceptions=True,
        )

        modules = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.warning(f"Failed to load module {name}: {result}")
            elif result.loaded and result.module is not None:
                modules.append(result.module)

        logger.info(f"Loaded {len(modules)} of {len(names)} operation modules")
        return modules

    async def _load(self, name: str) -> CachedModule:
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        entry = CachedModule(name=name)
        try:
            imported = await asyncio.to_thread(importlib.import_module, f"{self.package}.{name}")
            bundle = self._find_bundle(imported, name)
            if bundle is None:
                entry.error = "no operation module export found"
                logger.warning(f"No operation module export found in {name}")
            else:
                OperationRegistry.validate_module(bundle)
                entry.module = bundle
                entry.loaded = True
                logger.info(f"Loaded module: {name} ({len(bundle.definitions)} operations)")
        except InvalidOperationModule as e:
            entry.error = str(e)
            logger.warning(f"Skipping module {name}: {entry.error}")
        except Exception as e:
            entry.error = f"{type(e).__name__}: {e}"
            logger.warning(f"Failed to load module {name}: {entry.error}")

        self._cache[name] = entry
        return entry

    @staticmethod
    def _find_bundle(imported: ModuleType, name: str) -> Optional[OperationModule]:
        # Prefer the conventional export, then any attribute with the right shape.
        candidates = [getattr(imported, "MODULE", None)]
        candidates.extend(
            getattr(imported, attr_name)
            for attr_name in sorted(vars(imported))
            if not attr_name.startswith("_")
        )
        for value in candidates:
            # Declared bundles are returned as-is and checked by the caller
            if isinstance(value, OperationModule):
                return value
            if isinstance(value, ModuleType) or not is_operation_module(value):
                continue
            return OperationModule(
                name=name,
                definitions=value.definitions,
                handlers=value.handlers,
                validators=getattr(value, "validators", None) or {},
            )
        return None

    # ========================================================================
    # Cache
    # ========================================================================

    def get_cached_module(self, name: str) -> Optional[OperationModule]:
        cached = self._cache.get(name)
        return cached.module if cached else None

    def cache_stats(self) -> Dict[str, int]:
        """Counts of attempted, loaded and failed modules."""
        loaded = sum(1 for entry in self._cache.values() if entry.loaded)
        errors = sum(1 for entry in self._cache.values() if entry.error)
        return {"total": len(self._cache), "loaded": loaded, "errors": errors}
