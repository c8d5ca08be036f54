"""Load, execute and cache modules on behalf of scoped require functions."""

from __future__ import annotations

import logging
from typing import Any

from .errors import ModuleNotFound
from .execution import ExecutionContext
from .locator import ResourceLocator
from .registry import ModuleRegistry
from .resolver import resolve
from .types import ModuleRecord

LOGGER = logging.getLogger(__name__)


class Require:
    """Request function bound to the id of the module that owns it."""

    def __init__(self, engine: ExecutionEngine, base_id: str) -> None:
        self._engine = engine
        self.base_id = base_id
        self.main: ModuleRecord | None = None

    def __call__(self, module_id: str) -> Any:
        return self._engine.load(module_id, self.base_id)

    def __repr__(self) -> str:
        return f"Require(base_id={self.base_id!r})"


class RequireFactory:
    """Produce require functions scoped to a module location."""

    def __init__(self, engine: ExecutionEngine) -> None:
        self._engine = engine

    def make(self, base_id: str) -> Require:
        return Require(self._engine, base_id)


class ExecutionEngine:
    """Run each module at most once per session and hand back its exports."""

    def __init__(
        self,
        locator: ResourceLocator,
        registry: ModuleRegistry,
        context: ExecutionContext,
    ) -> None:
        self._locator = locator
        self._registry = registry
        self._context = context
        self.factory = RequireFactory(self)

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    def load(self, module_id: str, base_id: str = "") -> Any:
        """Return the exports of ``module_id`` as requested from ``base_id``."""

        # keyed on the id as written, not the resolved id
        record = self._registry.get(module_id)
        if record is not None:
            LOGGER.debug("Module '%s' served from registry", module_id)
            return record.exports

        canonical_id = resolve(module_id, base_id)
        resource = self._locator.locate(canonical_id)
        if resource is None:
            raise ModuleNotFound(module_id)

        LOGGER.debug("Loading module '%s' from %s", module_id, resource.origin)
        record = self._registry.create(module_id, resource.origin, resource.id)
        try:
            unit = self._context.compile(resource.content, resource.origin)
            # relative requests inside the module resolve against its real location
            child_require = self.factory.make(resource.id)
            child_require.main = record
            unit.invoke(child_require, record, record.exports)
        except BaseException:
            LOGGER.debug("Evicting module '%s' after failed load", module_id)
            self._registry.remove(module_id)
            raise
        return record.exports


__all__ = ["ExecutionEngine", "Require", "RequireFactory"]
