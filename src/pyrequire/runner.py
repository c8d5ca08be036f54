"""Host-facing runner that owns one module loading session."""

from __future__ import annotations

import logging
import pkgutil
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .engine import ExecutionEngine, Require
from .errors import EntryPointError
from .execution import ExecutionContext, restricted_builtins
from .locator import DEFAULT_EXTENSION, ResourceLocator, create_locator
from .registry import ModuleProvider, ModuleRegistry

if TYPE_CHECKING:
    from .config import Config

LOGGER = logging.getLogger(__name__)
DEFAULT_ENTRY_POINT = "main"
_NO_ARGS: Any = object()


class ModuleRunner:
    """Load modules from ``base`` and run functions they export.

    Each runner is an independent session: it owns its locator, registry and
    require functions, and modules loaded through it stay cached for its
    lifetime.
    """

    def __init__(
        self,
        base: Path | str,
        modules: Mapping[str, Any] | None = None,
        *,
        providers: Mapping[str, ModuleProvider] | None = None,
        capabilities: Mapping[str, Any] | None = None,
        sandbox: bool = False,
        extension: str = DEFAULT_EXTENSION,
        locator: ResourceLocator | None = None,
    ) -> None:
        self._modules: dict[str, Any] = dict(modules or {})
        self._providers: dict[str, ModuleProvider] = dict(providers or {})
        self._locator = locator if locator is not None else create_locator(base, extension)
        self._registry = ModuleRegistry(self._modules, self._providers)
        context = ExecutionContext(
            capabilities=capabilities,
            builtins=restricted_builtins() if sandbox else None,
        )
        self._engine = ExecutionEngine(self._locator, self._registry, context)
        self._require = self._engine.factory.make("")

    @classmethod
    def from_config(cls, config: Config) -> ModuleRunner:
        """Build a runner from parsed configuration."""

        runner = cls(
            config.base,
            config.modules,
            capabilities={
                name: pkgutil.resolve_name(reference)
                for name, reference in config.capabilities.items()
            },
            sandbox=config.sandbox,
            extension=config.extension,
        )
        for reference in config.module_types:
            runner.register_module_type(reference)
        return runner

    @property
    def require(self) -> Require:
        """Root require function, resolving relative ids against the base."""
        return self._require

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    def register_module(self, module_id: str, value: Any) -> None:
        """Expose a host value to module code as ``require(module_id)``."""
        self._modules[module_id] = value

    def register_provider(self, module_id: str, factory: ModuleProvider) -> None:
        """Expose the value built by ``factory`` on first request."""
        self._providers[module_id] = factory

    def register_module_type(self, reference: str) -> None:
        """Expose an importable object (``pkg.mod:attr``) under its own reference."""
        self.register_provider(reference, lambda: pkgutil.resolve_name(reference))

    def run_entry_point(
        self,
        module_id: str,
        function_name: str = DEFAULT_ENTRY_POINT,
        args: Any = _NO_ARGS,
    ) -> Any:
        """Load ``module_id`` and call its exported ``function_name`` with ``args``.

        ``args`` is passed through as given, ``None`` included; omitting it
        passes an empty dict.
        """

        exports = self._require(module_id)
        function = _export_member(exports, function_name)
        if not callable(function):
            raise EntryPointError(module_id, function_name)
        LOGGER.debug("Running %s() from module '%s'", function_name, module_id)
        return function({} if args is _NO_ARGS else args)


def _export_member(exports: Any, name: str) -> Any:
    if isinstance(exports, Mapping):
        return exports.get(name)
    return getattr(exports, name, None)


__all__ = ["ModuleRunner", "DEFAULT_ENTRY_POINT"]
