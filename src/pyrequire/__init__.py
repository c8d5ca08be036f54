"""Synchronous module loader with relative require semantics."""

from importlib import metadata

from .engine import ExecutionEngine, Require, RequireFactory
from .errors import (
    EntryPointError,
    LocatorError,
    MalformedIdentifier,
    ModuleNotFound,
    RequireError,
)
from .execution import CompiledUnit, ExecutionContext, restricted_builtins
from .locator import FileSystemLocator, RemoteLocator, create_locator
from .registry import ModuleRegistry
from .resolver import resolve
from .runner import ModuleRunner
from .types import ModuleRecord, ModuleResource


def _discover_version() -> str:
    """Return the installed package version, falling back to dev marker."""
    try:
        return metadata.version("pyrequire")
    except metadata.PackageNotFoundError:  # pragma: no cover - occurs in source checkouts
        return "0.0.0"


__version__ = _discover_version()

__all__ = [
    "__version__",
    "CompiledUnit",
    "EntryPointError",
    "ExecutionContext",
    "ExecutionEngine",
    "FileSystemLocator",
    "LocatorError",
    "MalformedIdentifier",
    "ModuleNotFound",
    "ModuleRecord",
    "ModuleRegistry",
    "ModuleResource",
    "ModuleRunner",
    "RemoteLocator",
    "Require",
    "RequireError",
    "RequireFactory",
    "create_locator",
    "resolve",
    "restricted_builtins",
]
