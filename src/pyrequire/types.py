"""Core data structures shared by the locator, registry and engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any


@dataclass(frozen=True)
class ModuleResource:
    """Source text located for a module.

    ``id`` is the canonical id, which differs from the requested id when the
    directory ``main`` fallback applies.
    """

    id: str
    origin: str
    content: str

    def __str__(self) -> str:
        return f"{self.id}:[{self.origin}]"


@dataclass
class ModuleRecord:
    """Registry entry exposed to running module code as ``module``."""

    id: str
    origin: str
    exports: Any = field(default_factory=SimpleNamespace)


__all__ = ["ModuleResource", "ModuleRecord"]
