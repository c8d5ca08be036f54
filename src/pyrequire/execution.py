"""Compile module source into callables and run them in isolated namespaces."""

from __future__ import annotations

import builtins as builtins_module
from collections.abc import Callable, Mapping
from types import CodeType
from typing import Any

from .types import ModuleRecord

# Builtins that let module code reach outside the bindings it was given.
ESCAPE_BUILTINS = frozenset(
    {
        "__import__",
        "open",
        "exec",
        "eval",
        "compile",
        "breakpoint",
        "input",
        "globals",
        "locals",
        "vars",
        "memoryview",
        "help",
        "exit",
        "quit",
    }
)


def restricted_builtins() -> dict[str, Any]:
    """Return the builtins allowlist used for sandboxed sessions."""
    return {
        name: value
        for name, value in vars(builtins_module).items()
        if (name not in ESCAPE_BUILTINS and not name.startswith("_")) or name == "__build_class__"
    }


class CompiledUnit:
    """A module body callable as ``(require, module, exports)``."""

    def __init__(self, code: CodeType, bindings: Mapping[str, Any]) -> None:
        self._code = code
        self._bindings = bindings

    @property
    def filename(self) -> str:
        return self._code.co_filename

    def invoke(self, require: Callable[[str], Any], module: ModuleRecord, exports: Any) -> None:
        namespace = dict(self._bindings)
        namespace.update(
            {
                "__name__": module.id,
                "require": require,
                "module": module,
                "exports": exports,
            }
        )
        exec(self._code, namespace)


class ExecutionContext:
    """Holds the ambient bindings every module namespace starts from.

    ``capabilities`` is the full set of extra names module code may see;
    ``builtins`` of ``None`` grants the interpreter builtins unchanged.
    """

    def __init__(
        self,
        capabilities: Mapping[str, Any] | None = None,
        builtins: Mapping[str, Any] | None = None,
    ) -> None:
        self._capabilities = dict(capabilities or {})
        self._builtins = dict(builtins) if builtins is not None else None

    @property
    def capabilities(self) -> dict[str, Any]:
        return dict(self._capabilities)

    @property
    def sandboxed(self) -> bool:
        return self._builtins is not None

    def compile(self, source: str, origin: str) -> CompiledUnit:
        code = compile(source, origin, "exec")
        bindings = dict(self._capabilities)
        bindings["__builtins__"] = (
            dict(self._builtins) if self._builtins is not None else builtins_module.__dict__
        )
        return CompiledUnit(code, bindings)


__all__ = ["ExecutionContext", "CompiledUnit", "restricted_builtins", "ESCAPE_BUILTINS"]
