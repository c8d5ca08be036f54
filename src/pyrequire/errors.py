"""Exception hierarchy raised by the module runtime."""

from __future__ import annotations


class RequireError(RuntimeError):
    """Base class for failures raised by pyrequire itself."""


class ModuleNotFound(RequireError):
    """Raised when no resource exists for a requested module id."""

    def __init__(self, module_id: str) -> None:
        super().__init__(f"Module not found: {module_id}")
        self.module_id = module_id


class LocatorError(RequireError):
    """Raised when a module resource exists but cannot be read."""

    def __init__(
        self,
        message: str,
        *,
        module_id: str | None = None,
        location: str | None = None,
    ) -> None:
        super().__init__(message)
        self.module_id = module_id
        self.location = location


class MalformedIdentifier(LocatorError):
    """Raised when a module id cannot be turned into a valid location."""


class EntryPointError(RequireError):
    """Raised when a module does not export the requested entry function."""

    def __init__(self, module_id: str, function_name: str) -> None:
        super().__init__(f"Module '{module_id}' does not export a callable '{function_name}'.")
        self.module_id = module_id
        self.function_name = function_name


__all__ = [
    "RequireError",
    "ModuleNotFound",
    "LocatorError",
    "MalformedIdentifier",
    "EntryPointError",
]
