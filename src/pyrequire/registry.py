"""Per-session cache of loaded module records."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .types import ModuleRecord

LOGGER = logging.getLogger(__name__)

ModuleProvider = Callable[[], Any]


class ModuleRegistry:
    """Map module ids to records, falling back to host-provided modules.

    Records are created before a module's code runs, so a module requested
    again while it is still executing gets its in-progress record back. That is
    what terminates circular requires.
    """

    def __init__(
        self,
        preregistered: Mapping[str, Any] | None = None,
        providers: Mapping[str, ModuleProvider] | None = None,
    ) -> None:
        self._records: dict[str, ModuleRecord] = {}
        self._preregistered = preregistered if preregistered is not None else {}
        self._providers = providers if providers is not None else {}

    def get(self, module_id: str) -> ModuleRecord | None:
        """Return the record for ``module_id``, materialising host modules."""

        record = self._records.get(module_id)
        if record is not None:
            return record
        if module_id in self._preregistered:
            return self._register_host_value(module_id, self._preregistered[module_id])
        provider = self._providers.get(module_id)
        if provider is not None:
            return self._register_host_value(module_id, provider())
        return None

    def create(
        self,
        module_id: str,
        origin: str,
        canonical_id: str | None = None,
    ) -> ModuleRecord:
        """Insert a fresh record with empty exports, replacing any existing one.

        The record is stored under ``module_id``; its ``id`` is ``canonical_id``
        when given, so code loaded through a directory entry sees e.g. ``pkg/main``.
        """

        record = ModuleRecord(id=canonical_id or module_id, origin=origin)
        self._records[module_id] = record
        return record

    def remove(self, module_id: str) -> None:
        self._records.pop(module_id, None)

    def ids(self) -> list[str]:
        return list(self._records)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def _register_host_value(self, module_id: str, value: Any) -> ModuleRecord:
        LOGGER.debug("Registering host module '%s'", module_id)
        record = ModuleRecord(id=module_id, origin=module_id, exports=value)
        self._records[module_id] = record
        return record


__all__ = ["ModuleRegistry", "ModuleProvider"]
