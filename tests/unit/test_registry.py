from __future__ import annotations

from types import SimpleNamespace

from pyrequire.registry import ModuleRegistry


def test_create_inserts_record_with_empty_exports() -> None:
    registry = ModuleRegistry()

    record = registry.create("app", "/modules/app.py")

    assert registry.get("app") is record
    assert record.id == "app"
    assert record.origin == "/modules/app.py"
    assert isinstance(record.exports, SimpleNamespace)
    assert vars(record.exports) == {}


def test_create_overwrites_existing_record() -> None:
    registry = ModuleRegistry()
    first = registry.create("app", "one")

    second = registry.create("app", "two")

    assert second is not first
    assert registry.get("app") is second
    assert len(registry) == 1


def test_remove_is_noop_when_absent() -> None:
    registry = ModuleRegistry()
    registry.create("app", "origin")

    registry.remove("app")
    registry.remove("app")

    assert registry.get("app") is None
    assert "app" not in registry


def test_preregistered_values_materialise_once() -> None:
    settings = {"debug": True}
    registry = ModuleRegistry({"settings": settings})

    assert "settings" not in registry
    record = registry.get("settings")

    assert record is not None
    assert record.exports is settings
    assert record.origin == "settings"
    assert registry.get("settings") is record
    assert registry.ids() == ["settings"]


def test_preregistered_mapping_is_shared_by_reference() -> None:
    modules: dict[str, object] = {}
    registry = ModuleRegistry(modules)
    assert registry.get("late") is None

    modules["late"] = "value"

    record = registry.get("late")
    assert record is not None
    assert record.exports == "value"


def test_providers_called_at_most_once() -> None:
    calls: list[str] = []

    def factory() -> object:
        calls.append("built")
        return object()

    registry = ModuleRegistry(providers={"native": factory})

    first = registry.get("native")
    second = registry.get("native")

    assert first is second
    assert calls == ["built"]


def test_loaded_record_shadows_preregistered_value() -> None:
    registry = ModuleRegistry({"app": "host"})
    record = registry.create("app", "/modules/app.py")

    assert registry.get("app") is record


def test_create_with_canonical_id_keeps_requested_key() -> None:
    registry = ModuleRegistry()

    record = registry.create("pkg", "/modules/pkg/main.py", "pkg/main")

    assert record.id == "pkg/main"
    assert registry.get("pkg") is record
    assert registry.get("pkg/main") is None
