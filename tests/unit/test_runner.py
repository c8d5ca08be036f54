from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from textwrap import dedent

import pytest

from pyrequire.config import Config
from pyrequire.errors import EntryPointError, ModuleNotFound
from pyrequire.runner import ModuleRunner


def _write_module(base: Path, module_id: str, body: str) -> None:
    path = base / f"{module_id}.py"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(body), encoding="utf-8")


def test_run_entry_point_calls_main_with_args(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "calc",
        """
        def main(args):
            return args['a'] + args['b']

        exports.main = main
        """,
    )
    runner = ModuleRunner(tmp_path)

    assert runner.run_entry_point("calc", args={"a": 2, "b": 3}) == 5


def test_run_entry_point_named_function_and_default_args(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "tools",
        """
        module.exports = {'describe': lambda args: sorted(args)}
        """,
    )
    runner = ModuleRunner(tmp_path)

    assert runner.run_entry_point("tools", "describe") == []


def test_missing_entry_function_raises(tmp_path: Path) -> None:
    _write_module(tmp_path, "lib", "exports.value = 1\n")
    runner = ModuleRunner(tmp_path)

    with pytest.raises(EntryPointError) as excinfo:
        runner.run_entry_point("lib")
    assert excinfo.value.function_name == "main"

    with pytest.raises(EntryPointError):
        runner.run_entry_point("lib", "value")


def test_missing_module_propagates(tmp_path: Path) -> None:
    runner = ModuleRunner(tmp_path)

    with pytest.raises(ModuleNotFound):
        runner.run_entry_point("ghost")


def test_modules_cached_across_entry_points(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "state",
        """
        exports.calls = 0

        def main(args):
            exports.calls += 1
            return exports.calls

        exports.main = main
        """,
    )
    runner = ModuleRunner(tmp_path)

    assert runner.run_entry_point("state") == 1
    assert runner.run_entry_point("state") == 2


def test_runners_are_isolated_sessions(tmp_path: Path) -> None:
    _write_module(tmp_path, "shared", "exports.items = []\n")
    first = ModuleRunner(tmp_path)
    second = ModuleRunner(tmp_path)

    first.require("shared").items.append("x")

    assert second.require("shared").items == []


def test_registered_modules_visible_after_construction(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "app",
        """
        exports.main = lambda args: require('greeting') + ', ' + args['name']
        """,
    )
    runner = ModuleRunner(tmp_path, {"unused": 1})
    runner.register_module("greeting", "hello")

    assert runner.run_entry_point("app", args={"name": "ada"}) == "hello, ada"


def test_register_module_type_imports_reference(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "ordered",
        """
        OrderedDict = require('collections:OrderedDict')
        exports.main = lambda args: OrderedDict(args)
        """,
    )
    runner = ModuleRunner(tmp_path)
    runner.register_module_type("collections:OrderedDict")

    result = runner.run_entry_point("ordered", args={"k": "v"})

    assert isinstance(result, OrderedDict)


def test_register_provider_built_lazily(tmp_path: Path) -> None:
    built: list[str] = []

    def factory() -> dict[str, str]:
        built.append("db")
        return {"kind": "db"}

    runner = ModuleRunner(tmp_path)
    runner.register_provider("db", factory)
    assert built == []

    assert runner.require("db") == {"kind": "db"}
    assert runner.require("db") is runner.require("db")
    assert built == ["db"]


def test_capabilities_and_sandbox(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "guarded",
        """
        def main(args):
            emit(args)
            return 'ok'

        exports.main = main
        """,
    )
    _write_module(tmp_path, "escape", "import os\n")
    events: list[object] = []
    runner = ModuleRunner(tmp_path, capabilities={"emit": events.append}, sandbox=True)

    assert runner.run_entry_point("guarded", args="ping") == "ok"
    assert events == ["ping"]
    with pytest.raises(ImportError):
        runner.require("escape")


def test_from_config(tmp_path: Path) -> None:
    _write_module(
        tmp_path,
        "app",
        """
        def main(args):
            return {
                'name': require('settings')['name'],
                'joined': join('a', 'b'),
                'counter': type(require('collections.Counter')()).__name__,
            }

        exports.main = main
        """,
    )
    config = Config(
        base=str(tmp_path),
        modules={"settings": {"name": "demo"}},
        module_types=["collections.Counter"],
        capabilities={"join": "posixpath:join"},
    )

    runner = ModuleRunner.from_config(config)

    assert runner.run_entry_point("app") == {
        "name": "demo",
        "joined": "a/b",
        "counter": "Counter",
    }


def test_run_entry_point_passes_none_through(tmp_path: Path) -> None:
    _write_module(tmp_path, "echo", "exports.main = lambda args: args\n")
    runner = ModuleRunner(tmp_path)

    assert runner.run_entry_point("echo", "main", None) is None
    assert runner.run_entry_point("echo") == {}


def test_directory_module_sees_canonical_id(tmp_path: Path) -> None:
    _write_module(tmp_path, "pkg/main", "exports.seen_id = module.id\n")
    runner = ModuleRunner(tmp_path)

    assert runner.require("pkg").seen_id == "pkg/main"
