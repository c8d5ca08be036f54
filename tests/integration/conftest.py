from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: source}`` under ``root`` and return it."""

    for relative, body in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(dedent(body), encoding="utf-8")
    return root


@pytest.fixture()
def module_tree(tmp_path: Path):
    """Return a helper that materialises a module tree under a fresh directory."""

    def _build(files: dict[str, str]) -> Path:
        return write_tree(tmp_path / "modules", files)

    return _build


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)
