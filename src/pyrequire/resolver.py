"""Relative module id resolution.

Ids starting with ``./`` or ``../`` are resolved against the id of the
requesting module; every other id is top-level and passes through untouched.
Resolution is trailing-separator sensitive, the way relative paths behave on a
filesystem::

    base id                          | id                   | resolved
    ---------------------------------|----------------------|---------------------------
    /usr/share/                      | ./share.js           | /usr/share/share.js
    /usr/share/themes/               | ../themes.js         | /usr/share/themes.js
    /usr/share/themes                | ../themes.js         | /usr/themes.js
    /usr/share/themes/ambience.theme | ./ambience.js        | /usr/share/themes/ambience.js
    /usr/themes/ambience/metacity/   | ../../he/llo/../t.js | /usr/themes/t.js
"""

from __future__ import annotations

SEPARATOR = "/"
CURRENT = "."
PARENT = ".."


def is_relative(module_id: str) -> bool:
    """Return True when ``module_id`` is relative to the requesting module."""
    return module_id.startswith("./") or module_id.startswith("../")


def resolve(module_id: str, base_id: str) -> str:
    """Resolve ``module_id`` against ``base_id``."""

    if not is_relative(module_id):
        return module_id

    segments = base_id.split(SEPARATOR)
    cursor = len(segments) - 1

    for part in module_id.split(SEPARATOR):
        if part == CURRENT:
            del segments[cursor : cursor + 1]
            cursor = max(cursor - 1, 0)
        elif part == PARENT:
            cursor = max(cursor - 1, 0)
            del segments[cursor : cursor + 2]
        elif cursor < len(segments) and segments[cursor]:
            segments.append(part)
            cursor = len(segments) - 1
        elif cursor < len(segments):
            segments[cursor] = part
        else:
            # cursor sits past the end after a parent pop
            segments.append(part)
            cursor = len(segments) - 1

    return SEPARATOR.join(segments)


__all__ = ["resolve", "is_relative"]
