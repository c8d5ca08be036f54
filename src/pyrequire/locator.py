"""Locate module source on a filesystem or behind a base URL."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname, urlopen

from .errors import LocatorError, MalformedIdentifier
from .types import ModuleResource

LOGGER = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".py"
MAIN_MODULE = "main"
REMOTE_SCHEMES = frozenset({"http", "https", "ftp"})
_ABSENT_HTTP_STATUS = frozenset({404, 410})


class ResourceLocator(Protocol):
    """Anything able to turn a canonical module id into source text."""

    def locate(self, module_id: str) -> ModuleResource | None: ...


class FileSystemLocator:
    """Find ``<id><ext>`` or ``<id>/main<ext>`` under a base directory."""

    def __init__(self, base_dir: Path | str, extension: str = DEFAULT_EXTENSION) -> None:
        self._base_dir = Path(base_dir).expanduser()
        self._extension = extension

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def locate(self, module_id: str) -> ModuleResource | None:
        relative = module_id.lstrip("/")
        canonical_id = module_id
        target = self._base_dir / f"{relative}{self._extension}"
        LOGGER.debug("Trying module file %s", target)
        if not target.is_file():
            package_dir = self._base_dir / relative
            target = package_dir / f"{MAIN_MODULE}{self._extension}"
            LOGGER.debug("Trying package entry %s", target)
            if not (package_dir.is_dir() and target.is_file()):
                return None
            canonical_id = f"{module_id}/{MAIN_MODULE}"

        try:
            content = target.read_bytes().decode("utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise LocatorError(
                f"Error loading module '{module_id}' from {target}: {exc}",
                module_id=module_id,
                location=str(target),
            ) from exc
        return ModuleResource(id=canonical_id, origin=str(target), content=content)


class RemoteLocator:
    """Fetch ``<id><ext>`` relative to a base URL."""

    def __init__(self, base_url: str, extension: str = DEFAULT_EXTENSION) -> None:
        self._base_url = base_url
        self._extension = extension

    @property
    def base_url(self) -> str:
        return self._base_url

    def locate(self, module_id: str) -> ModuleResource | None:
        url = self._module_url(module_id)
        LOGGER.debug("Loading module from remote URL %s", url)
        try:
            with urlopen(url) as response:  # noqa: S310 - scheme validated in _module_url
                payload = response.read()
        except HTTPError as exc:
            if exc.code in _ABSENT_HTTP_STATUS:
                LOGGER.warning("Module not found: %s", url)
                return None
            raise LocatorError(
                f"Error loading remote module '{module_id}': HTTP {exc.code}",
                module_id=module_id,
                location=url,
            ) from exc
        except URLError as exc:
            if isinstance(exc.reason, FileNotFoundError):
                LOGGER.warning("Module not found: %s", url)
                return None
            raise LocatorError(
                f"Error loading remote module '{module_id}': {exc.reason}",
                module_id=module_id,
                location=url,
            ) from exc
        except ValueError as exc:
            raise MalformedIdentifier(
                f"Invalid module id '{module_id}': {exc}",
                module_id=module_id,
                location=url,
            ) from exc
        except OSError as exc:
            raise LocatorError(
                f"Error loading remote module '{module_id}': {exc}",
                module_id=module_id,
                location=url,
            ) from exc

        try:
            content = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise LocatorError(
                f"Module '{module_id}' at {url} is not valid UTF-8",
                module_id=module_id,
                location=url,
            ) from exc
        return ModuleResource(id=module_id, origin=url, content=content)

    def _module_url(self, module_id: str) -> str:
        url = urljoin(self._base_url, f"{module_id}{self._extension}")
        scheme = urlparse(url).scheme.lower()
        if scheme not in REMOTE_SCHEMES:
            raise MalformedIdentifier(
                f"Invalid module id '{module_id}': unsupported location {url}",
                module_id=module_id,
                location=url,
            )
        return url


def create_locator(base: Path | str, extension: str = DEFAULT_EXTENSION) -> ResourceLocator:
    """Pick the locator matching the shape of ``base``."""

    if isinstance(base, Path):
        return FileSystemLocator(base, extension)

    parsed = urlparse(base)
    scheme = parsed.scheme.lower()
    if scheme == "file":
        return FileSystemLocator(Path(url2pathname(parsed.path)), extension)
    if scheme in REMOTE_SCHEMES:
        return RemoteLocator(base, extension)
    if scheme and len(scheme) > 1:
        raise MalformedIdentifier(f"Unsupported module base location: {base}", location=base)
    # plain paths, including Windows drive letters
    return FileSystemLocator(Path(base), extension)


__all__ = [
    "ResourceLocator",
    "FileSystemLocator",
    "RemoteLocator",
    "create_locator",
    "DEFAULT_EXTENSION",
]
