"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .locator import DEFAULT_EXTENSION

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PYREQUIRE_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/pyrequire/config.yaml")
DEFAULT_BASE = "."
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = frozenset({"debug", "info", "warning", "warn", "error", "critical"})


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    base: str = DEFAULT_BASE
    extension: str = DEFAULT_EXTENSION
    sandbox: bool = False
    modules: dict[str, Any] = field(default_factory=dict)
    module_types: list[str] = field(default_factory=list)
    capabilities: dict[str, str] = field(default_factory=dict)
    root_dir: Path | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicitly requested file (argument or environment) must exist; when
    only the default location is consulted and nothing is there, defaults
    are returned.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config file at %s, using defaults.", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw, config_path.parent)


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any], config_dir: Path) -> Config:
    root_dir = raw.get("rootdir") or raw.get("root_dir")
    return Config(
        base=_parse_base(raw.get("base"), config_dir),
        extension=_parse_extension(raw.get("extension")),
        sandbox=_parse_bool(raw.get("sandbox"), "sandbox"),
        modules=_parse_modules(raw.get("modules")),
        module_types=_parse_module_types(raw.get("module_types")),
        capabilities=_parse_capabilities(raw.get("capabilities")),
        root_dir=Path(str(root_dir)).expanduser() if root_dir else None,
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_base(value: Any, config_dir: Path) -> str:
    if value is None:
        return DEFAULT_BASE
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("base must be a non-empty string path or URL.")
    text = value.strip()
    if "://" in text:
        return text
    # relative directories are anchored at the config file
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = config_dir / path
    return str(path)


def _parse_extension(value: Any) -> str:
    if value is None:
        return DEFAULT_EXTENSION
    if not isinstance(value, str) or not value.startswith(".") or len(value) < 2:
        raise ConfigError("extension must be a string such as '.py'.")
    return value


def _parse_bool(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{field_name} must be true or false.")
    return value


def _parse_modules(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("modules must be a mapping of module id to value.")
    return {str(name): module for name, module in value.items()}


def _parse_module_types(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("module_types must be a list.")

    references: list[str] = []
    for idx, entry in enumerate(value, start=1):
        if not isinstance(entry, str) or not entry.strip():
            raise ConfigError(f"module_types[{idx}] must be an import reference string.")
        references.append(entry.strip())
    return references


def _parse_capabilities(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("capabilities must be a mapping of name to import reference.")

    capabilities: dict[str, str] = {}
    for name, reference in value.items():
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigError(f"Capability name '{name}' must be a valid identifier.")
        if not isinstance(reference, str) or not reference.strip():
            raise ConfigError(f"Capability '{name}' must map to an import reference string.")
        capabilities[name] = reference.strip()
    return capabilities


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {level}")
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = ["Config", "LoggingConfig", "ConfigError", "load_config", "CONFIG_ENV_VAR"]
