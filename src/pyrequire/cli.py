"""pyrequire command-line interface."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from . import __version__
from .config import Config, ConfigError, load_config
from .errors import RequireError
from .locator import create_locator
from .logging import configure_logging
from .resolver import resolve as resolve_id
from .runner import DEFAULT_ENTRY_POINT, ModuleRunner

app = typer.Typer(help="Load and run modules with relative require semantics.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None
    base: str | None = None


@app.callback()
def _pyrequire(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env PYREQUIRE_CONFIG or ~/.config/pyrequire/config.yaml).",
        ),
    ] = None,
    base: Annotated[
        str | None,
        typer.Option(
            "-b",
            "--base",
            help="Module base directory or URL (overrides the configured base).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved, base=base)


@app.command()
def run(
    ctx: typer.Context,
    module: Annotated[str, typer.Argument(..., help="Id of the entry module.")],
    function: Annotated[
        str,
        typer.Option("-f", "--function", help="Exported function to call."),
    ] = DEFAULT_ENTRY_POINT,
    args: Annotated[
        str | None,
        typer.Option("-a", "--args", help="JSON value passed as the function's argument."),
    ] = None,
) -> None:
    """Load MODULE and print the result of its exported function."""

    state = _state(ctx)
    config = _load_environment(state)
    payload = _parse_args(args)
    runner = _build_runner(config)

    try:
        result = runner.run_entry_point(module, function, payload)
    except RequireError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    typer.echo(_format_result(result))


@app.command()
def resolve(
    module: Annotated[str, typer.Argument(..., help="Requested module id.")],
    base_id: Annotated[str, typer.Argument(..., help="Id of the requesting module.")],
) -> None:
    """Print the id MODULE resolves to when requested from BASE_ID."""

    typer.echo(resolve_id(module, base_id))


@app.command()
def locate(
    ctx: typer.Context,
    module: Annotated[str, typer.Argument(..., help="Canonical module id.")],
) -> None:
    """Show where MODULE would be loaded from."""

    state = _state(ctx)
    config = _load_environment(state)
    try:
        resource = create_locator(config.base, config.extension).locate(module)
    except RequireError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    if resource is None:
        typer.secho(f"Module not found: {module}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    typer.echo(f"Id: {resource.id}")
    typer.echo(f"Origin: {resource.origin}")


@app.command()
def version() -> None:
    """Print the installed version."""

    typer.echo(__version__)


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging, config.root_dir)
    except ConfigError as exc:
        _config_failure(exc)
    if state.base:
        config = replace(config, base=state.base)
    return config


def _build_runner(config: Config) -> ModuleRunner:
    try:
        return ModuleRunner.from_config(config)
    except (ImportError, AttributeError, ValueError) as exc:
        _config_failure(ConfigError(f"Cannot set up module runner: {exc}"))
    except RequireError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc


def _parse_args(raw: str | None) -> Any:
    if raw is None:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        typer.secho(f"--args is not valid JSON: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(2) from exc


def _format_result(result: Any) -> str:
    try:
        return json.dumps(result)
    except (TypeError, ValueError):
        return str(result)


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


__all__ = ["app"]
