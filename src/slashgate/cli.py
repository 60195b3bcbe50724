from __future__ import annotations

import json
from pathlib import Path

import anyio
import typer

from . import __version__
from .config import ConfigError
from .logging import setup_logging
from .runtime import build_dispatcher, run_bot
from .settings import load_settings, require_token


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Run a module-driven Discord slash command bot.",
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Slashgate CLI."""


@app.command()
def run(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Path to the TOML config file (default: ~/.slashgate/slashgate.toml).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Log module loading, command sync and every dispatch decision.",
    ),
) -> None:
    """Connect, load modules, sync commands and serve interactions."""
    setup_logging(debug=debug)
    try:
        settings, resolved = load_settings(config_path)
        token = require_token(settings, resolved)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    dispatcher = build_dispatcher(settings, config_path=resolved, token=token)
    anyio.run(run_bot, dispatcher)


@app.command()
def schema(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Path to the TOML config file (default: ~/.slashgate/slashgate.toml).",
    ),
) -> None:
    """Load modules without connecting and print the command payload as JSON."""
    setup_logging(debug=False)
    try:
        settings, resolved = load_settings(config_path)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    async def _collect() -> list[dict]:
        dispatcher = build_dispatcher(settings, config_path=resolved, token="")
        dispatcher.load_modules()
        return dispatcher.registry.payload()

    payload = anyio.run(_collect)
    typer.echo(json.dumps(payload, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
