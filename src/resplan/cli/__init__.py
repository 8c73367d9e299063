"""CLI application for resplan."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from resplan import __version__

app = typer.Typer(
    name="resplan",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass(frozen=True)
class CliOptions:
    """Options given before the command name, shared by every command."""

    config: Path = Path("product.yaml")
    strict_upgrades: bool | None = None
    color: bool = True


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"resplan {__version__}")
        raise typer.Exit


_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _log_level(verbose: int, quiet: bool) -> int | None:
    """Level for the ``resplan`` logger, or ``None`` to leave logging alone.

    ``RESPLAN_LOG`` beats the flags. Left alone, resolver warnings still reach
    stderr through logging's last-resort handler.
    """
    env_level = os.environ.get("RESPLAN_LOG", "").upper()
    if env_level:
        if env_level not in _LEVELS:
            typer.echo(
                f"WARNING: invalid RESPLAN_LOG level '{env_level}', "
                f"expected one of {', '.join(_LEVELS)}; using WARNING",
                err=True,
            )
        return _LEVELS.get(env_level, logging.WARNING)
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return None


def _configure_logging(level: int | None) -> None:
    if level is None:
        return
    logging.basicConfig(format=_LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger("resplan").setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Path to the product file."),
    ] = Path("product.yaml"),
    strict_upgrades: Annotated[
        bool | None,
        typer.Option(
            "--strict-upgrades/--lenient-upgrades",
            help="Treat an empty state-upgrade range as an error (default from settings).",
        ),
    ] = None,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable colored output."),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)."
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log errors; hides state-upgrade warnings."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Compile declarative API resource descriptors into resolved CRUD plans."""
    _ = version
    if quiet and verbose:
        raise typer.BadParameter("--quiet cannot be combined with --verbose")
    _configure_logging(_log_level(verbose, quiet))
    ctx.obj = CliOptions(
        config=config,
        strict_upgrades=strict_upgrades,
        color=not (no_color or os.environ.get("NO_COLOR")),
    )


# Register commands after app is created to avoid circular imports.
from resplan.cli import commands as _commands  # noqa: E402, F401
