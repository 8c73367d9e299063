"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from resplan.config.loader import ConfigError
    from resplan.resolver.errors import DuplicateResourceError, ResolutionError

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, ResolutionError):
        _err(f"Resolution of {exc.resource or 'resource'} failed:", fg=fg)
        for issue in exc.issues:
            _err(f"  - {issue}", fg=fg)
    elif isinstance(exc, DuplicateResourceError):
        _err(f"Duplicate resource: {exc.name}", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
