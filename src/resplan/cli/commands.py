"""CLI command implementations."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated

import typer

from resplan.cli import CliOptions, app
from resplan.cli.errors import handle_error

if TYPE_CHECKING:
    from resplan.resolver.types import BatchResult


def _options(ctx: typer.Context) -> CliOptions:
    return ctx.ensure_object(CliOptions)


def _resolve_batch(opts: CliOptions) -> BatchResult:
    from resplan.config import load
    from resplan.config import resolve as resolve_fn

    try:
        cfg = load(opts.config)
        return resolve_fn(cfg, strict_state_upgrades=opts.strict_upgrades)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=opts.color)) from exc


@app.command(name="resolve")
def resolve_cmd(
    ctx: typer.Context,
    resource: Annotated[
        str | None,
        typer.Option("--resource", "-r", help="Resolve only this resource."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print resolved plans as JSON."),
    ] = False,
) -> None:
    """Resolve resource descriptors into CRUD plans."""
    from resplan.cli.formatting import format_batch, format_batch_summary, format_plan
    from resplan.config import load, resolve_one

    opts = _options(ctx)
    color = opts.color

    if resource is not None:
        try:
            cfg = load(opts.config)
            plan_obj = resolve_one(cfg, resource, strict_state_upgrades=opts.strict_upgrades)
        except Exception as exc:
            raise typer.Exit(handle_error(exc, color=color)) from exc
        if as_json:
            typer.echo(plan_obj.model_dump_json(indent=2))
        else:
            typer.echo(format_plan(plan_obj, color=color))
        return

    result = _resolve_batch(opts)

    if as_json:
        payload = [p.model_dump(mode="json") for p in result.plans]
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        typer.echo(format_batch(result, color=color))
        typer.echo()
        typer.echo(format_batch_summary(result.summary(), color=color))

    if not result.ok:
        if as_json:
            for failure in result.failures:
                handle_error(failure.error, color=color)
        raise typer.Exit(1)


@app.command()
def validate(ctx: typer.Context) -> None:
    """Validate every resource descriptor in the product file."""
    from resplan.cli.formatting import format_failure, styler

    opts = _options(ctx)
    result = _resolve_batch(opts)

    if not result.ok:
        for failure in result.failures:
            typer.echo(format_failure(failure, color=opts.color), err=True)
        raise typer.Exit(1)

    typer.echo(styler(opts.color)("Configuration is valid.", fg="green"))


@app.command()
def status(ctx: typer.Context) -> None:
    """Show a one-line-per-resource summary table."""
    from rich.console import Console
    from rich.table import Table

    opts = _options(ctx)
    result = _resolve_batch(opts)

    table = Table(title="Resources")
    table.add_column("Resource")
    table.add_column("Status")
    table.add_column("Self link")
    table.add_column("Mutex")
    table.add_column("Upgrades", justify="right")

    for p in result.plans:
        table.add_row(
            p.resource,
            "[green]resolved[/green]",
            p.urls.self_link,
            p.mutex.template if p.mutex else "-",
            str(len(p.state.upgrade_versions)),
        )
    for f in result.failures:
        table.add_row(f.name, "[red]failed[/red]", "-", "-", "-")
    for name in result.skipped:
        table.add_row(name, "[bright_black]skipped[/bright_black]", "-", "-", "-")

    Console(no_color=not opts.color, highlight=False).print(table)

    if not result.ok:
        raise typer.Exit(1)


@app.command()
def match(
    ctx: typer.Context,
    resource: Annotated[str, typer.Argument(help="Resource name.")],
    import_id: Annotated[str, typer.Argument(help="Import id to match.")],
) -> None:
    """Show which import format of RESOURCE matches IMPORT_ID."""
    from resplan.cli.formatting import styler
    from resplan.config import load, resolve_one

    opts = _options(ctx)
    color = opts.color
    try:
        cfg = load(opts.config)
        plan_obj = resolve_one(cfg, resource, strict_state_upgrades=opts.strict_upgrades)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    style = styler(color)
    for matcher in plan_obj.identity.import_matchers:
        values = matcher.match(import_id)
        if values is None:
            continue
        typer.echo(style(f"Matched {matcher.template}", fg="green"))
        for token, value in values.items():
            typer.echo(f"  {token} = {value}")
        return

    typer.echo(style(f"No import format of {resource} matches '{import_id}'.", fg="red"), err=True)
    raise typer.Exit(1)
