"""Resolved plan output rendering (Terraform-style)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import typer

if TYPE_CHECKING:
    from collections.abc import Callable

    from resplan.resolver.types import BatchResult, OperationPolicy, ResolvedPlan, ResourceFailure


class _StatusStyle(NamedTuple):
    color: str
    symbol: str
    description: str


_STATUS_STYLES: dict[str, _StatusStyle] = {
    "resolved": _StatusStyle("green", "+", "resolved"),
    "failed": _StatusStyle("red", "!", "failed to resolve"),
    "skipped": _StatusStyle("bright_black", "-", "is excluded"),
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _align_values(items: dict[str, str]) -> list[tuple[str, str]]:
    """Right-pad keys so ``=`` signs align."""
    if not items:
        return []
    max_key = max(len(k) for k in items)
    return [(k.ljust(max_key), v) for k, v in items.items()]


def _format_value(value: Any) -> str:
    """Format a value for display in a plan block."""
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "null"
    if isinstance(value, list):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    return str(value)


def _format_operation(op: OperationPolicy) -> str:
    text = f"{op.verb} {_format_value(op.url)}"
    return text if op.active else f"{text} (inactive)"


# ---------------------------------------------------------------------------
# Plan rendering
# ---------------------------------------------------------------------------


def _plan_attrs(plan: ResolvedPlan) -> dict[str, str]:
    """Extract displayable ``key → formatted value`` pairs from a plan."""
    policy = plan.policy
    attrs = {
        "create": _format_operation(policy.create),
        "read": _format_operation(policy.read),
        "update": _format_operation(policy.update),
        "delete": _format_operation(policy.delete),
        "identity": _format_value(plan.identity.identity_fields),
        "id_format": _format_value(plan.identity.id_format.template),
        "import_format": _format_value([m.template for m in plan.identity.import_matchers]),
        "mutex": _format_value(plan.mutex.template if plan.mutex else None),
        "upgrades": _format_value(plan.state.upgrade_versions),
    }
    predicates = [h.name for h in (*policy.retry_predicates, *policy.abort_predicates)]
    if predicates:
        attrs["predicates"] = _format_value(predicates)
    enabled = [name for name, on in policy.flags.items() if on]
    if enabled:
        attrs["flags"] = _format_value(enabled)
    if plan.deprecation_message:
        attrs["deprecated"] = _format_value(plan.deprecation_message)
    return attrs


def format_plan(plan: ResolvedPlan, *, color: bool = True) -> str:
    """Render a single ResolvedPlan as a Terraform-style block."""
    style = styler(color)
    s = _STATUS_STYLES["resolved"]
    sc = {"fg": s.color}
    lines = [
        style(f"  # {plan.resource} {s.description}", bold=True, **sc),
        style(f'  {s.symbol} resource "{plan.resource}" {{', **sc),
        *[style(f"      {k} = {v}", **sc) for k, v in _align_values(_plan_attrs(plan))],
        style("    }", **sc),
    ]
    lines.extend(style(f"  warning: {w}", fg="yellow") for w in plan.warnings)
    return "\n".join(lines)


def format_failure(failure: ResourceFailure, *, color: bool = True) -> str:
    """Render a failed resource with one line per issue."""
    from resplan.resolver.errors import ResolutionError

    style = styler(color)
    s = _STATUS_STYLES["failed"]
    lines = [style(f"  # {failure.name} {s.description}", bold=True, fg=s.color)]
    if isinstance(failure.error, ResolutionError):
        lines.extend(style(f"    {s.symbol} {i}", fg=s.color) for i in failure.error.issues)
    else:
        lines.append(style(f"    {s.symbol} {failure.error}", fg=s.color))
    return "\n".join(lines)


def format_batch(result: BatchResult, *, color: bool = True) -> str:
    """Render every plan, failure and skipped resource of a batch."""
    style = styler(color)
    skipped = _STATUS_STYLES["skipped"]
    blocks = [format_plan(p, color=color) for p in result.plans]
    blocks.extend(format_failure(f, color=color) for f in result.failures)
    blocks.extend(
        style(f"  # {name} {skipped.description}", fg=skipped.color) for name in result.skipped
    )
    if not blocks:
        return "No resources declared."
    return "\n\n".join(blocks)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

_SUMMARY_KEYS = ("resolved", "failed", "skipped")


def format_batch_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Resolve: 2 resolved, 1 failed, 0 skipped.``"""
    style = styler(color)
    counts = [(key, summary.get(key, 0)) for key in _SUMMARY_KEYS]
    parts = [
        style(f"{n} {key}", fg=_STATUS_STYLES[key].color) if n and color else f"{n} {key}"
        for key, n in counts
    ]
    return f"Resolve: {', '.join(parts)}."
