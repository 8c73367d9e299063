"""Declarative field markers for descriptor models.

Three markers attach to Pydantic fields via ``Annotated``:

- ``PolicyFlag``: boolean field merged into the resolved lifecycle policy
- ``Hook``: field names an externally-defined function (predicate, diff, transform)
- ``Derived``: optional field whose unset value is defaulted by a resolver

Helper functions introspect these markers at runtime so the resolvers never
hard-code field lists: the policy assembler collects flags and hook names, and
``materialize_defaults`` finds every field it has to fill in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias, TypeVar

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

M = TypeVar("M")
HookKind: TypeAlias = Literal[
    "retry_predicate",
    "abort_predicate",
    "custom_diff",
    "read_error_transform",
    "migrate_state",
]
DerivingResolver: TypeAlias = Literal["urls", "identity", "state"]


@dataclass(frozen=True, slots=True)
class HookRef:
    """Hook name extracted from a ``Hook``-annotated field."""

    name: str
    kind: HookKind


# ── Marker dataclasses ──────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PolicyFlag:
    """Boolean field that becomes a lifecycle policy flag.

    ``name`` overrides the flag key; ``None`` means "use the field name".
    """

    name: str | None = None


@dataclass(frozen=True, slots=True)
class Hook:
    """Field holds one or more names of functions owned by the runtime layer."""

    kind: HookKind


@dataclass(frozen=True, slots=True)
class Derived:
    """Optional field defaulted by the named resolver when left unset."""

    resolver: DerivingResolver


# ── Shared introspection primitives ─────────────────────────────────


def _find_marker(field_info: FieldInfo, marker_type: type[M]) -> M | None:
    """Return the first marker of *marker_type* on a field, or ``None``."""
    return next((m for m in field_info.metadata if isinstance(m, marker_type)), None)


def _iter_marked_fields(
    model_or_cls: Any,
    marker_type: type[M],
) -> list[tuple[str, FieldInfo, M]]:
    """Return ``(field_name, field_info, marker)`` for every field carrying *marker_type*."""
    cls = model_or_cls if isinstance(model_or_cls, type) else type(model_or_cls)
    return [
        (name, fi, marker)
        for name, fi in cls.model_fields.items()
        if (marker := _find_marker(fi, marker_type)) is not None
    ]


def _coerce_to_list(value: Any) -> list[str]:
    """Normalize a scalar, list, or ``None`` to a flat list of strings."""
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


# ── Public helpers ──────────────────────────────────────────────────


def collect_hook_refs(descriptor: Any) -> list[HookRef]:
    """Collect hook names from ``Hook``-annotated fields, in declaration order."""
    refs: list[HookRef] = []
    for name, _, marker in _iter_marked_fields(descriptor, Hook):
        refs.extend(
            HookRef(name=hook, kind=marker.kind)
            for hook in _coerce_to_list(getattr(descriptor, name))
        )
    return refs


def collect_policy_flags(descriptor: Any) -> dict[str, bool]:
    """Collect ``flag name → value`` from ``PolicyFlag`` markers, sorted by flag name."""
    flags = {
        marker.name or name: bool(getattr(descriptor, name))
        for name, _, marker in _iter_marked_fields(descriptor, PolicyFlag)
    }
    return dict(sorted(flags.items()))


def collect_derived_fields(descriptor_or_cls: Any) -> dict[str, DerivingResolver]:
    """Collect ``field name → resolver`` for every ``Derived`` field."""
    return {
        name: marker.resolver
        for name, _, marker in _iter_marked_fields(descriptor_or_cls, Derived)
    }
