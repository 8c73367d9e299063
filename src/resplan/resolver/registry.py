"""Hook registry: capability lookup for string-typed hook names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from resplan.resolver.errors import IssueKind, ResolutionIssue, UnknownHookError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from resplan.descriptor.markers import HookKind, HookRef

_KIND_FIELDS: dict[str, str] = {
    "retry_predicate": "error_retry_predicates",
    "abort_predicate": "error_abort_predicates",
    "custom_diff": "custom_diff",
    "read_error_transform": "read_error_transform",
    "migrate_state": "migrate_state",
}


@dataclass(frozen=True)
class HookRegistration:
    name: str
    kind: HookKind
    target: Any = None


class HookRegistry:
    """Registry mapping hook name -> (kind, runtime target).

    The resolver only checks that names exist with the right kind; targets
    belong to the emission/runtime layer and are never invoked here.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, HookRegistration] = {}

    @classmethod
    def from_names(cls, names: Mapping[HookKind, Iterable[str]]) -> HookRegistry:
        registry = cls()
        for kind, kind_names in names.items():
            for name in kind_names:
                registry.register(name, kind)
        return registry

    def register(self, name: str, kind: HookKind, target: Any = None) -> None:
        if not name:
            raise ValueError("Hook name must be non-empty")

        if name in self._registrations:
            raise ValueError(f"Hook already registered: {name}")

        self._registrations[name] = HookRegistration(name=name, kind=kind, target=target)

    def get(self, name: str) -> HookRegistration:
        try:
            return self._registrations[name]
        except KeyError as e:
            raise UnknownHookError(name) from e

    def __contains__(self, name: object) -> bool:
        return name in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)

    def check(self, refs: Iterable[HookRef], *, resolver: str = "policy") -> list[ResolutionIssue]:
        """Issues for refs that are unregistered or registered under another kind."""
        issues: list[ResolutionIssue] = []
        for ref in refs:
            reg = self._registrations.get(ref.name)
            if reg is None:
                msg = f"{ref.kind} '{ref.name}' is not registered"
            elif reg.kind != ref.kind:
                msg = f"'{ref.name}' is registered as {reg.kind}, not {ref.kind}"
            else:
                continue
            issues.append(
                ResolutionIssue(IssueKind.UNKNOWN_HOOK, resolver, _KIND_FIELDS[ref.kind], msg)
            )
        return issues
