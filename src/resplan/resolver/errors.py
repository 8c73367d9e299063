"""Resolver error types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class IssueKind(str, Enum):
    UNRESOLVABLE_URL = "unresolvable-url"
    UNKNOWN_IDENTITY_TOKEN = "unknown-identity-token"
    INVALID_STATE_VERSION_RANGE = "invalid-state-version-range"
    CONFLICTING_OVERRIDE = "conflicting-override"
    MALFORMED_TEMPLATE = "malformed-template"
    UNKNOWN_HOOK = "unknown-hook"


@dataclass(frozen=True, slots=True)
class ResolutionIssue:
    """One semantic violation found while resolving a descriptor."""

    kind: IssueKind
    resolver: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.resolver}] {self.field}: {self.message} ({self.kind.value})"


class ResolverError(Exception):
    """Base exception for resolver errors."""


class ResolutionError(ResolverError):
    """A descriptor failed resolution.

    Carries every issue found, not just the first, so a configuration author
    can fix them all in one pass.
    """

    def __init__(self, issues: Iterable[ResolutionIssue], *, resource: str | None = None) -> None:
        self.issues = list(issues)
        self.resource = resource
        header = f"Resolution of {resource} failed" if resource else "Resolution failed"
        msg = header + ":\n" + "\n".join(f"  - {i}" for i in self.issues)
        super().__init__(msg)

    def kinds(self) -> set[IssueKind]:
        return {i.kind for i in self.issues}


class DuplicateResourceError(ResolverError):
    """Raised when multiple descriptors in one batch share the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate resource name: {name}")
        self.name = name


class UnknownHookError(ResolverError):
    """Raised when looking up a hook name that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown hook: {name}")
        self.name = name
