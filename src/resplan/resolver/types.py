"""Resolver output types (resolved plan and its parts)."""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from resplan.descriptor.fields import NestedQuery, Timeouts, VirtualField  # noqa: TC001
from resplan.descriptor.markers import HookRef  # noqa: TC001

if TYPE_CHECKING:
    from resplan.resolver.errors import ResolverError

SegmentKind = Literal["literal", "token", "greedy"]


def _canonical_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)


class _Resolved(BaseModel):
    model_config = ConfigDict(frozen=True)


class Segment(_Resolved):
    kind: SegmentKind
    value: str


class CompiledTemplate(_Resolved):
    """A ``{{token}}`` template split into literal and token segments."""

    template: str
    segments: list[Segment] = Field(default_factory=list)

    @property
    def tokens(self) -> list[str]:
        return [s.value for s in self.segments if s.kind != "literal"]


class ImportMatcher(CompiledTemplate):
    """Compiled import format, tried in declared order by the import resolver."""

    pattern: str

    def match(self, import_id: str) -> dict[str, str] | None:
        """Return ``token → value`` when *import_id* matches, else ``None``."""
        m = re.fullmatch(self.pattern, import_id)
        return m.groupdict() if m else None


class ResolvedUrls(_Resolved):
    self_link: str
    create_url: str
    update_url: str
    delete_url: str
    read_query_params: str
    collection_url_key: str
    create_verb: str
    read_verb: str
    update_verb: str
    delete_verb: str
    cai_base_url: str | None = None


class IdentityResolution(_Resolved):
    identity_fields: list[str]
    id_format: CompiledTemplate
    import_matchers: list[ImportMatcher] = Field(default_factory=list)


class MutexGuard(_Resolved):
    template: str
    tokens: list[str]


class StateUpgradeRange(_Resolved):
    schema_version: int
    base_version: int
    enabled: bool
    upgrade_versions: list[int] = Field(default_factory=list)
    migrate_state: HookRef | None = None


class OperationPolicy(_Resolved):
    url: str
    verb: str
    active: bool = True


class LifecyclePolicy(_Resolved):
    create: OperationPolicy
    read: OperationPolicy
    update: OperationPolicy
    delete: OperationPolicy
    flags: dict[str, bool]
    retry_predicates: list[HookRef] = Field(default_factory=list)
    abort_predicates: list[HookRef] = Field(default_factory=list)
    custom_diff: list[HookRef] = Field(default_factory=list)
    read_error_transform: HookRef | None = None
    timeouts: Timeouts
    nested_query: NestedQuery | None = None
    virtual_fields: list[VirtualField] = Field(default_factory=list)

    def active_operations(self) -> list[str]:
        ops = (
            ("create", self.create),
            ("read", self.read),
            ("update", self.update),
            ("delete", self.delete),
        )
        return [name for name, op in ops if op.active]


class ResolvedPlan(_Resolved):
    """Fully-defaulted, validated plan for one resource, ready for emission."""

    resource: str
    min_version: str
    kind: str = ""
    legacy_name: str = ""
    deprecation_message: str = ""
    urls: ResolvedUrls
    identity: IdentityResolution
    mutex: MutexGuard | None = None
    state: StateUpgradeRange
    policy: LifecyclePolicy
    warnings: list[str] = Field(default_factory=list)

    def digest(self) -> str:
        """Stable sha256 of the plan's canonical JSON encoding."""
        payload = _canonical_json(self.model_dump(mode="json"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ResourceFailure:
    """A descriptor that failed resolution inside a batch."""

    name: str
    error: ResolverError


@dataclass
class BatchResult:
    plans: list[ResolvedPlan] = field(default_factory=list)
    failures: list[ResourceFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> dict[str, int]:
        return {
            "resolved": len(self.plans),
            "failed": len(self.failures),
            "skipped": len(self.skipped),
        }
