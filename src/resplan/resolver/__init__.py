"""Resolution engine: descriptor -> resolved plan."""

from resplan.resolver.assembler import (
    PlanResolver,
    assemble_policy,
    check_policy,
    materialize_defaults,
    resolve,
)
from resplan.resolver.errors import (
    DuplicateResourceError,
    IssueKind,
    ResolutionError,
    ResolutionIssue,
    ResolverError,
    UnknownHookError,
)
from resplan.resolver.identity import compile_identity
from resplan.resolver.mutex import resolve_mutex_key
from resplan.resolver.registry import HookRegistry
from resplan.resolver.state_schema import resolve_state_schema
from resplan.resolver.types import BatchResult, ResolvedPlan
from resplan.resolver.urls import resolve_urls

__all__ = [
    "BatchResult",
    "DuplicateResourceError",
    "HookRegistry",
    "IssueKind",
    "PlanResolver",
    "ResolutionError",
    "ResolutionIssue",
    "ResolvedPlan",
    "ResolverError",
    "UnknownHookError",
    "assemble_policy",
    "check_policy",
    "compile_identity",
    "materialize_defaults",
    "resolve",
    "resolve_mutex_key",
    "resolve_state_schema",
    "resolve_urls",
]
