"""Lifecycle policy assembly and whole-descriptor resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from resplan.descriptor import ResourceDescriptor
from resplan.descriptor.markers import (
    collect_derived_fields,
    collect_hook_refs,
    collect_policy_flags,
)
from resplan.resolver.errors import (
    DuplicateResourceError,
    IssueKind,
    ResolutionError,
    ResolutionIssue,
)
from resplan.resolver.identity import compile_identity, identity_fields
from resplan.resolver.mutex import resolve_mutex_key
from resplan.resolver.state_schema import resolve_state_schema
from resplan.resolver.types import (
    BatchResult,
    LifecyclePolicy,
    OperationPolicy,
    ResolvedPlan,
    ResourceFailure,
)
from resplan.resolver.urls import resolve_urls

if TYPE_CHECKING:
    from collections.abc import Iterable

    from resplan.descriptor.markers import HookKind, HookRef
    from resplan.resolver.registry import HookRegistry
    from resplan.resolver.types import ResolvedUrls

logger = logging.getLogger(__name__)

RESOLVER = "policy"

T = TypeVar("T")

# Derived descriptor field -> value taken from a resolved plan.
_DERIVED_VALUES: dict[str, Callable[[ResolvedPlan], Any]] = {
    "self_link": lambda p: p.urls.self_link,
    "create_url": lambda p: p.urls.create_url,
    "update_url": lambda p: p.urls.update_url,
    "delete_url": lambda p: p.urls.delete_url,
    "collection_url_key": lambda p: p.urls.collection_url_key,
    "identity": lambda p: list(p.identity.identity_fields),
    "id_format": lambda p: p.identity.id_format.template,
    "import_format": lambda p: [m.template for m in p.identity.import_matchers],
    "state_upgrade_base_schema_version": lambda p: p.state.base_version,
}


def check_policy(
    descriptor: ResourceDescriptor, hooks: HookRegistry | None = None
) -> list[ResolutionIssue]:
    """Cross-flag checks and, when *hooks* is given, hook-name lookups."""
    issues: list[ResolutionIssue] = []
    if descriptor.exclude_resource and descriptor.iam_policy is None:
        issues.append(
            ResolutionIssue(
                IssueKind.CONFLICTING_OVERRIDE,
                RESOLVER,
                "exclude_resource",
                "exclude_resource requires an iam_policy; nothing would be generated",
            )
        )
    if hooks is not None:
        issues.extend(hooks.check(collect_hook_refs(descriptor), resolver=RESOLVER))
    return issues


def assemble_policy(descriptor: ResourceDescriptor, urls: ResolvedUrls) -> LifecyclePolicy:
    """Merge operation flags, URLs and hook names into one CRUD policy.

    Skipped or immutable operations keep their URLs but are marked inactive;
    readonly resources only keep ``read`` active.
    """
    writable = not descriptor.readonly
    hooks = collect_hook_refs(descriptor)

    def _of(kind: HookKind) -> list[HookRef]:
        return [h for h in hooks if h.kind == kind]

    transforms = _of("read_error_transform")
    return LifecyclePolicy(
        create=OperationPolicy(url=urls.create_url, verb=urls.create_verb, active=writable),
        read=OperationPolicy(
            url=urls.self_link,
            verb=urls.read_verb,
            active=not descriptor.skip_read,
        ),
        update=OperationPolicy(
            url=urls.update_url,
            verb=urls.update_verb,
            active=writable and not descriptor.immutable,
        ),
        delete=OperationPolicy(
            url=urls.delete_url,
            verb=urls.delete_verb,
            active=writable and not descriptor.skip_delete,
        ),
        flags=collect_policy_flags(descriptor),
        retry_predicates=_of("retry_predicate"),
        abort_predicates=_of("abort_predicate"),
        custom_diff=_of("custom_diff"),
        read_error_transform=transforms[0] if transforms else None,
        timeouts=descriptor.timeouts,
        nested_query=descriptor.nested_query,
        virtual_fields=list(descriptor.virtual_fields),
    )


class PlanResolver:
    """Resolve descriptors into immutable plans.

    Each sub-resolver runs to completion; their issues are concatenated and
    raised as a single ``ResolutionError``. No partial plan is ever returned.
    """

    def __init__(
        self,
        *,
        strict_state_upgrades: bool = False,
        hooks: HookRegistry | None = None,
    ) -> None:
        self._strict_state_upgrades = strict_state_upgrades
        self._hooks = hooks

    @staticmethod
    def _run(
        issues: list[ResolutionIssue], fn: Callable[..., T], *args: Any, **kwargs: Any
    ) -> T | None:
        try:
            return fn(*args, **kwargs)
        except ResolutionError as exc:
            issues.extend(exc.issues)
            return None

    def resolve(self, descriptor: ResourceDescriptor | Mapping[str, Any]) -> ResolvedPlan:
        """Resolve one descriptor.

        Raises:
            ResolutionError: With every issue from every sub-resolver.
        """
        if not isinstance(descriptor, ResourceDescriptor):
            descriptor = ResourceDescriptor.model_validate(descriptor)

        issues: list[ResolutionIssue] = []
        warnings: list[str] = []

        urls = self._run(issues, resolve_urls, descriptor)
        identity = self._run(issues, compile_identity, descriptor)
        fields, _ = identity_fields(descriptor)
        mutex = self._run(issues, resolve_mutex_key, descriptor, fields)
        state = self._run(
            issues,
            resolve_state_schema,
            descriptor,
            strict=self._strict_state_upgrades,
            warnings=warnings,
        )
        issues.extend(check_policy(descriptor, self._hooks))

        if issues or urls is None or identity is None or state is None:
            raise ResolutionError(issues, resource=descriptor.name)

        plan = ResolvedPlan(
            resource=descriptor.name,
            min_version=descriptor.min_version,
            kind=descriptor.kind,
            legacy_name=descriptor.legacy_name,
            deprecation_message=descriptor.deprecation_message,
            urls=urls,
            identity=identity,
            mutex=mutex,
            state=state,
            policy=assemble_policy(descriptor, urls),
            warnings=warnings,
        )
        logger.debug(
            "Resolved %s: active=%s, %d upgrade step(s)",
            descriptor.name,
            plan.policy.active_operations(),
            len(plan.state.upgrade_versions),
        )
        return plan

    def resolve_all(self, descriptors: Iterable[ResourceDescriptor]) -> BatchResult:
        """Resolve many descriptors, isolating failures per resource.

        Excluded descriptors are skipped. A name seen twice fails the later
        descriptor with ``DuplicateResourceError``.
        """
        result = BatchResult()
        seen: set[str] = set()
        for descriptor in descriptors:
            if descriptor.exclude:
                logger.debug("Skipping excluded resource %s", descriptor.name)
                result.skipped.append(descriptor.name)
                continue
            if descriptor.name in seen:
                result.failures.append(
                    ResourceFailure(descriptor.name, DuplicateResourceError(descriptor.name))
                )
                continue
            seen.add(descriptor.name)
            try:
                result.plans.append(self.resolve(descriptor))
            except ResolutionError as exc:
                logger.debug(
                    "Resolution of %s failed with %d issue(s)", descriptor.name, len(exc.issues)
                )
                result.failures.append(ResourceFailure(descriptor.name, exc))

        logger.info(
            "Resolved %d resource(s): %d failed, %d skipped",
            len(result.plans),
            len(result.failures),
            len(result.skipped),
        )
        return result


def resolve(
    descriptor: ResourceDescriptor | Mapping[str, Any],
    *,
    strict_state_upgrades: bool = False,
    hooks: HookRegistry | None = None,
) -> ResolvedPlan:
    """Resolve a single descriptor with a throwaway ``PlanResolver``."""
    return PlanResolver(strict_state_upgrades=strict_state_upgrades, hooks=hooks).resolve(
        descriptor
    )


def materialize_defaults(
    descriptor: ResourceDescriptor, plan: ResolvedPlan | None = None
) -> ResourceDescriptor:
    """Return a copy of *descriptor* with every derived default written out.

    Resolving the result reproduces the same plan.
    """
    if plan is None:
        plan = resolve(descriptor)
    updates = {
        field: _DERIVED_VALUES[field](plan) for field in collect_derived_fields(descriptor)
    }
    return ResourceDescriptor.model_validate({**descriptor.model_dump(), **updates})
