"""State schema version tracking and upgrade-step derivation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from resplan.descriptor.markers import HookRef
from resplan.resolver.errors import IssueKind, ResolutionError, ResolutionIssue
from resplan.resolver.types import StateUpgradeRange

if TYPE_CHECKING:
    from resplan.descriptor import ResourceDescriptor

logger = logging.getLogger(__name__)

RESOLVER = "state_schema"


def resolve_state_schema(
    descriptor: ResourceDescriptor,
    *,
    strict: bool = False,
    warnings: list[str] | None = None,
) -> StateUpgradeRange:
    """Derive which schema versions need generated upgrade steps.

    Upgrade steps cover ``base+1 .. schema_version``. Disabling
    ``state_upgraders`` always yields no steps. An enabled but empty range
    is appended to *warnings*, or raised when *strict* is set.

    Raises:
        ResolutionError: On an inverted version range or conflicting settings.
    """
    base = descriptor.state_upgrade_base_schema_version
    version = descriptor.schema_version
    issues: list[ResolutionIssue] = []

    if version < base:
        issues.append(
            ResolutionIssue(
                IssueKind.INVALID_STATE_VERSION_RANGE,
                RESOLVER,
                "state_upgrade_base_schema_version",
                f"base version {base} exceeds schema_version {version}",
            )
        )
    if descriptor.state_upgraders and descriptor.migrate_state is not None:
        issues.append(
            ResolutionIssue(
                IssueKind.CONFLICTING_OVERRIDE,
                RESOLVER,
                "migrate_state",
                "migrate_state cannot be combined with state_upgraders",
            )
        )

    upgrade_versions: list[int] = []
    if descriptor.state_upgraders and version >= base:
        upgrade_versions = list(range(base + 1, version + 1))
        if not upgrade_versions:
            msg = (
                f"state_upgraders is enabled but schema_version {version} leaves "
                f"no upgrade steps above base version {base}"
            )
            if strict:
                issues.append(
                    ResolutionIssue(
                        IssueKind.INVALID_STATE_VERSION_RANGE, RESOLVER, "schema_version", msg
                    )
                )
            else:
                logger.warning("%s: %s", descriptor.name, msg)
                if warnings is not None:
                    warnings.append(msg)

    if issues:
        raise ResolutionError(issues)

    return StateUpgradeRange(
        schema_version=version,
        base_version=base,
        enabled=descriptor.state_upgraders,
        upgrade_versions=upgrade_versions,
        migrate_state=(
            HookRef(name=descriptor.migrate_state, kind="migrate_state")
            if descriptor.migrate_state is not None
            else None
        ),
    )
