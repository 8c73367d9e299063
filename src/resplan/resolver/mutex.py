"""Mutex key resolution for serializing concurrent API calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from resplan.resolver.errors import IssueKind, ResolutionError, ResolutionIssue
from resplan.resolver.templates import TemplateError, compile_template, unknown_tokens
from resplan.resolver.types import MutexGuard

if TYPE_CHECKING:
    from collections.abc import Sequence

    from resplan.descriptor import ResourceDescriptor

logger = logging.getLogger(__name__)

RESOLVER = "mutex"


def resolve_mutex_key(
    descriptor: ResourceDescriptor, identity_fields: Sequence[str]
) -> MutexGuard | None:
    """Return the lock template a generated client must hold, or ``None``.

    An explicit ``mutex`` is kept verbatim; every token in it must name an
    identity field so the client can substitute it at call time.
    """
    if descriptor.mutex is None:
        return None

    try:
        compiled = compile_template(descriptor.mutex)
    except TemplateError as exc:
        raise ResolutionError(
            [ResolutionIssue(IssueKind.MALFORMED_TEMPLATE, RESOLVER, "mutex", str(exc))]
        ) from exc

    missing = unknown_tokens(compiled, identity_fields)
    if missing:
        raise ResolutionError(
            ResolutionIssue(
                IssueKind.UNKNOWN_IDENTITY_TOKEN,
                RESOLVER,
                "mutex",
                f"token '{token}' in '{descriptor.mutex}' is not an identity field",
            )
            for token in missing
        )

    logger.debug("Resolved mutex for %s: %s", descriptor.name, descriptor.mutex)
    return MutexGuard(template=descriptor.mutex, tokens=compiled.tokens)
