"""Identity fields, id format and import-format compilation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from resplan.descriptor.base import IMPLICIT_IDENTITY_FIELD
from resplan.resolver.errors import IssueKind, ResolutionError, ResolutionIssue
from resplan.resolver.templates import (
    TemplateError,
    compile_import_matcher,
    compile_template,
    join_tokens,
    unknown_tokens,
)
from resplan.resolver.types import IdentityResolution

if TYPE_CHECKING:
    from resplan.descriptor import ResourceDescriptor
    from resplan.resolver.types import CompiledTemplate, ImportMatcher

logger = logging.getLogger(__name__)

RESOLVER = "identity"


def identity_fields(descriptor: ResourceDescriptor) -> tuple[list[str], bool]:
    """Return ``(fields, implicit)``; an empty identity means just ``name``."""
    if descriptor.identity:
        return list(descriptor.identity), False
    return [IMPLICIT_IDENTITY_FIELD], True


def _issue(kind: IssueKind, field: str, message: str) -> ResolutionIssue:
    return ResolutionIssue(kind, RESOLVER, field, message)


def _check_identity(
    descriptor: ResourceDescriptor, fields: list[str], implicit: bool
) -> list[ResolutionIssue]:
    issues: list[ResolutionIssue] = []
    declared = descriptor.declared_names()
    seen: set[str] = set()
    for f in fields:
        if f in seen:
            issues.append(
                _issue(IssueKind.CONFLICTING_OVERRIDE, "identity", f"'{f}' listed more than once")
            )
        seen.add(f)
        if f not in declared:
            issues.append(
                _issue(
                    IssueKind.UNKNOWN_IDENTITY_TOKEN,
                    "identity",
                    f"'{f}' is not a declared property, parameter or virtual field",
                )
            )
    if implicit and descriptor.nested_query is not None:
        issues.append(
            _issue(
                IssueKind.CONFLICTING_OVERRIDE,
                "identity",
                "resources with nested_query must declare an explicit identity",
            )
        )
    return issues


def _compile_checked(
    template: str,
    field: str,
    fields: list[str],
    issues: list[ResolutionIssue],
    *,
    matcher: bool,
) -> CompiledTemplate | ImportMatcher | None:
    """Compile *template* and check its tokens; record problems in *issues*."""
    try:
        compiled = compile_import_matcher(template) if matcher else compile_template(template)
    except TemplateError as exc:
        issues.append(_issue(IssueKind.MALFORMED_TEMPLATE, field, str(exc)))
        return None
    missing = unknown_tokens(compiled, fields)
    for token in missing:
        issues.append(
            _issue(
                IssueKind.UNKNOWN_IDENTITY_TOKEN,
                field,
                f"token '{token}' in '{template}' is not an identity field",
            )
        )
    return None if missing else compiled


def compile_identity(descriptor: ResourceDescriptor) -> IdentityResolution:
    """Resolve identity fields and compile the id and import formats.

    Import matchers keep the declared order: earlier, more specific formats
    are tried before general fallbacks. With ``exclude_import`` the id format
    is still validated but no matchers are produced.

    Raises:
        ResolutionError: With every identity/template issue found.
    """
    fields, implicit = identity_fields(descriptor)
    issues = _check_identity(descriptor, fields, implicit)

    id_template = descriptor.id_format if descriptor.id_format is not None else join_tokens(fields)
    id_format = _compile_checked(id_template, "id_format", fields, issues, matcher=False)

    matchers: list[ImportMatcher] = []
    if descriptor.exclude_import:
        if descriptor.import_format:
            issues.append(
                _issue(
                    IssueKind.CONFLICTING_OVERRIDE,
                    "import_format",
                    "import_format cannot be set when exclude_import is true",
                )
            )
    elif descriptor.import_format or id_format is not None:
        formats = descriptor.import_format or [id_template]
        for i, fmt in enumerate(formats):
            compiled = _compile_checked(fmt, f"import_format[{i}]", fields, issues, matcher=True)
            if compiled is not None:
                matchers.append(compiled)  # type: ignore[arg-type]

    if issues or id_format is None:
        raise ResolutionError(issues)

    logger.debug(
        "Compiled identity for %s: fields=%s, %d import matcher(s)",
        descriptor.name,
        fields,
        len(matchers),
    )
    return IdentityResolution(
        identity_fields=fields,
        id_format=id_format,
        import_matchers=matchers,
    )
