"""URL resolution: self link, create/update/delete URLs and read query params."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from resplan.resolver.errors import IssueKind, ResolutionError, ResolutionIssue
from resplan.resolver.templates import TemplateError, compile_template
from resplan.resolver.types import ResolvedUrls

if TYPE_CHECKING:
    from resplan.descriptor import ResourceDescriptor

logger = logging.getLogger(__name__)

RESOLVER = "urls"

_URL_FIELDS = (
    "base_url",
    "self_link",
    "create_url",
    "update_url",
    "delete_url",
    "cai_base_url",
)


def collection_key_for(resource_name: str) -> str:
    """Lower-camel plural of a PascalCase resource name (``Policy`` → ``policies``)."""
    key = resource_name[:1].lower() + resource_name[1:]
    if re.search(r"[^aeiou]y$", key):
        return key[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", key):
        return key + "es"
    return key + "s"


def _check_templates(descriptor: ResourceDescriptor) -> list[ResolutionIssue]:
    issues: list[ResolutionIssue] = []
    for field in _URL_FIELDS:
        value = getattr(descriptor, field)
        if value is None:
            continue
        try:
            compile_template(value)
        except TemplateError as exc:
            issues.append(ResolutionIssue(IssueKind.MALFORMED_TEMPLATE, RESOLVER, field, str(exc)))
    return issues


def resolve_urls(descriptor: ResourceDescriptor) -> ResolvedUrls:
    """Resolve the four operational URLs from explicit overrides and verb defaults.

    - ``self_link`` defaults to ``base_url`` for POST-created resources; PUT/PATCH
      resources must set it explicitly.
    - ``create_url`` defaults to ``base_url`` for POST, else to ``self_link``.
    - ``update_url`` and ``delete_url`` default to ``self_link``.

    Raises:
        ResolutionError: With every URL issue found.
    """
    issues = _check_templates(descriptor)
    is_post = descriptor.create_verb == "POST"

    self_link = descriptor.self_link
    if self_link is None:
        if is_post:
            self_link = descriptor.base_url
        else:
            issues.append(
                ResolutionIssue(
                    IssueKind.UNRESOLVABLE_URL,
                    RESOLVER,
                    "self_link",
                    "self_link must be set explicitly when create_verb is "
                    f"{descriptor.create_verb}",
                )
            )

    if issues or self_link is None:
        raise ResolutionError(issues)

    create_url = descriptor.create_url
    if create_url is None:
        create_url = descriptor.base_url if is_post else self_link

    urls = ResolvedUrls(
        self_link=self_link,
        create_url=create_url,
        update_url=descriptor.update_url if descriptor.update_url is not None else self_link,
        delete_url=descriptor.delete_url if descriptor.delete_url is not None else self_link,
        read_query_params=descriptor.read_query_params,
        collection_url_key=descriptor.collection_url_key or collection_key_for(descriptor.name),
        create_verb=descriptor.create_verb,
        read_verb=descriptor.read_verb,
        update_verb=descriptor.update_verb,
        delete_verb=descriptor.delete_verb,
        cai_base_url=descriptor.cai_base_url,
    )
    logger.debug("Resolved URLs for %s: self_link=%s", descriptor.name, urls.self_link)
    return urls
