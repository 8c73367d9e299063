"""``{{token}}`` template tokenizer and import-matcher compiler.

Templates mix literal path text with ``{{field}}`` tokens. A token written as
``{{%field}}`` is greedy: at import time it may match text containing ``/``.
Plain tokens match exactly one path segment.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from resplan.resolver.types import CompiledTemplate, ImportMatcher, Segment

if TYPE_CHECKING:
    from collections.abc import Iterable

GREEDY_MARKER = "%"

_TOKEN_RE = re.compile(r"\{\{(.*?)\}\}")
_TOKEN_NAME_RE = re.compile(r"^%?[A-Za-z_][A-Za-z0-9_]*$")

_SEGMENT_PATTERNS = {
    "token": r"[^/\n]+",
    "greedy": ".+",
}


class TemplateError(ValueError):
    """Raised for syntactically invalid templates."""


def _literal(text: str, template: str) -> Segment:
    if "{{" in text or "}}" in text:
        raise TemplateError(f"unbalanced braces in '{template}'")
    return Segment(kind="literal", value=text)


def compile_template(template: str) -> CompiledTemplate:
    """Split *template* into literal, token and greedy-token segments."""
    segments: list[Segment] = []
    pos = 0
    for m in _TOKEN_RE.finditer(template):
        if m.start() > pos:
            segments.append(_literal(template[pos : m.start()], template))
        raw = m.group(1)
        if not _TOKEN_NAME_RE.match(raw):
            raise TemplateError(f"invalid token '{{{{{raw}}}}}' in '{template}'")
        if raw.startswith(GREEDY_MARKER):
            segments.append(Segment(kind="greedy", value=raw[len(GREEDY_MARKER) :]))
        else:
            segments.append(Segment(kind="token", value=raw))
        pos = m.end()
    if pos < len(template):
        segments.append(_literal(template[pos:], template))
    return CompiledTemplate(template=template, segments=segments)


def compile_import_matcher(template: str) -> ImportMatcher:
    """Compile an import format into an anchored regex matcher.

    Each token becomes a named group, so a token may appear only once. Neither
    token kind matches a newline.
    """
    compiled = compile_template(template)
    seen: set[str] = set()
    parts: list[str] = []
    for seg in compiled.segments:
        if seg.kind == "literal":
            parts.append(re.escape(seg.value))
            continue
        if seg.value in seen:
            raise TemplateError(f"token '{seg.value}' repeated in '{template}'")
        seen.add(seg.value)
        parts.append(f"(?P<{seg.value}>{_SEGMENT_PATTERNS[seg.kind]})")
    return ImportMatcher(
        template=template,
        segments=compiled.segments,
        pattern=r"\A" + "".join(parts) + r"\Z",
    )


def unknown_tokens(compiled: CompiledTemplate, known: Iterable[str]) -> list[str]:
    """Tokens of *compiled* not in *known*, in first-seen order."""
    allowed = set(known)
    missing: list[str] = []
    for token in compiled.tokens:
        if token not in allowed and token not in missing:
            missing.append(token)
    return missing


def join_tokens(fields: Iterable[str]) -> str:
    """Build a ``{{a}}/{{b}}`` template from field names."""
    return "/".join(f"{{{{{f}}}}}" for f in fields)
