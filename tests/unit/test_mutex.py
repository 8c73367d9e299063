"""Tests for mutex key resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from resplan.resolver.errors import IssueKind, ResolutionError
from resplan.resolver.mutex import resolve_mutex_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from resplan.descriptor import ResourceDescriptor

    MakeDescriptor = Callable[..., ResourceDescriptor]


class TestResolveMutexKey:
    def test_no_mutex(self, make_descriptor: MakeDescriptor) -> None:
        assert resolve_mutex_key(make_descriptor(), ["name"]) is None

    def test_template_kept_verbatim(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(mutex="projects/{{project}}/regions/{{region}}/locks")
        guard = resolve_mutex_key(d, ["project", "region", "name"])
        assert guard is not None
        assert guard.template == "projects/{{project}}/regions/{{region}}/locks"
        assert guard.tokens == ["project", "region"]

    def test_literal_only_mutex(self, make_descriptor: MakeDescriptor) -> None:
        guard = resolve_mutex_key(make_descriptor(mutex="global-lock"), ["name"])
        assert guard is not None
        assert guard.tokens == []

    def test_unknown_tokens_each_reported(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(mutex="{{project}}/{{zone}}/{{name}}")
        with pytest.raises(ResolutionError) as exc_info:
            resolve_mutex_key(d, ["name"])
        issues = exc_info.value.issues
        assert [i.kind for i in issues] == [IssueKind.UNKNOWN_IDENTITY_TOKEN] * 2
        assert "'project'" in issues[0].message
        assert "'zone'" in issues[1].message
        assert all(i.resolver == "mutex" and i.field == "mutex" for i in issues)

    def test_malformed(self, make_descriptor: MakeDescriptor) -> None:
        with pytest.raises(ResolutionError) as exc_info:
            resolve_mutex_key(make_descriptor(mutex="locks/{{name"), ["name"])
        assert exc_info.value.kinds() == {IssueKind.MALFORMED_TEMPLATE}
