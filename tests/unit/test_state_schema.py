"""Tests for state schema upgrade-range derivation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from resplan.descriptor.markers import HookRef
from resplan.resolver.errors import IssueKind, ResolutionError
from resplan.resolver.state_schema import resolve_state_schema

if TYPE_CHECKING:
    from collections.abc import Callable

    from resplan.descriptor import ResourceDescriptor

    MakeDescriptor = Callable[..., ResourceDescriptor]


class TestUpgradeRange:
    def test_steps_above_base(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(
            schema_version=3, state_upgrade_base_schema_version=1, state_upgraders=True
        )
        state = resolve_state_schema(d)
        assert state.upgrade_versions == [2, 3]
        assert state.enabled is True
        assert (state.schema_version, state.base_version) == (3, 1)

    def test_default_base_is_zero(self, make_descriptor: MakeDescriptor) -> None:
        state = resolve_state_schema(make_descriptor(schema_version=2, state_upgraders=True))
        assert state.base_version == 0
        assert state.upgrade_versions == [1, 2]

    def test_disabled_upgraders_yield_no_steps(self, make_descriptor: MakeDescriptor) -> None:
        state = resolve_state_schema(make_descriptor(schema_version=4))
        assert state.enabled is False
        assert state.upgrade_versions == []

    def test_base_above_version_is_invalid(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(schema_version=1, state_upgrade_base_schema_version=2)
        with pytest.raises(ResolutionError) as exc_info:
            resolve_state_schema(d)
        [issue] = exc_info.value.issues
        assert issue.kind == IssueKind.INVALID_STATE_VERSION_RANGE
        assert issue.field == "state_upgrade_base_schema_version"

    def test_base_above_version_invalid_even_when_disabled(
        self, make_descriptor: MakeDescriptor
    ) -> None:
        d = make_descriptor(schema_version=0, state_upgrade_base_schema_version=1)
        with pytest.raises(ResolutionError):
            resolve_state_schema(d)


class TestEmptyRange:
    def test_warning_by_default(
        self, make_descriptor: MakeDescriptor, caplog: pytest.LogCaptureFixture
    ) -> None:
        d = make_descriptor(
            schema_version=2, state_upgrade_base_schema_version=2, state_upgraders=True
        )
        warnings: list[str] = []
        with caplog.at_level(logging.WARNING, logger="resplan.resolver.state_schema"):
            state = resolve_state_schema(d, warnings=warnings)
        assert state.upgrade_versions == []
        assert len(warnings) == 1
        assert "no upgrade steps" in warnings[0]
        assert "Thing" in caplog.text

    def test_error_when_strict(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(state_upgraders=True)
        with pytest.raises(ResolutionError) as exc_info:
            resolve_state_schema(d, strict=True)
        [issue] = exc_info.value.issues
        assert issue.kind == IssueKind.INVALID_STATE_VERSION_RANGE
        assert issue.field == "schema_version"

    def test_warnings_list_optional(self, make_descriptor: MakeDescriptor) -> None:
        state = resolve_state_schema(make_descriptor(state_upgraders=True))
        assert state.upgrade_versions == []


class TestMigrateState:
    def test_hook_recorded(self, make_descriptor: MakeDescriptor) -> None:
        state = resolve_state_schema(make_descriptor(migrate_state="thing_migrate_state"))
        assert state.migrate_state == HookRef(name="thing_migrate_state", kind="migrate_state")

    def test_conflicts_with_upgraders(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(schema_version=1, state_upgraders=True, migrate_state="legacy")
        with pytest.raises(ResolutionError) as exc_info:
            resolve_state_schema(d)
        assert exc_info.value.kinds() == {IssueKind.CONFLICTING_OVERRIDE}

    def test_all_issues_reported(self, make_descriptor: MakeDescriptor) -> None:
        d = make_descriptor(
            schema_version=1,
            state_upgrade_base_schema_version=3,
            state_upgraders=True,
            migrate_state="legacy",
        )
        with pytest.raises(ResolutionError) as exc_info:
            resolve_state_schema(d)
        assert exc_info.value.kinds() == {
            IssueKind.INVALID_STATE_VERSION_RANGE,
            IssueKind.CONFLICTING_OVERRIDE,
        }
