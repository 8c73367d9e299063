"""Tests for descriptor field markers and their introspection helpers."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel

from resplan.descriptor import ResourceDescriptor
from resplan.descriptor.markers import (
    Derived,
    Hook,
    HookRef,
    PolicyFlag,
    collect_derived_fields,
    collect_hook_refs,
    collect_policy_flags,
)


class _Sample(BaseModel):
    first: Annotated[bool, PolicyFlag()] = False
    renamed: Annotated[bool, PolicyFlag(name="alpha")] = True
    retry: Annotated[list[str], Hook("retry_predicate")] = []
    transform: Annotated[str | None, Hook("read_error_transform")] = None
    link: Annotated[str | None, Derived("urls")] = None
    plain: str = ""


class TestCollectPolicyFlags:
    def test_sorted_with_renames(self) -> None:
        assert collect_policy_flags(_Sample(first=True)) == {"alpha": True, "first": True}

    def test_descriptor_flags(self) -> None:
        d = ResourceDescriptor(name="Thing", base_url="things", skip_sweeper=True)
        flags = collect_policy_flags(d)
        assert flags["skip_sweeper"] is True
        assert len(flags) == 15


class TestCollectHookRefs:
    def test_scalar_and_list_in_declaration_order(self) -> None:
        refs = collect_hook_refs(_Sample(retry=["a", "b"], transform="t"))
        assert refs == [
            HookRef(name="a", kind="retry_predicate"),
            HookRef(name="b", kind="retry_predicate"),
            HookRef(name="t", kind="read_error_transform"),
        ]

    def test_unset_hooks_ignored(self) -> None:
        assert collect_hook_refs(_Sample()) == []


class TestCollectDerivedFields:
    def test_from_class_or_instance(self) -> None:
        assert collect_derived_fields(_Sample) == {"link": "urls"}
        assert collect_derived_fields(_Sample()) == {"link": "urls"}

    def test_descriptor_derived_fields(self) -> None:
        assert collect_derived_fields(ResourceDescriptor) == {
            "self_link": "urls",
            "create_url": "urls",
            "update_url": "urls",
            "delete_url": "urls",
            "collection_url_key": "urls",
            "identity": "identity",
            "id_format": "identity",
            "import_format": "identity",
            "state_upgrade_base_schema_version": "state",
        }
