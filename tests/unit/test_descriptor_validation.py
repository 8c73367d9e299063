"""Tests for structural validation of descriptor models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from resplan.descriptor import (
    BooleanVirtualField,
    FieldDescriptor,
    IntegerVirtualField,
    NestedQuery,
    ResourceDescriptor,
    StringVirtualField,
    Timeouts,
)


class TestResourceDescriptor:
    def test_defaults(self) -> None:
        d = ResourceDescriptor(name="Thing", base_url="things")
        assert d.create_verb == "POST"
        assert d.read_verb == "GET"
        assert d.update_verb == "PUT"
        assert d.delete_verb == "DELETE"
        assert d.identity == []
        assert d.schema_version == 0
        assert d.timeouts == Timeouts()

    @pytest.mark.parametrize("name", ["thing", "Thing-1", "", "1Thing"])
    def test_invalid_resource_name(self, name: str) -> None:
        with pytest.raises(ValidationError):
            ResourceDescriptor(name=name, base_url="things")

    def test_base_url_required(self) -> None:
        with pytest.raises(ValidationError):
            ResourceDescriptor(name="Thing", base_url="")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError, match="colour"):
            ResourceDescriptor.model_validate({"name": "Thing", "base_url": "x", "colour": 1})

    def test_original_metadata_fields_accepted(self) -> None:
        d = ResourceDescriptor.model_validate(
            {
                "name": "Thing",
                "base_url": "things",
                "has_self_link": True,
                "exclude_tgc": True,
                "kind": "compute#thing",
                "legacy_name": "google_compute_thing",
                "deprecation_message": "Use Widget instead.",
                "cai_base_url": "projects/{{project}}/things",
            }
        )
        assert d.has_self_link is True
        assert d.exclude_tgc is True
        assert d.cai_base_url == "projects/{{project}}/things"

    def test_invalid_verb(self) -> None:
        with pytest.raises(ValidationError):
            ResourceDescriptor(name="Thing", base_url="x", create_verb="GET")

    def test_negative_schema_version(self) -> None:
        with pytest.raises(ValidationError):
            ResourceDescriptor(name="Thing", base_url="x", schema_version=-1)

    def test_frozen(self) -> None:
        d = ResourceDescriptor(name="Thing", base_url="x")
        with pytest.raises(ValidationError):
            d.base_url = "y"  # type: ignore[misc]

    def test_declared_names(self) -> None:
        d = ResourceDescriptor(
            name="Thing",
            base_url="x",
            properties=[FieldDescriptor(name="labels"), FieldDescriptor(name="name")],
            parameters=[FieldDescriptor(name="zone")],
            virtual_fields=[BooleanVirtualField(name="force_delete")],
        )
        assert d.declared_names() == ["name", "labels", "zone", "force_delete"]


class TestVirtualFields:
    def test_discriminated_by_type(self) -> None:
        d = ResourceDescriptor.model_validate(
            {
                "name": "Thing",
                "base_url": "x",
                "virtual_fields": [
                    {"name": "a", "type": "Boolean", "default_value": True},
                    {"name": "b", "type": "String", "default_value": "ABANDON"},
                    {"name": "c", "type": "Integer", "default_value": 3},
                ],
            }
        )
        assert [type(v) for v in d.virtual_fields] == [
            BooleanVirtualField,
            StringVirtualField,
            IntegerVirtualField,
        ]

    def test_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            ResourceDescriptor.model_validate(
                {"name": "Thing", "base_url": "x", "virtual_fields": [{"name": "a", "type": "X"}]}
            )

    def test_invalid_field_name(self) -> None:
        with pytest.raises(ValidationError):
            StringVirtualField(name="Bad-Name")


class TestNestedModels:
    def test_nested_query_needs_keys(self) -> None:
        with pytest.raises(ValidationError):
            NestedQuery(keys=[])

    def test_timeouts_positive(self) -> None:
        with pytest.raises(ValidationError):
            Timeouts(insert_minutes=0)
