"""Nested descriptor models: fields, virtual fields, nested queries, timeouts."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field

_FieldName = Annotated[str, Field(pattern=r"^[a-z][a-z0-9_]*$")]


class _Frozen(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class FieldDescriptor(_Frozen):
    """A declared property or parameter.

    Only ``name`` matters to resolution; the rest is carried for the emitter.
    """

    name: _FieldName
    type: str = "String"
    description: str = ""
    required: bool = False
    url_param_only: bool = False


class _VirtualFieldBase(_Frozen):
    name: _FieldName
    description: str = ""


class BooleanVirtualField(_VirtualFieldBase):
    """Client-only boolean switch, e.g. ``deletion_protection``."""

    type: Literal["Boolean"] = "Boolean"
    default_value: bool | None = None


class StringVirtualField(_VirtualFieldBase):
    """Client-only string setting, e.g. ``deletion_policy``."""

    type: Literal["String"] = "String"
    default_value: str | None = None


class IntegerVirtualField(_VirtualFieldBase):
    """Client-only integer setting."""

    type: Literal["Integer"] = "Integer"
    default_value: int | None = None


VirtualField = Annotated[
    BooleanVirtualField | StringVirtualField | IntegerVirtualField,
    Discriminator("type"),
]


class NestedQuery(_Frozen):
    """How a GET response is unwrapped to reach the resource object.

    ``keys`` is the JSON path into the parent/collection response.
    """

    keys: list[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    is_list_of_ids: bool = False
    modify_by_patch: bool = False


class IamPolicy(_Frozen):
    """Presence marker for a resource-specific IAM policy.

    The IAM sub-resource itself is generated elsewhere.
    """

    parent_resource_attribute: str = "name"
    method_name_separator: str = ":"
    fetch_iam_policy_verb: Literal["GET", "POST"] = "GET"
    set_iam_policy_verb: Literal["POST", "PUT"] = "POST"


class Timeouts(_Frozen):
    """Operation timeouts, in minutes, passed through to the generated client."""

    insert_minutes: int = Field(default=20, gt=0)
    update_minutes: int = Field(default=20, gt=0)
    delete_minutes: int = Field(default=20, gt=0)
