"""Resource descriptor: the raw declarative description of one API resource."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from resplan.descriptor.fields import (
    FieldDescriptor,
    IamPolicy,
    NestedQuery,
    Timeouts,
    VirtualField,
)
from resplan.descriptor.markers import Derived, Hook, PolicyFlag

IMPLICIT_IDENTITY_FIELD = "name"

_NonEmptyStr = Annotated[str, Field(min_length=1)]
_Version = Annotated[int, Field(ge=0)]


class ResourceDescriptor(BaseModel):
    """Declarative description of a cloud API resource.

    Descriptors are pure data: they are built once from configuration and
    never mutated. Resolvers in ``resplan.resolver`` derive everything else.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(pattern=r"^[A-Z][A-Za-z0-9]*$")
    description: str = ""
    min_version: Literal["ga", "beta"] = "ga"
    kind: str = ""
    legacy_name: str = ""
    deprecation_message: str = ""

    # URL / HTTP
    base_url: _NonEmptyStr
    self_link: Annotated[str | None, Derived("urls")] = None
    create_url: Annotated[str | None, Derived("urls")] = None
    update_url: Annotated[str | None, Derived("urls")] = None
    delete_url: Annotated[str | None, Derived("urls")] = None
    create_verb: Literal["POST", "PUT", "PATCH"] = "POST"
    read_verb: Literal["GET", "POST"] = "GET"
    update_verb: Literal["PUT", "PATCH", "POST"] = "PUT"
    delete_verb: Literal["DELETE", "POST", "PUT", "PATCH"] = "DELETE"
    read_query_params: str = ""
    collection_url_key: Annotated[str | None, Derived("urls")] = None
    has_self_link: Annotated[bool, PolicyFlag()] = False
    cai_base_url: str | None = None

    # Identity / import
    identity: Annotated[list[_NonEmptyStr], Derived("identity")] = Field(default_factory=list)
    nested_query: NestedQuery | None = None
    id_format: Annotated[str | None, Derived("identity")] = None
    import_format: Annotated[list[_NonEmptyStr], Derived("identity")] = Field(
        default_factory=list
    )

    # Concurrency
    mutex: str | None = None

    # State schema
    schema_version: _Version = 0
    state_upgrade_base_schema_version: Annotated[_Version, Derived("state")] = 0
    state_upgraders: bool = False
    migrate_state: Annotated[str | None, Hook("migrate_state")] = None

    # Lifecycle flags
    exclude: bool = False
    exclude_resource: Annotated[bool, PolicyFlag()] = False
    exclude_import: Annotated[bool, PolicyFlag()] = False
    exclude_tgc: Annotated[bool, PolicyFlag()] = False
    immutable: Annotated[bool, PolicyFlag()] = False
    readonly: Annotated[bool, PolicyFlag()] = False
    update_mask: Annotated[bool, PolicyFlag()] = False
    autogen_async: Annotated[bool, PolicyFlag()] = False
    skip_read: Annotated[bool, PolicyFlag()] = False
    skip_delete: Annotated[bool, PolicyFlag()] = False
    skip_sweeper: Annotated[bool, PolicyFlag()] = False
    skip_default_cdiff: Annotated[bool, PolicyFlag()] = False
    taint_resource_on_failed_create: Annotated[bool, PolicyFlag()] = False
    legacy_long_form_project: Annotated[bool, PolicyFlag()] = False
    supports_indirect_user_project_override: Annotated[bool, PolicyFlag()] = False

    iam_policy: IamPolicy | None = None
    timeouts: Timeouts = Field(default_factory=Timeouts)

    # Hooks owned by the runtime layer
    error_retry_predicates: Annotated[list[_NonEmptyStr], Hook("retry_predicate")] = Field(
        default_factory=list
    )
    error_abort_predicates: Annotated[list[_NonEmptyStr], Hook("abort_predicate")] = Field(
        default_factory=list
    )
    custom_diff: Annotated[list[_NonEmptyStr], Hook("custom_diff")] = Field(default_factory=list)
    read_error_transform: Annotated[str | None, Hook("read_error_transform")] = None

    virtual_fields: list[VirtualField] = Field(default_factory=list)
    properties: list[FieldDescriptor] = Field(default_factory=list)
    parameters: list[FieldDescriptor] = Field(default_factory=list)

    def declared_names(self) -> list[str]:
        """Names addressable from identity and templates, in declaration order.

        The implicit ``name`` field is always addressable.
        """
        names = [IMPLICIT_IDENTITY_FIELD]
        for f in (*self.properties, *self.parameters, *self.virtual_fields):
            if f.name not in names:
                names.append(f.name)
        return names
