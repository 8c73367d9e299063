"""Configuration models for YAML product files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resplan.descriptor import ResourceDescriptor  # noqa: TC001
from resplan.descriptor.markers import HookKind  # noqa: TC001
from resplan.resolver.registry import HookRegistry


class ResolverSettings(BaseSettings):
    """Resolver policy settings.

    Fields can be set via the product file's ``settings:`` block or
    environment variables with the ``RESPLAN_`` prefix. Explicit values take
    precedence.
    """

    model_config = SettingsConfigDict(env_prefix="RESPLAN_")

    strict_state_upgrades: bool = False


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class ProductConfig(BaseModel):
    """A product: a named group of resource descriptors sharing settings."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    settings: ResolverSettings = Field(default_factory=ResolverSettings)
    hooks: dict[HookKind, list[str]] | None = None
    resources: Annotated[list[ResourceDescriptor], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    @model_validator(mode="after")
    def _check_hooks(self) -> ProductConfig:
        # Building the registry rejects names declared twice.
        self.hook_registry()
        return self

    def hook_registry(self) -> HookRegistry | None:
        """Registry of declared hook names, or ``None`` when hooks are not declared."""
        if self.hooks is None:
            return None
        return HookRegistry.from_names(self.hooks)

    def get_resource(self, name: str) -> ResourceDescriptor:
        for r in self.resources:
            if r.name == name:
                return r
        raise KeyError(name)
