"""YAML product loading and convenience resolve API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from resplan.config.loader import ConfigError, load_product
from resplan.config.schema import ProductConfig, ResolverSettings
from resplan.resolver.assembler import PlanResolver

if TYPE_CHECKING:
    from pathlib import Path

    from resplan.resolver.types import BatchResult, ResolvedPlan

__all__ = [
    "ConfigError",
    "ProductConfig",
    "ResolverSettings",
    "load",
    "load_product",
    "resolve",
    "resolve_one",
]


def load(path: Path | str) -> ProductConfig:
    """Load a YAML product file."""
    return load_product(path)


def _resolver_from_config(
    config: ProductConfig, *, strict_state_upgrades: bool | None = None
) -> PlanResolver:
    """Build a ``PlanResolver`` from a ``ProductConfig`` instance."""
    strict = (
        config.settings.strict_state_upgrades
        if strict_state_upgrades is None
        else strict_state_upgrades
    )
    return PlanResolver(strict_state_upgrades=strict, hooks=config.hook_registry())


def resolve(config: ProductConfig, *, strict_state_upgrades: bool | None = None) -> BatchResult:
    """Resolve every resource in the product, isolating per-resource failures."""
    resolver = _resolver_from_config(config, strict_state_upgrades=strict_state_upgrades)
    return resolver.resolve_all(config.resources)


def resolve_one(
    config: ProductConfig, name: str, *, strict_state_upgrades: bool | None = None
) -> ResolvedPlan:
    """Resolve a single named resource from the product.

    Raises:
        ConfigError: If the product has no such resource or excludes it.
    """
    try:
        descriptor = config.get_resource(name)
    except KeyError as exc:
        raise ConfigError(f"No resource named '{name}' in product {config.name}") from exc
    if descriptor.exclude:
        raise ConfigError(f"Resource '{name}' is excluded in product {config.name}")
    resolver = _resolver_from_config(config, strict_state_upgrades=strict_state_upgrades)
    return resolver.resolve(descriptor)
