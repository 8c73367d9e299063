"""Shared fixtures for unit tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest

from resplan.config import load
from resplan.descriptor import FieldDescriptor, ResourceDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from resplan.config.schema import ProductConfig

_RESPLAN_ENV_VARS = ("RESPLAN_STRICT_STATE_UPGRADES", "RESPLAN_LOG", "NO_COLOR")


@pytest.fixture(autouse=True)
def _clean_resplan_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove RESPLAN_* env vars so unit tests don't leak host config."""
    for var in _RESPLAN_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo the CLI's logging setup (root handlers, ``resplan`` level)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = logging.getLogger("resplan").level
    yield
    root.handlers[:] = handlers
    logging.getLogger("resplan").setLevel(level)


@pytest.fixture
def make_descriptor() -> Callable[..., ResourceDescriptor]:
    """Factory fixture: POST-created ``Thing`` with ``project``/``region`` declared."""

    def _make(**overrides: Any) -> ResourceDescriptor:
        fields: dict[str, Any] = {
            "name": "Thing",
            "base_url": "projects/{{project}}/things",
            "parameters": [FieldDescriptor(name="project"), FieldDescriptor(name="region")],
        }
        fields.update(overrides)
        return ResourceDescriptor(**fields)

    return _make


@pytest.fixture
def make_product(tmp_path: Path) -> Callable[..., ProductConfig]:
    """Factory fixture: write YAML + optional .env, return loaded ProductConfig."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> ProductConfig:
        (tmp_path / "product.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "product.yaml")

    return _make
