"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from iconcache.icons.loader import CollectionCache, CollectionRegistry
from iconcache.icons.service import IconService

# Root of the test fixtures: one Iconify JSON file per collection
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text())


class CountingLoader:
    """Loader test double: counts calls, can block on an event or fail N times."""

    def __init__(
        self,
        raw: dict[str, Any],
        *,
        gate: asyncio.Event | None = None,
        failures: int = 0,
    ) -> None:
        self.raw = raw
        self.gate = gate
        self.failures = failures
        self.calls = 0

    async def __call__(self) -> dict[str, Any]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.failures:
            self.failures -= 1
            raise OSError("simulated read failure")
        return self.raw


@pytest.fixture
def registry() -> CollectionRegistry:
    return CollectionRegistry.from_directory(FIXTURES_DIR)


@pytest.fixture
def cache(registry: CollectionRegistry) -> CollectionCache:
    return CollectionCache(registry)


@pytest.fixture
def service(cache: CollectionCache) -> IconService:
    return IconService(cache, precache_collections=["lucide", "simple-icons"])


@pytest.fixture
def counting_service() -> tuple[IconService, dict[str, CountingLoader]]:
    """Service over in-memory collections whose loads are counted."""
    loaders = {
        "lucide": CountingLoader(load_fixture("lucide")),
        "simple-icons": CountingLoader(load_fixture("simple-icons")),
    }
    reg = CollectionRegistry()
    for name, loader in loaders.items():
        reg.register(name, loader)
    svc = IconService(CollectionCache(reg), precache_collections=list(loaders))
    return svc, loaders


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "iconcache.yml"
    cfg.write_text(
        """\
data_dir: "{data}"
fallback_icon: "lucide:help-circle"
precache:
  - lucide
  - simple-icons
""".format(data=str(FIXTURES_DIR))
    )
    return cfg
