"""Icon collection loading: registry of loaders plus a single-flight cache."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

from iconcache.schemas.icons import IconCollection

logger = logging.getLogger(__name__)

CollectionLoader = Callable[[], Awaitable[dict[str, Any]]]
"""Signature: async () -> raw Iconify JSON dict for one collection."""


def file_loader(path: str | Path) -> CollectionLoader:
    """Return a loader that reads and parses one Iconify JSON file.

    The read runs in the default executor so the event loop keeps serving
    other callers while the file is on its way in.
    """
    path = Path(path)

    async def _load() -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, lambda: path.read_text(encoding="utf-8"))
        raw = json.loads(text)
        if not isinstance(raw, dict):
            raise ValueError(f"Icon set must be a JSON object, got {type(raw).__name__}")
        return raw

    return _load


class CollectionRegistry:
    """Maps collection names to loader callables, resolved at startup."""

    def __init__(self) -> None:
        self._loaders: dict[str, CollectionLoader] = {}

    @classmethod
    def from_directory(cls, root: str | Path) -> "CollectionRegistry":
        """Register every ``<collection>.json`` file found directly in ``root``."""
        root = Path(root)
        if not root.is_dir():
            raise ValueError(f"Icon data directory is not a directory: {root}")

        registry = cls()
        for path in sorted(root.glob("*.json")):
            registry.register(path.stem, file_loader(path))
        logger.debug("Registered %d icon collections from %s", len(registry), root)
        return registry

    def register(self, name: str, loader: CollectionLoader) -> None:
        self._loaders[name] = loader

    def names(self) -> list[str]:
        return sorted(self._loaders)

    def __contains__(self, name: object) -> bool:
        return name in self._loaders

    def __len__(self) -> int:
        return len(self._loaders)

    async def load(self, name: str) -> dict[str, Any]:
        """Run the loader for ``name``. Raises ``KeyError`` for unknown names."""
        try:
            loader = self._loaders[name]
        except KeyError:
            raise KeyError(f"Unknown icon collection: {name}") from None
        return await loader()


class CollectionCache:
    """Process-wide cache of loaded icon collections.

    Construct one per application and pass it to every consumer. Each
    collection is loaded at most once; concurrent first requests for the same
    name share a single in-flight load. Failed loads are not cached, so the
    next request tries again.
    """

    def __init__(self, registry: CollectionRegistry) -> None:
        self.registry = registry
        self._collections: dict[str, IconCollection] = {}
        self._inflight: dict[str, asyncio.Task[IconCollection | None]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._collections

    def __len__(self) -> int:
        return len(self._collections)

    def cached_names(self) -> list[str]:
        return list(self._collections)

    def clear(self) -> None:
        """Drop every cached collection. In-flight loads are left alone."""
        self._collections.clear()

    async def get(self, name: str) -> IconCollection | None:
        """Return the collection, loading it on first use. None if it can't be loaded."""
        cached = self._collections.get(name)
        if cached is not None:
            logger.debug("Icon collection cache hit: %s", name)
            return cached

        task = self._inflight.get(name)
        if task is None:
            task = asyncio.ensure_future(self._load(name))
            self._inflight[name] = task
            task.add_done_callback(lambda t: self._settle(name, t))
        else:
            logger.debug("Joining in-flight load for icon collection: %s", name)

        # Shielded: a cancelled caller must not cancel the load for everyone else
        return await asyncio.shield(task)

    def _settle(self, name: str, task: asyncio.Task[IconCollection | None]) -> None:
        if self._inflight.get(name) is task:
            del self._inflight[name]

    async def _load(self, name: str) -> IconCollection | None:
        try:
            raw = await self.registry.load(name)
            collection = IconCollection.model_validate(raw)
        except Exception as exc:
            # Any unreadable or corrupt set degrades to not-found
            logger.warning("Failed to load icon collection %s: %s", name, exc)
            return None

        self._collections[name] = collection
        logger.debug("Loaded icon collection %s (%d icons)", name, collection.total)
        return collection
