"""Icon service: single and batch rendering, collection listing, and search."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Iterable, Sequence

from iconcache.icons.loader import CollectionCache, CollectionRegistry
from iconcache.icons.renderer import icon_to_svg, resolve_icon
from iconcache.schemas.config import DEFAULT_FALLBACK_ICON, DEFAULT_PRECACHE, IconConfig
from iconcache.schemas.icons import (
    CollectionSummary,
    IconCollection,
    IconData,
    RenderOptions,
    SearchHit,
)
from iconcache.shared.identifiers import IconIdentifier, parse_identifier, split_valid

logger = logging.getLogger(__name__)


def _id_prefix(identifier: IconIdentifier) -> str:
    """Stable per-icon prefix for ids inside the SVG body."""
    slug = re.sub(r"[^A-Za-z0-9_-]", "-", f"{identifier.collection}-{identifier.name}")
    return f"iconify-{slug}-"


def _render(
    collection: IconCollection,
    identifier: IconIdentifier,
    options: RenderOptions | None,
) -> str | None:
    icon = resolve_icon(collection, identifier.name)
    if icon is None:
        return None
    return icon_to_svg(icon, options, id_prefix=_id_prefix(identifier))


class IconService:
    """Icon lookups over a shared ``CollectionCache``.

    - ``get_icon`` / ``render_icon``: one identifier, explicit not-found
    - ``render_batch``: many identifiers, shared fallback, never raises
    - ``list_collections`` / ``search_icons``: read-only introspection
    - ``precache``: warm the well-known collections at startup
    """

    def __init__(
        self,
        cache: CollectionCache,
        *,
        fallback_icon: str = DEFAULT_FALLBACK_ICON,
        precache_collections: Sequence[str] = tuple(DEFAULT_PRECACHE),
        search_limit: int = 50,
    ) -> None:
        self.cache = cache
        self.fallback_icon = fallback_icon
        self.precache_collections = list(precache_collections)
        self.search_limit = search_limit

    # ------------------------------------------------------------------
    # Single icon
    # ------------------------------------------------------------------

    async def get_icon(self, identifier: str) -> IconData | None:
        """Look up one icon and render it with default options."""
        parsed = parse_identifier(identifier)
        if parsed is None:
            logger.warning("Invalid icon identifier: %s", identifier)
            return None

        collection = await self.cache.get(parsed.collection)
        if collection is None:
            return None

        svg = _render(collection, parsed, None)
        if svg is None:
            logger.warning("Icon not found: %s", identifier)
            return None

        return IconData(
            identifier=str(parsed),
            collection=parsed.collection,
            name=parsed.name,
            svg=svg,
        )

    async def render_icon(
        self,
        identifier: str,
        options: RenderOptions | None = None,
        *,
        use_fallback: bool = True,
    ) -> str | None:
        """Render one icon; on a miss, render the fallback icon instead (once)."""
        svg = await self._render_one(identifier, options)
        if svg is not None:
            return svg
        if not use_fallback or identifier == self.fallback_icon:
            return None

        logger.warning("Icon not found, using fallback: %s", identifier)
        return await self._render_one(self.fallback_icon, options)

    async def _render_one(self, identifier: str, options: RenderOptions | None) -> str | None:
        parsed = parse_identifier(identifier)
        if parsed is None:
            logger.warning("Invalid icon identifier: %s", identifier)
            return None
        collection = await self.cache.get(parsed.collection)
        if collection is None:
            return None
        return _render(collection, parsed, options)

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def render_batch(
        self,
        identifiers: Iterable[str],
        options: RenderOptions | None = None,
    ) -> dict[str, str]:
        """Render many icons, loading each referenced collection at most once.

        Malformed identifiers are left out of the result (one warning lists
        them all). Identifiers that don't resolve map to a single shared
        fallback rendering; if the fallback doesn't resolve either, they are
        left out too.
        """
        valid, malformed = split_valid(identifiers)
        if malformed:
            logger.warning(
                "Skipping %d malformed icon identifier(s): %s",
                len(malformed), ", ".join(malformed),
            )

        by_collection: dict[str, list[IconIdentifier]] = {}
        for ident in valid:
            by_collection.setdefault(ident.collection, []).append(ident)

        names = list(by_collection)
        loaded = await asyncio.gather(*(self.cache.get(name) for name in names))

        result: dict[str, str] = {}
        unresolved: list[str] = []
        for name, collection in zip(names, loaded):
            for ident in by_collection[name]:
                svg = _render(collection, ident, options) if collection is not None else None
                if svg is None:
                    unresolved.append(str(ident))
                else:
                    result[str(ident)] = svg

        if not unresolved:
            return result

        logger.debug("Using fallback %s for: %s", self.fallback_icon, ", ".join(unresolved))
        fallback = await self._render_one(self.fallback_icon, options)
        if fallback is None:
            logger.warning(
                "Fallback icon %s is unavailable; dropping unresolved icons: %s",
                self.fallback_icon, ", ".join(unresolved),
            )
            return result

        for ident in unresolved:
            result[ident] = fallback
        return result

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    async def list_collections(self) -> list[CollectionSummary]:
        """Summaries for the pre-cache collections plus anything else already loaded."""
        names = list(dict.fromkeys(self.precache_collections + self.cache.cached_names()))
        loaded = await asyncio.gather(*(self.cache.get(name) for name in names))

        summaries = []
        for name, collection in zip(names, loaded):
            if collection is None:
                continue
            info = collection.info
            summaries.append(CollectionSummary(
                id=name,
                name=(info.name if info else "") or name,
                total=collection.total,
                category=info.category if info else None,
                prefix=collection.prefix,
            ))
        return summaries

    async def search_icons(
        self,
        query: str,
        limit: int | None = None,
        *,
        collection: str | None = None,
    ) -> list[SearchHit]:
        """Case-insensitive substring search over icon names.

        ``"lucide:arrow"`` scopes the search to one collection, as does the
        ``collection`` keyword. An empty term matches every icon.
        """
        limit = limit if limit is not None else self.search_limit
        term = query
        if ":" in query:
            scope, term = query.split(":", 1)
            collection = collection or scope or None
        term = term.lower()

        targets = [collection] if collection else self.precache_collections
        hits: list[SearchHit] = []
        for name in targets:
            if len(hits) >= limit:
                break
            icon_set = await self.cache.get(name)
            if icon_set is None:
                continue
            for icon_name, entry in icon_set.icons.items():
                if len(hits) >= limit:
                    break
                if entry.hidden:
                    continue
                if not term or term in icon_name.lower():
                    hits.append(SearchHit(
                        identifier=f"{name}:{icon_name}",
                        collection=name,
                        name=icon_name,
                    ))
        return hits

    async def precache(self) -> int:
        """Load the pre-cache collections concurrently; returns the cached count."""
        logger.info("Pre-caching icon collections: %s", ", ".join(self.precache_collections))
        await asyncio.gather(*(self.cache.get(name) for name in self.precache_collections))
        logger.info("Icon collections pre-cached: %d", len(self.cache))
        return len(self.cache)


def build_service(config: IconConfig) -> IconService:
    """Wire registry, cache, and service from a validated config."""
    registry = CollectionRegistry.from_directory(config.data_dir)
    cache = CollectionCache(registry)
    return IconService(
        cache,
        fallback_icon=config.fallback_icon,
        precache_collections=config.precache,
        search_limit=config.search_limit,
    )
