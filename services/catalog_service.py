# ============================================================================
# CATALOG SERVICE
# ============================================================================
# STATUS: Domain service - Content merge engine
# PURPOSE: Serve the catalog snapshot enriched with live counters
# CREATED: 05 SEP 2026
# ============================================================================
"""
CatalogService

Read-time composition of two sources:
- the catalog snapshot (git-versioned approved.json, never written here)
- the counter store (likes, downloads, rating, rating count per item)

Merge precedence per counter: live value if present, else the snapshot's
baseline value, else 0. Nothing is written back to the snapshot.

The snapshot is cached in-process for ``cache_seconds`` (300 by default);
a failed fetch is never cached.
"""

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.contracts import CounterKind
from core.errors import InvalidRequest, NotFound
from core.logging import get_logger
from core.models import Catalog, CatalogItem, LiveCounters
from infrastructure.github_client import GitHubClient
from repositories import CounterRepository

logger = get_logger(__name__)


def _pick(live: Optional[float], snapshot: Optional[float]) -> float:
    if live is not None:
        return live
    if snapshot is not None:
        return snapshot
    return 0


def merge_counters(item: CatalogItem, counters: LiveCounters) -> Dict[str, Any]:
    """Snapshot dict with the four counters overlaid. The item is not modified."""
    merged = item.raw
    merged["likes"] = int(_pick(counters.likes, item.likes))
    merged["downloads"] = int(_pick(counters.downloads, item.downloads))
    merged["rating"] = float(_pick(counters.rating, item.rating))
    merged["totalRatings"] = int(_pick(counters.rating_count, item.total_ratings))
    return merged


class CatalogService:
    """Catalog reads: collection, single item, aggregate stats."""

    def __init__(
        self,
        github: GitHubClient,
        counter_repo: CounterRepository,
        cache_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.github = github
        self.counter_repo = counter_repo
        self.cache_seconds = cache_seconds
        self._clock = clock
        self._cached: Optional[Tuple[float, Catalog]] = None

    # ================================================================
    # SNAPSHOT
    # ================================================================

    async def load_catalog(self) -> Catalog:
        """
        Current snapshot, from cache when fresh.

        Raises:
            UpstreamUnavailable: the snapshot could not be fetched.
        """
        now = self._clock()
        if self._cached is not None and self.cache_seconds > 0:
            fetched_at, catalog = self._cached
            if now - fetched_at < self.cache_seconds:
                return catalog

        payload = await self.github.fetch_catalog()
        catalog = Catalog.parse_payload(payload)
        self._cached = (now, catalog)
        logger.debug(f"Catalog snapshot loaded: {len(catalog.items)} items")
        return catalog

    def invalidate(self) -> None:
        self._cached = None

    async def _counters_for(self, item: CatalogItem) -> LiveCounters:
        key = item.item_key
        if not key:
            return LiveCounters()
        return await self.counter_repo.get_counters(key)

    # ================================================================
    # READS
    # ================================================================

    async def get_collection(self) -> List[Dict[str, Any]]:
        """All items, each with live counters overlaid (fan-out per item)."""
        catalog = await self.load_catalog()
        counters = await asyncio.gather(*(self._counters_for(item) for item in catalog.items))
        return [merge_counters(item, c) for item, c in zip(catalog.items, counters)]

    async def get_item(self, item_id: str) -> Dict[str, Any]:
        """
        One item matched on ``id`` or legacy ``number``.

        Raises:
            InvalidRequest: empty id.
            NotFound: no item matches.
        """
        item_id = (item_id or "").strip()
        if not item_id:
            raise InvalidRequest("Missing content ID")

        catalog = await self.load_catalog()
        item = next((it for it in catalog.items if it.matches(item_id)), None)
        if item is None:
            raise NotFound("Item not found")

        return merge_counters(item, await self._counters_for(item))

    async def get_stats(self) -> Dict[str, Any]:
        """Totals and category/game breakdowns from one snapshot fetch."""
        catalog = await self.load_catalog()

        async def downloads_of(item: CatalogItem) -> int:
            live = None
            if item.item_key:
                live = await self.counter_repo.get_count(CounterKind.DOWNLOADS, item.item_key)
            return int(_pick(live, item.downloads))

        downloads = await asyncio.gather(*(downloads_of(item) for item in catalog.items))

        categories: Dict[str, int] = {}
        games: Dict[str, int] = {}
        for item in catalog.items:
            category = item.category or "other"
            game = item.game or "other"
            categories[category] = categories.get(category, 0) + 1
            games[game] = games.get(game, 0) + 1

        return {
            "totalItems": len(catalog.items),
            "totalDownloads": sum(downloads),
            "categories": categories,
            "games": games,
        }
