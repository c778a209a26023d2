# ============================================================================
# COUNTER REPOSITORY
# ============================================================================
# STATUS: Core - Live counter access
# PURPOSE: Read/write likes, downloads, and rating keys in the counter store
# CREATED: 03 SEP 2026
# ============================================================================
"""
Counter Repository

One conceptual counter record per catalog item, physically split across
four independent keys (see core.contracts.CounterKind). Values are stored
as decimal strings.

Increments are read-increment-write without compare-and-swap. Two
concurrent increments of the same key can lose one update; counters are
informational, so last-write-wins is accepted.
"""

import asyncio
import logging
from typing import Optional, Tuple

from core.contracts import CounterKind
from core.models import LiveCounters
from infrastructure.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(float(value))
    except ValueError:
        logger.warning(f"Ignoring unparsable counter value {value!r}")
        return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring unparsable rating value {value!r}")
        return None


class CounterRepository:
    """Repository for per-item live counters."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_counters(self, item_id: str) -> LiveCounters:
        """Fetch all four counter keys for an item concurrently."""
        likes, downloads, rating, rating_count = await asyncio.gather(
            self.store.get(CounterKind.LIKES.key(item_id)),
            self.store.get(CounterKind.DOWNLOADS.key(item_id)),
            self.store.get(CounterKind.RATING.key(item_id)),
            self.store.get(CounterKind.RATING_COUNT.key(item_id)),
        )
        return LiveCounters(
            likes=_parse_int(likes),
            downloads=_parse_int(downloads),
            rating=_parse_float(rating),
            rating_count=_parse_int(rating_count),
        )

    async def get_count(self, kind: CounterKind, item_id: str) -> Optional[int]:
        return _parse_int(await self.store.get(kind.key(item_id)))

    async def increment(self, kind: CounterKind, item_id: str) -> int:
        """Add one to an integer counter and return the new total."""
        current = await self.get_count(kind, item_id) or 0
        total = current + 1
        await self.store.put(kind.key(item_id), str(total))
        return total

    async def get_rating(self, item_id: str) -> Tuple[float, int]:
        """Current (average, count); absent keys read as (0.0, 0)."""
        rating, count = await asyncio.gather(
            self.store.get(CounterKind.RATING.key(item_id)),
            self.store.get(CounterKind.RATING_COUNT.key(item_id)),
        )
        return _parse_float(rating) or 0.0, _parse_int(count) or 0

    async def put_rating(self, item_id: str, average: float, count: int) -> None:
        """Write average (one fraction digit) and count."""
        await asyncio.gather(
            self.store.put(CounterKind.RATING.key(item_id), f"{average:.1f}"),
            self.store.put(CounterKind.RATING_COUNT.key(item_id), str(count)),
        )
