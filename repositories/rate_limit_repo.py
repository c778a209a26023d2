# ============================================================================
# RATE-LIMIT REPOSITORY
# ============================================================================
# STATUS: Core - Idempotency markers
# PURPOSE: One expiring marker per (action, item, client)
# CREATED: 03 SEP 2026
# ============================================================================
"""
Rate-Limit Repository

A marker ``<action>:<item>:<client>`` exists for the length of the action's
window. While it exists the same client may not repeat the action on the
same item. Expiry is left entirely to the store's TTL handling.
"""

import logging

from core.config import RATE_LIMITS
from core.contracts import InteractionKind
from infrastructure.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

WINDOWS = {
    InteractionKind.LIKE: RATE_LIMITS.like_window_seconds,
    InteractionKind.RATE: RATE_LIMITS.rate_window_seconds,
}


class RateLimitRepository:
    """Repository for rate-limit markers."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def is_marked(self, kind: InteractionKind, item_id: str, client: str) -> bool:
        return bool(await self.store.get(kind.marker_key(item_id, client)))

    async def mark(self, kind: InteractionKind, item_id: str, client: str) -> None:
        await self.store.put(
            kind.marker_key(item_id, client),
            RATE_LIMITS.marker_value,
            ttl_seconds=WINDOWS[kind],
        )
        logger.debug(f"Marked {kind.value}:{item_id} for {client} ({WINDOWS[kind]}s)")
