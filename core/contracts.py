# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums and key naming
# PURPOSE: Counter kinds, interaction kinds, and their store key formats
# CREATED: 02 SEP 2026
# ============================================================================
"""
Base contracts for the edge API.

These define the key names that cross the boundary into the
key-value stores. Both stores are shared with other deployments of the
service, so the formats here are a compatibility contract:

    counts:     likes:<id>  downloads:<id>  rating:<id>  rating_count:<id>
    ratelimit:  like:<id>:<client>  rate:<id>:<client>
"""

from enum import Enum


class CounterKind(str, Enum):
    """
    Live counters kept per catalog item.

    Each kind is an independent key; there is no multi-key transaction.
    """
    LIKES = "likes"
    DOWNLOADS = "downloads"
    RATING = "rating"              # running average, one fraction digit
    RATING_COUNT = "rating_count"  # number of ratings in the average

    def key(self, item_id: str) -> str:
        return f"{self.value}:{item_id}"


class InteractionKind(str, Enum):
    """Rate-limited user actions."""
    LIKE = "like"
    RATE = "rate"

    def marker_key(self, item_id: str, client: str) -> str:
        return f"{self.value}:{item_id}:{client}"


__all__ = ["CounterKind", "InteractionKind"]
