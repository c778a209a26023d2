# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Store access layer
# PURPOSE: Key naming and value parsing for counters and rate-limit markers
# CREATED: 03 SEP 2026
# ============================================================================
"""
Repositories Module

Usage:
    from repositories import CounterRepository, RateLimitRepository

    counters = CounterRepository(counts_store)
    likes = await counters.increment(CounterKind.LIKES, "42")
"""

from .counter_repo import CounterRepository
from .rate_limit_repo import RateLimitRepository

__all__ = [
    "CounterRepository",
    "RateLimitRepository",
]
