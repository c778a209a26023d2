# ============================================================================
# INTERACTION SERVICE
# ============================================================================
# STATUS: Domain service - Likes and ratings
# PURPOSE: Rate-limited counter updates and the incremental rating average
# CREATED: 05 SEP 2026
# ============================================================================
"""
InteractionService

Business rules for likes and ratings:
- one like per client per item per day
- one rating per client per item per week
- the stored rating is a running mean updated incrementally:

      new_count = old_count + 1
      new_avg   = rating                                   if old_count == 0
                  (old_avg * old_count + rating) / new_count otherwise

  rounded to one decimal for storage and response. Because the stored
  average is already rounded, small drift accumulates over many ratings.
  That approximation is accepted; the average is never recomputed from
  history (there is none).

Validation happens before any store access. Counter writes are
read-modify-write with last-write-wins across concurrent clients.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Tuple

from core.contracts import CounterKind, InteractionKind
from core.errors import AlreadyRated, InvalidRequest, RateLimited
from core.logging import get_logger
from repositories import CounterRepository, RateLimitRepository

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def parse_rating(value: Any) -> int:
    """
    Validate a rating: an integer in [1, 5].

    Accepts ints, integral floats, and numeric strings. Booleans, fractions,
    and anything non-numeric are rejected.
    """
    if value is None or isinstance(value, bool):
        raise InvalidRequest("Invalid rating (must be 1-5)")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidRequest("Invalid rating (must be 1-5)")
    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidRequest("Invalid rating (must be 1-5)")
    rating = int(number)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRequest("Invalid rating (must be 1-5)")
    return rating


def round_rating(value: float) -> float:
    """One decimal digit, halves rounded away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def next_average(old_average: float, old_count: int, rating: int) -> Tuple[float, int]:
    """Incremental mean step; returns (rounded average, new count)."""
    new_count = old_count + 1
    if old_count == 0:
        average = float(rating)
    else:
        average = (old_average * old_count + rating) / new_count
    return round_rating(average), new_count


class InteractionService:
    """Likes and ratings."""

    def __init__(self, counter_repo: CounterRepository, rate_limit_repo: RateLimitRepository):
        self.counter_repo = counter_repo
        self.rate_limit_repo = rate_limit_repo

    async def like(self, item_id: str, client: str) -> int:
        """
        Add one like for ``item_id`` from ``client``.

        Returns:
            The new like total.

        Raises:
            InvalidRequest: empty item id.
            RateLimited: this client already liked this item within the window.
        """
        item_id = str(item_id or "").strip()
        if not item_id:
            raise InvalidRequest("Missing id")

        if await self.rate_limit_repo.is_marked(InteractionKind.LIKE, item_id, client):
            logger.info(f"Like rejected, rate limited: item={item_id}")
            raise RateLimited()

        await self.rate_limit_repo.mark(InteractionKind.LIKE, item_id, client)
        likes = await self.counter_repo.increment(CounterKind.LIKES, item_id)

        logger.info(f"Like accepted: item={item_id} likes={likes}")
        return likes

    async def rate(self, item_id: str, rating: Any, client: str) -> Tuple[float, int]:
        """
        Record a 1-5 rating for ``item_id`` from ``client``.

        Returns:
            (new average rounded to one decimal, new rating count)

        Raises:
            InvalidRequest: empty item id or rating outside [1, 5].
            AlreadyRated: this client rated this item within the window.
        """
        item_id = str(item_id or "").strip()
        if not item_id:
            raise InvalidRequest("Invalid rating (must be 1-5)")
        value = parse_rating(rating)

        if await self.rate_limit_repo.is_marked(InteractionKind.RATE, item_id, client):
            logger.info(f"Rating rejected, already rated: item={item_id}")
            raise AlreadyRated()

        await self.rate_limit_repo.mark(InteractionKind.RATE, item_id, client)

        old_average, old_count = await self.counter_repo.get_rating(item_id)
        average, count = next_average(old_average, old_count, value)
        await self.counter_repo.put_rating(item_id, average, count)

        logger.info(f"Rating updated: item={item_id} rating={value} average={average} count={count}")
        return average, count
