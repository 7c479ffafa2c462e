# backend/catalog_api/services/delivery/invalidator.py
"""
Cache invalidation for resolved day schedules.

Triggers:
✓ Weekly settings created/updated → invalidate all dates of the company
✓ Date override created/updated/deleted → invalidate the affected dates

Does NOT trigger:
✗ Reservation / release (counters are never cached)
"""

import logging
from datetime import date

from redis import Redis
from redis.exceptions import RedisError

from .redis_store import DeliveryRedisStore

logger = logging.getLogger(__name__)


def invalidate_company_cache(
    redis: Redis | None,
    company_id: int,
    dates: list[date] | None = None,
) -> int:
    """
    Invalidate cached schedules for a company.

    Args:
        redis: Redis client, or None when caching is off
        company_id: Company ID
        dates: Specific dates to invalidate,
               or None to invalidate all cached dates

    Returns:
        Number of deleted cache keys
    """
    if redis is None:
        return 0

    store = DeliveryRedisStore(redis)
    try:
        deleted = store.delete_days(company_id, dates)
        # Writes still in flight from older listings go to a stale generation
        store.bump_generation(company_id)
    except RedisError:
        logger.exception("Failed to invalidate delivery cache for company=%s", company_id)
        return 0

    logger.debug(f"Invalidated {deleted} delivery cache keys for company {company_id}")
    return deleted


def get_affected_dates(*overrides) -> list[date]:
    """Distinct dates touched by the given overrides (old and new versions)."""
    return sorted({ovr.date for ovr in overrides if ovr is not None})
