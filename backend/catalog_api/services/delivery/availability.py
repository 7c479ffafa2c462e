# backend/catalog_api/services/delivery/availability.py
"""
Availability calculation for delivery half-days.

Takes into account:
- Resolved day schedules (weekly + overrides, cached in Redis when available)
- Slot counters (one batched read per range, never cached)

The minimum-advance rule is applied afterwards by advance.apply_minimum_advance.
"""

import logging
from datetime import date, datetime, timedelta

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from . import repository
from .advance import apply_minimum_advance
from .config import DeliveryConfig, get_delivery_config
from .redis_store import DeliveryRedisStore
from .resolver import date_range, resolve_range
from .types import (
    DayAvailability,
    EffectiveDaySchedule,
    HalfDay,
    SlotAvailability,
    WeeklySchedule,
)

logger = logging.getLogger(__name__)


def calculate_availability(
    schedules: list[EffectiveDaySchedule],
    counts: dict[tuple[date, HalfDay], int],
    only_available: bool = True,
) -> list[DayAvailability]:
    """
    Combine resolved schedules with counter values. Pure.

    Returns days in chronological order, morning before afternoon.
    Days without any listed half-day are left out.
    """
    days: list[DayAvailability] = []

    for schedule in sorted(schedules, key=lambda s: s.date):
        slots: list[SlotAvailability] = []
        for half_day in HalfDay:
            half = schedule.get(half_day)
            if not half.bookable:
                continue

            current_count = counts.get((schedule.date, half_day), 0)
            remaining = max(half.max_capacity - current_count, 0)
            is_available = remaining > 0

            if only_available and not is_available:
                continue

            slots.append(SlotAvailability(
                half_day=half_day,
                window=half.window,
                current_count=current_count,
                max_capacity=half.max_capacity,
                remaining=remaining,
                is_available=is_available,
            ))

        if slots:
            days.append(DayAvailability(date=schedule.date, slots=slots))

    return days


def get_availability(
    db: Session,
    company_id: int,
    start: date,
    end: date,
    only_available: bool = True,
    redis: Redis | None = None,
    config: DeliveryConfig | None = None,
    weekly: WeeklySchedule | None = None,
) -> list[DayAvailability]:
    """Availability for [start, end] without the minimum-advance rule."""
    config = config or get_delivery_config()
    if end < start:
        return []

    schedules = _get_schedules(db, company_id, start, end, config, redis, weekly)
    if not any(schedule.has_bookable for schedule in schedules):
        return []

    counts = repository.get_counters_in_range(db, company_id, start, end)
    return calculate_availability(schedules, counts, only_available)


def get_available_slots(
    db: Session,
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    only_available: bool = True,
    now: datetime | None = None,
    redis: Redis | None = None,
    config: DeliveryConfig | None = None,
) -> list[DayAvailability]:
    """
    Bookable half-days for a company: schedules, counters and minimum advance.

    start_date defaults to today and is never earlier than today;
    end_date defaults to start_date + default_range_days.
    """
    config = config or get_delivery_config()
    now = now or datetime.now()
    today = now.date()

    start = start_date or today
    if start < today:
        start = today
    end = end_date or start + timedelta(days=config.default_range_days)

    weekly = repository.get_weekly_config(db, company_id)
    if weekly is None:
        logger.debug(f"No delivery settings for company {company_id}, nothing bookable")
        return []

    days = get_availability(
        db, company_id, start, end,
        only_available=only_available,
        redis=redis,
        config=config,
        weekly=weekly,
    )
    return apply_minimum_advance(days, weekly.min_slots_ahead, now, config)


# ── Schedules (with cache) ───────────────────────────────────────────────


def _get_schedules(
    db: Session,
    company_id: int,
    start: date,
    end: date,
    config: DeliveryConfig,
    redis: Redis | None,
    weekly: WeeklySchedule | None,
) -> list[EffectiveDaySchedule]:
    """Resolved schedules for the range, using the Redis cache when available."""
    if redis is None:
        return resolve_range(db, company_id, start, end, weekly=weekly)

    store = DeliveryRedisStore(redis, config)
    dates = date_range(start, end)
    try:
        generation = store.get_generation(company_id)
        cached = store.mget_days(company_id, dates, generation)
    except RedisError:
        logger.exception("Delivery cache read failed for company=%s", company_id)
        return resolve_range(db, company_id, start, end, weekly=weekly)

    missing = [dt for dt in dates if cached.get(dt) is None]
    if not missing:
        logger.debug(f"Delivery cache hit for company {company_id}, {len(dates)} days")
        return [cached[dt] for dt in dates]

    # Cache miss: resolve the whole range in one pass and store what was missing
    logger.debug(f"Delivery cache miss for company {company_id}: {len(missing)} of {len(dates)} days")
    # Weekly settings are reloaded after the generation read so the stored
    # schedules are never older than the generation they are filed under
    schedules = resolve_range(db, company_id, start, end)
    missing_set = set(missing)
    try:
        store.store_multiple_days(
            company_id,
            [schedule for schedule in schedules if schedule.date in missing_set],
            generation,
        )
    except RedisError:
        logger.exception("Delivery cache write failed for company=%s", company_id)
    return schedules
