# backend/catalog_api/services/delivery/__init__.py
"""
Delivery-slot scheduling module.

Resolution: weekly settings + date overrides (pure, cached in Redis)
Availability: resolved schedules + slot counters, then minimum advance
Reservation: atomic check-and-increment on the slot counter
"""

from .config import DeliveryConfig, get_delivery_config
from .types import (
    DateOverride,
    DayAvailability,
    DaySchedule,
    EffectiveDaySchedule,
    HalfDay,
    HalfDaySchedule,
    SlotAvailability,
    TimeWindow,
    WeeklySchedule,
)
from .resolver import resolve, resolve_day_schedule, resolve_range
from .availability import calculate_availability, get_availability, get_available_slots
from .advance import apply_minimum_advance, current_half_day
from .reservation import reserve_slot, release_slot
from .redis_store import DeliveryRedisStore
from .invalidator import invalidate_company_cache

__all__ = [
    "DeliveryConfig",
    "get_delivery_config",
    "DateOverride",
    "DayAvailability",
    "DaySchedule",
    "EffectiveDaySchedule",
    "HalfDay",
    "HalfDaySchedule",
    "SlotAvailability",
    "TimeWindow",
    "WeeklySchedule",
    "resolve",
    "resolve_day_schedule",
    "resolve_range",
    "calculate_availability",
    "get_availability",
    "get_available_slots",
    "apply_minimum_advance",
    "current_half_day",
    "reserve_slot",
    "release_slot",
    "DeliveryRedisStore",
    "invalidate_company_cache",
]
