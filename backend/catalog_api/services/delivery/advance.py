# backend/catalog_api/services/delivery/advance.py
"""
Minimum-advance filter.

Works on the flattened chronological sequence of listed half-days, so the
rule spans days regardless of which weekdays are enabled.
"""

from datetime import date, datetime

from .config import DeliveryConfig, get_delivery_config
from .types import DayAvailability, HalfDay, SlotAvailability


def current_half_day(now: datetime, config: DeliveryConfig | None = None) -> tuple[date, HalfDay]:
    """(today, morning) before the afternoon cut-off, else (today, afternoon)."""
    config = config or get_delivery_config()
    if now.time() < config.afternoon_cutoff_time:
        return now.date(), HalfDay.MORNING
    return now.date(), HalfDay.AFTERNOON


def apply_minimum_advance(
    days: list[DayAvailability],
    min_slots_ahead: int,
    now: datetime,
    config: DeliveryConfig | None = None,
) -> list[DayAvailability]:
    """
    Drop the first min_slots_ahead half-days counted from "now".

    Half-days earlier than the current one are dropped first. The count
    starts at the current half-day when it is in the sequence, otherwise at
    the front of what is left. Skipping past the end leaves nothing bookable.
    """
    current = current_half_day(now, config)
    current_key = (current[0], current[1].order)

    flat: list[tuple[date, SlotAvailability]] = sorted(
        (
            (day.date, slot)
            for day in days
            for slot in day.slots
            if (day.date, slot.half_day.order) >= current_key
        ),
        key=lambda entry: (entry[0], entry[1].half_day.order),
    )

    start_index = 0
    for index, (dt, slot) in enumerate(flat):
        if (dt, slot.half_day) == current:
            start_index = index
            break

    remaining = flat[start_index + max(min_slots_ahead, 0):]

    grouped: dict[date, list[SlotAvailability]] = {}
    for dt, slot in remaining:
        grouped.setdefault(dt, []).append(slot)

    return [DayAvailability(date=dt, slots=slots) for dt, slots in grouped.items()]
