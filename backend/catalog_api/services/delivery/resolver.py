# backend/catalog_api/services/delivery/resolver.py
"""
Schedule resolution: weekly settings + date override → effective day schedule.

Contains:
✓ weekday defaults (enabled flag, windows, default capacities)
✓ date overrides (enabled flags, custom windows, custom capacities)

Does NOT contain:
✗ Slot counters (see availability / reservation)
✗ Minimum advance (see advance)
"""

from datetime import date, timedelta

from sqlalchemy.orm import Session

from . import repository
from .types import (
    DateOverride,
    EffectiveDaySchedule,
    HalfDay,
    HalfDaySchedule,
    WeeklySchedule,
)


def resolve_day_schedule(
    weekly: WeeklySchedule | None,
    override: DateOverride | None,
    target_date: date,
) -> EffectiveDaySchedule:
    """
    Merge weekly defaults and an optional override for one date. Pure.

    No weekly config → everything disabled.
    """
    if weekly is None:
        return EffectiveDaySchedule(date=target_date)

    day = weekly.day(target_date.weekday())
    resolved: dict[HalfDay, HalfDaySchedule] = {}

    for half_day in HalfDay:
        if override is not None:
            custom_capacity = override.custom_capacity(half_day)
            resolved[half_day] = HalfDaySchedule(
                enabled=override.enabled(half_day),
                window=override.custom_window(half_day) or day.window(half_day),
                max_capacity=(
                    custom_capacity
                    if custom_capacity is not None
                    else weekly.default_capacity(half_day)
                ),
            )
        else:
            resolved[half_day] = HalfDaySchedule(
                enabled=day.enabled,
                window=day.window(half_day),
                max_capacity=weekly.default_capacity(half_day),
            )

    return EffectiveDaySchedule(
        date=target_date,
        morning=resolved[HalfDay.MORNING],
        afternoon=resolved[HalfDay.AFTERNOON],
    )


def resolve(db: Session, company_id: int, target_date: date) -> EffectiveDaySchedule:
    """Resolve one date straight from the database."""
    weekly = repository.get_weekly_config(db, company_id)
    if weekly is None:
        return EffectiveDaySchedule(date=target_date)
    override = repository.get_override(db, company_id, target_date)
    return resolve_day_schedule(weekly, override, target_date)


def resolve_range(
    db: Session,
    company_id: int,
    start: date,
    end: date,
    weekly: WeeklySchedule | None = None,
) -> list[EffectiveDaySchedule]:
    """
    Resolve every date in [start, end] with one batched override read.

    weekly can be passed when the caller already loaded it.
    """
    dates = date_range(start, end)
    if weekly is None:
        weekly = repository.get_weekly_config(db, company_id)
    if weekly is None:
        return [EffectiveDaySchedule(date=dt) for dt in dates]

    overrides = repository.get_overrides_in_range(db, company_id, start, end)
    return [resolve_day_schedule(weekly, overrides.get(dt), dt) for dt in dates]


def date_range(start: date, end: date) -> list[date]:
    """Dates in [start, end]; empty when end < start."""
    dates = []
    current = start
    while current <= end:
        dates.append(current)
        current += timedelta(days=1)
    return dates
