# backend/catalog_api/services/delivery/repository.py
"""
Persistence for delivery settings, date overrides and slot counters.

Functions flush but never commit: the caller owns the transaction.
Rows are mapped to the frozen domain types in .types on the way out.
"""

from datetime import date

from sqlalchemy import update, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import (
    Company,
    DeliverySchedule,
    DeliverySettings,
    DeliverySlot,
    DeliveryWeekday,
)
from .errors import (
    DeliverySettingsAlreadyExist,
    DeliverySettingsNotFound,
    OverrideAlreadyExists,
    OverrideNotFound,
)
from .types import DateOverride, DaySchedule, HalfDay, TimeWindow, WeeklySchedule


def company_exists(db: Session, company_id: int) -> bool:
    """Active company lookup."""
    return (
        db.query(Company.id)
        .filter(Company.id == company_id, Company.is_active == 1)
        .first()
        is not None
    )


# ── Weekly settings ──────────────────────────────────────────────────────


def get_weekly_config(db: Session, company_id: int) -> WeeklySchedule | None:
    row = _get_settings_row(db, company_id)
    if row is None:
        return None
    return _to_weekly(row)


def create_weekly_config(db: Session, weekly: WeeklySchedule) -> WeeklySchedule:
    """Create settings for a company. Raises DeliverySettingsAlreadyExist."""
    if _get_settings_row(db, weekly.company_id) is not None:
        raise DeliverySettingsAlreadyExist(weekly.company_id)

    row = DeliverySettings(company_id=weekly.company_id)
    _apply_weekly(row, weekly)
    db.add(row)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise DeliverySettingsAlreadyExist(weekly.company_id)
    return _to_weekly(row)


def update_weekly_config(db: Session, weekly: WeeklySchedule) -> WeeklySchedule:
    """Replace settings of a company. Raises DeliverySettingsNotFound."""
    row = _get_settings_row(db, weekly.company_id)
    if row is None:
        raise DeliverySettingsNotFound(weekly.company_id)

    _apply_weekly(row, weekly)
    db.flush()
    return _to_weekly(row)


def upsert_weekly_config(db: Session, weekly: WeeklySchedule) -> WeeklySchedule:
    if _get_settings_row(db, weekly.company_id) is None:
        return create_weekly_config(db, weekly)
    return update_weekly_config(db, weekly)


# ── Date overrides ───────────────────────────────────────────────────────


def get_override(db: Session, company_id: int, target_date: date) -> DateOverride | None:
    row = (
        db.query(DeliverySchedule)
        .filter(
            DeliverySchedule.company_id == company_id,
            DeliverySchedule.date == target_date,
        )
        .first()
    )
    return _to_override(row) if row else None


def get_override_by_id(db: Session, override_id: int) -> DateOverride | None:
    row = db.get(DeliverySchedule, override_id)
    return _to_override(row) if row else None


def get_overrides_in_range(
    db: Session,
    company_id: int,
    start: date,
    end: date,
) -> dict[date, DateOverride]:
    """Batch read of overrides for [start, end], keyed by date."""
    rows = (
        db.query(DeliverySchedule)
        .filter(
            DeliverySchedule.company_id == company_id,
            DeliverySchedule.date >= start,
            DeliverySchedule.date <= end,
        )
        .all()
    )
    return {row.date: _to_override(row) for row in rows}


def list_overrides(
    db: Session,
    company_id: int,
    start: date | None = None,
    end: date | None = None,
    future_only: bool = True,
    today: date | None = None,
) -> list[DateOverride]:
    """Overrides of a company ordered by date."""
    query = db.query(DeliverySchedule).filter(DeliverySchedule.company_id == company_id)
    if start is not None:
        query = query.filter(DeliverySchedule.date >= start)
    if end is not None:
        query = query.filter(DeliverySchedule.date <= end)
    if future_only:
        query = query.filter(DeliverySchedule.date >= (today or date.today()))
    return [_to_override(row) for row in query.order_by(DeliverySchedule.date).all()]


def create_override(db: Session, override: DateOverride) -> DateOverride:
    """
    Create an override. At most one per (company, date).

    Raises:
        OverrideAlreadyExists: on a duplicate date, whether caught by the
            pre-check or by the unique constraint.
    """
    if get_override(db, override.company_id, override.date) is not None:
        raise OverrideAlreadyExists(override.company_id, override.date)

    row = DeliverySchedule(company_id=override.company_id, date=override.date)
    _apply_override(row, override)
    db.add(row)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise OverrideAlreadyExists(override.company_id, override.date)
    return _to_override(row)


def update_override(db: Session, override_id: int, override: DateOverride) -> DateOverride:
    row = db.get(DeliverySchedule, override_id)
    if row is None:
        raise OverrideNotFound(override_id)

    row.date = override.date
    _apply_override(row, override)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise OverrideAlreadyExists(override.company_id, override.date)
    return _to_override(row)


def upsert_override(db: Session, override: DateOverride) -> DateOverride:
    existing = get_override(db, override.company_id, override.date)
    if existing is None:
        return create_override(db, override)
    return update_override(db, existing.id, override)


def delete_override(db: Session, override_id: int) -> DateOverride:
    """Delete an override and return what was removed."""
    row = db.get(DeliverySchedule, override_id)
    if row is None:
        raise OverrideNotFound(override_id)
    deleted = _to_override(row)
    db.delete(row)
    db.flush()
    return deleted


# ── Slot counters ────────────────────────────────────────────────────────


def get_counter(db: Session, company_id: int, target_date: date, half_day: HalfDay) -> int:
    """Current reservations; 0 when the counter row does not exist yet."""
    count = (
        db.query(DeliverySlot.current_count)
        .filter(
            DeliverySlot.company_id == company_id,
            DeliverySlot.date == target_date,
            DeliverySlot.slot_type == half_day.value,
        )
        .scalar()
    )
    return count or 0


def get_counters_in_range(
    db: Session,
    company_id: int,
    start: date,
    end: date,
) -> dict[tuple[date, HalfDay], int]:
    """Batch read of counters for [start, end]. Missing keys mean 0."""
    rows = (
        db.query(DeliverySlot.date, DeliverySlot.slot_type, DeliverySlot.current_count)
        .filter(
            DeliverySlot.company_id == company_id,
            DeliverySlot.date >= start,
            DeliverySlot.date <= end,
        )
        .all()
    )
    return {(row_date, HalfDay(slot_type)): count for row_date, slot_type, count in rows}


def ensure_counter(db: Session, company_id: int, target_date: date, half_day: HalfDay) -> None:
    """Create the counter row at zero if missing (INSERT ... ON CONFLICT DO NOTHING)."""
    values = {
        "company_id": company_id,
        "date": target_date,
        "slot_type": half_day.value,
        "current_count": 0,
    }
    dialect = db.get_bind().dialect.name

    if dialect in ("sqlite", "postgresql"):
        insert = sqlite_insert if dialect == "sqlite" else pg_insert
        db.execute(
            insert(DeliverySlot)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["company_id", "date", "slot_type"])
        )
        return

    if _counter_exists(db, company_id, target_date, half_day):
        return
    try:
        with db.begin_nested():
            db.add(DeliverySlot(**values))
    except IntegrityError:
        # Created concurrently; the row is there now
        pass


def _counter_exists(db: Session, company_id: int, target_date: date, half_day: HalfDay) -> bool:
    return (
        db.query(DeliverySlot.id)
        .filter(
            DeliverySlot.company_id == company_id,
            DeliverySlot.date == target_date,
            DeliverySlot.slot_type == half_day.value,
        )
        .first()
        is not None
    )


def conditional_increment(
    db: Session,
    company_id: int,
    target_date: date,
    half_day: HalfDay,
    max_capacity: int,
) -> bool:
    """
    UPDATE ... SET current_count = current_count + 1 WHERE current_count < max_capacity.

    Returns True when exactly one row was incremented.
    """
    result = db.execute(
        update(DeliverySlot)
        .where(
            DeliverySlot.company_id == company_id,
            DeliverySlot.date == target_date,
            DeliverySlot.slot_type == half_day.value,
            DeliverySlot.current_count < max_capacity,
        )
        .values(
            current_count=DeliverySlot.current_count + 1,
            updated_at=func.now(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def decrement(db: Session, company_id: int, target_date: date, half_day: HalfDay) -> bool:
    """Floor-clamped decrement. Returns False when there was nothing to release."""
    result = db.execute(
        update(DeliverySlot)
        .where(
            DeliverySlot.company_id == company_id,
            DeliverySlot.date == target_date,
            DeliverySlot.slot_type == half_day.value,
            DeliverySlot.current_count > 0,
        )
        .values(
            current_count=DeliverySlot.current_count - 1,
            updated_at=func.now(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


# ── Mapping helpers ──────────────────────────────────────────────────────


def _get_settings_row(db: Session, company_id: int) -> DeliverySettings | None:
    return (
        db.query(DeliverySettings)
        .filter(DeliverySettings.company_id == company_id)
        .first()
    )


def _to_weekly(row: DeliverySettings) -> WeeklySchedule:
    days = {
        wd.weekday: DaySchedule(
            enabled=bool(wd.enabled),
            morning=TimeWindow.optional(wd.morning_start, wd.morning_end),
            afternoon=TimeWindow.optional(wd.afternoon_start, wd.afternoon_end),
        )
        for wd in row.weekdays
    }
    return WeeklySchedule(
        company_id=row.company_id,
        min_slots_ahead=row.min_slots_ahead,
        max_capacity_morning=row.max_capacity_morning,
        max_capacity_afternoon=row.max_capacity_afternoon,
        days=days,
    )


def _apply_weekly(row: DeliverySettings, weekly: WeeklySchedule) -> None:
    row.min_slots_ahead = weekly.min_slots_ahead
    row.max_capacity_morning = weekly.max_capacity_morning
    row.max_capacity_afternoon = weekly.max_capacity_afternoon

    existing = {wd.weekday: wd for wd in row.weekdays}
    for weekday in range(7):
        day = weekly.day(weekday)
        wd = existing.get(weekday)
        if wd is None:
            wd = DeliveryWeekday(weekday=weekday)
            row.weekdays.append(wd)
        wd.enabled = day.enabled
        wd.morning_start = day.morning.start if day.morning else None
        wd.morning_end = day.morning.end if day.morning else None
        wd.afternoon_start = day.afternoon.start if day.afternoon else None
        wd.afternoon_end = day.afternoon.end if day.afternoon else None


def _to_override(row: DeliverySchedule) -> DateOverride:
    return DateOverride(
        id=row.id,
        company_id=row.company_id,
        date=row.date,
        morning_enabled=bool(row.morning_enabled),
        afternoon_enabled=bool(row.afternoon_enabled),
        custom_max_capacity_morning=row.custom_max_capacity_morning,
        custom_max_capacity_afternoon=row.custom_max_capacity_afternoon,
        custom_morning=TimeWindow.optional(row.custom_morning_start, row.custom_morning_end),
        custom_afternoon=TimeWindow.optional(row.custom_afternoon_start, row.custom_afternoon_end),
    )


def _apply_override(row: DeliverySchedule, override: DateOverride) -> None:
    row.morning_enabled = override.morning_enabled
    row.afternoon_enabled = override.afternoon_enabled
    row.custom_max_capacity_morning = override.custom_max_capacity_morning
    row.custom_max_capacity_afternoon = override.custom_max_capacity_afternoon
    morning = override.custom_morning
    afternoon = override.custom_afternoon
    row.custom_morning_start = morning.start if morning else None
    row.custom_morning_end = morning.end if morning else None
    row.custom_afternoon_start = afternoon.start if afternoon else None
    row.custom_afternoon_end = afternoon.end if afternoon else None
