# backend/catalog_api/routers/delivery_backoffice.py
"""
Backoffice delivery endpoints.

Settings:  GET/POST/PUT weekly settings of a company
Schedules: CRUD for specific-date overrides
Slots:     full availability (no minimum-advance filter) for staff
"""

import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.delivery import (
    DayAvailabilityRead,
    DeliveryScheduleCreate,
    DeliveryScheduleRead,
    DeliveryScheduleUpdate,
    DeliverySettingsCreate,
    DeliverySettingsRead,
    DeliverySettingsUpdate,
    WeekdaySchedule,
    day_availability_read,
)
from ..services.delivery import (
    DateOverride,
    DaySchedule,
    TimeWindow,
    WeeklySchedule,
    get_availability,
    get_delivery_config,
    invalidate_company_cache,
    repository,
)
from ..services.delivery.clock import Clock, get_clock
from ..services.delivery.errors import (
    DeliverySettingsAlreadyExist,
    DeliverySettingsNotFound,
    OverrideAlreadyExists,
    OverrideNotFound,
)
from ..services.delivery.invalidator import get_affected_dates
from ..services.delivery.types import default_week

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delivery/backoffice", tags=["delivery_backoffice"])


def _require_company(db: Session, company_id: int) -> None:
    if not repository.company_exists(db, company_id):
        raise HTTPException(status_code=404, detail="Company not found")


# ──────────────────────────────────────────────────────────────────────────────
# Weekly settings
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/settings/{company_id}", response_model=DeliverySettingsRead)
def get_settings(company_id: int, db: Session = Depends(get_db)):
    _require_company(db, company_id)
    weekly = repository.get_weekly_config(db, company_id)
    if weekly is None:
        raise HTTPException(status_code=404, detail="Delivery settings not found")
    return _settings_read(weekly)


@router.post("/settings", response_model=DeliverySettingsRead, status_code=status.HTTP_201_CREATED)
def create_settings(
    data: DeliverySettingsCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    _require_company(db, data.company_id)
    weekly = _weekly_from_payload(data.company_id, data, current=None)
    try:
        created = repository.create_weekly_config(db, weekly)
    except DeliverySettingsAlreadyExist as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    db.commit()

    invalidate_company_cache(redis, data.company_id)
    logger.info(f"Delivery settings created for company {data.company_id}")
    return _settings_read(created)


@router.put("/settings/{company_id}", response_model=DeliverySettingsRead)
def update_settings(
    company_id: int,
    data: DeliverySettingsUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    _require_company(db, company_id)
    current = repository.get_weekly_config(db, company_id)
    if current is None:
        raise HTTPException(status_code=404, detail="Delivery settings not found")

    weekly = _weekly_from_payload(company_id, data, current=current)
    try:
        updated = repository.update_weekly_config(db, weekly)
    except DeliverySettingsNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()

    # Every cached date may depend on the weekly settings
    invalidate_company_cache(redis, company_id)
    logger.info(f"Delivery settings updated for company {company_id}")
    return _settings_read(updated)


# ──────────────────────────────────────────────────────────────────────────────
# Date overrides
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/schedules/{company_id}", response_model=list[DeliveryScheduleRead])
def list_schedules(
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    future_only: bool = True,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    _require_company(db, company_id)
    overrides = repository.list_overrides(
        db,
        company_id,
        start=start_date,
        end=end_date,
        future_only=future_only,
        today=clock().date(),
    )
    return [_override_read(ovr) for ovr in overrides]


@router.post("/schedules", response_model=DeliveryScheduleRead, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: DeliveryScheduleCreate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    _require_company(db, data.company_id)
    try:
        created = repository.create_override(db, _override_from_payload(data.company_id, data))
    except OverrideAlreadyExists as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    db.commit()

    invalidate_company_cache(redis, data.company_id, get_affected_dates(created))
    logger.info(f"Delivery schedule created for company {data.company_id} on {data.date}")
    return _override_read(created)


@router.put("/schedules/{id}", response_model=DeliveryScheduleRead)
def update_schedule(
    id: int,
    data: DeliveryScheduleUpdate,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    existing = repository.get_override_by_id(db, id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Not found")
    _require_company(db, existing.company_id)

    try:
        updated = repository.update_override(
            db, id, _override_from_payload(existing.company_id, data)
        )
    except OverrideNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except OverrideAlreadyExists as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    db.commit()

    invalidate_company_cache(redis, existing.company_id, get_affected_dates(existing, updated))
    return _override_read(updated)


@router.delete("/schedules/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    id: int,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    existing = repository.get_override_by_id(db, id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Not found")
    _require_company(db, existing.company_id)

    try:
        deleted = repository.delete_override(db, id)
    except OverrideNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    db.commit()

    invalidate_company_cache(redis, deleted.company_id, get_affected_dates(deleted))
    logger.info(f"Delivery schedule {id} deleted for company {deleted.company_id}")


# ──────────────────────────────────────────────────────────────────────────────
# Availability (staff view)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/slots/{company_id}", response_model=list[DayAvailabilityRead])
def get_admin_slots(
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    only_available: bool = False,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    clock: Clock = Depends(get_clock),
):
    """All configured half-days with their counters, minimum advance NOT applied."""
    _require_company(db, company_id)
    config = get_delivery_config()
    start = start_date or clock().date()
    end = end_date or start + timedelta(days=config.default_range_days)

    days = get_availability(
        db, company_id, start, end,
        only_available=only_available,
        redis=redis,
        config=config,
    )
    return [day_availability_read(day) for day in days]


# ── Helpers ──────────────────────────────────────────────────────────────


def _weekly_from_payload(
    company_id: int,
    data: DeliverySettingsUpdate,
    current: WeeklySchedule | None,
) -> WeeklySchedule:
    if data.weekdays is not None:
        days = {
            wd.weekday: DaySchedule(
                enabled=wd.enabled,
                morning=TimeWindow.optional(wd.morning_start, wd.morning_end),
                afternoon=TimeWindow.optional(wd.afternoon_start, wd.afternoon_end),
            )
            for wd in data.weekdays
        }
    elif current is not None:
        days = current.days
    else:
        days = default_week()

    if current is not None:
        min_slots_ahead = current.min_slots_ahead
        max_capacity_morning = current.max_capacity_morning
        max_capacity_afternoon = current.max_capacity_afternoon
    else:
        config = get_delivery_config()
        min_slots_ahead = config.default_min_slots_ahead
        max_capacity_morning = max_capacity_afternoon = config.default_max_capacity

    return WeeklySchedule(
        company_id=company_id,
        min_slots_ahead=_given(data.min_slots_ahead, min_slots_ahead),
        max_capacity_morning=_given(data.max_capacity_morning, max_capacity_morning),
        max_capacity_afternoon=_given(data.max_capacity_afternoon, max_capacity_afternoon),
        days=days,
    )


def _given(value: int | None, fallback: int) -> int:
    return fallback if value is None else value


def _settings_read(weekly: WeeklySchedule) -> DeliverySettingsRead:
    weekdays = []
    for weekday in range(7):
        day = weekly.day(weekday)
        weekdays.append(WeekdaySchedule(
            weekday=weekday,
            enabled=day.enabled,
            morning_start=day.morning.start if day.morning else None,
            morning_end=day.morning.end if day.morning else None,
            afternoon_start=day.afternoon.start if day.afternoon else None,
            afternoon_end=day.afternoon.end if day.afternoon else None,
        ))
    return DeliverySettingsRead(
        company_id=weekly.company_id,
        min_slots_ahead=weekly.min_slots_ahead,
        max_capacity_morning=weekly.max_capacity_morning,
        max_capacity_afternoon=weekly.max_capacity_afternoon,
        weekdays=weekdays,
    )


def _override_from_payload(company_id: int, data: DeliveryScheduleUpdate) -> DateOverride:
    return DateOverride(
        company_id=company_id,
        date=data.date,
        morning_enabled=data.morning_enabled,
        afternoon_enabled=data.afternoon_enabled,
        custom_max_capacity_morning=data.custom_max_capacity_morning,
        custom_max_capacity_afternoon=data.custom_max_capacity_afternoon,
        custom_morning=TimeWindow.optional(data.custom_morning_start, data.custom_morning_end),
        custom_afternoon=TimeWindow.optional(data.custom_afternoon_start, data.custom_afternoon_end),
    )


def _override_read(ovr: DateOverride) -> DeliveryScheduleRead:
    return DeliveryScheduleRead(
        id=ovr.id,
        company_id=ovr.company_id,
        date=ovr.date,
        morning_enabled=ovr.morning_enabled,
        afternoon_enabled=ovr.afternoon_enabled,
        custom_max_capacity_morning=ovr.custom_max_capacity_morning,
        custom_max_capacity_afternoon=ovr.custom_max_capacity_afternoon,
        custom_morning_start=ovr.custom_morning.start if ovr.custom_morning else None,
        custom_morning_end=ovr.custom_morning.end if ovr.custom_morning else None,
        custom_afternoon_start=ovr.custom_afternoon.start if ovr.custom_afternoon else None,
        custom_afternoon_end=ovr.custom_afternoon.end if ovr.custom_afternoon else None,
    )
