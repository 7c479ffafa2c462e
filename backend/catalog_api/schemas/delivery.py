# backend/catalog_api/schemas/delivery.py
"""
Pydantic schemas for delivery API.
"""

from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from ..services.delivery.types import HalfDay


def _check_window(start: time | None, end: time | None, name: str) -> None:
    if (start is None) != (end is None):
        raise ValueError(f"{name}: start and end must both be set or both be empty")
    if start is not None and start >= end:
        raise ValueError(f"{name}: start must be before end")


# ── Weekly settings ──────────────────────────────────────────────────────


class WeekdaySchedule(BaseModel):
    """One weekday of the weekly settings (0 = Monday, 6 = Sunday)."""
    weekday: int = Field(ge=0, le=6)
    enabled: bool = False
    morning_start: Optional[time] = None
    morning_end: Optional[time] = None
    afternoon_start: Optional[time] = None
    afternoon_end: Optional[time] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_windows(self):
        _check_window(self.morning_start, self.morning_end, "morning")
        _check_window(self.afternoon_start, self.afternoon_end, "afternoon")
        if self.enabled and self.morning_start is None and self.afternoon_start is None:
            raise ValueError("An enabled weekday needs at least one delivery window")
        return self


class DeliverySettingsUpdate(BaseModel):
    """Partial update: omitted fields keep their stored value."""
    min_slots_ahead: Optional[int] = Field(None, ge=0)
    max_capacity_morning: Optional[int] = Field(None, ge=0)
    max_capacity_afternoon: Optional[int] = Field(None, ge=0)
    weekdays: Optional[list[WeekdaySchedule]] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_unique_weekdays(self):
        if self.weekdays is not None:
            seen = [wd.weekday for wd in self.weekdays]
            if len(seen) != len(set(seen)):
                raise ValueError("Each weekday may appear only once")
        return self


class DeliverySettingsCreate(DeliverySettingsUpdate):
    """Omitted fields take the defaults from DeliveryConfig and the default week."""
    company_id: int


class DeliverySettingsRead(BaseModel):
    company_id: int
    min_slots_ahead: int
    max_capacity_morning: int
    max_capacity_afternoon: int
    weekdays: list[WeekdaySchedule]

    model_config = {"from_attributes": True}


# ── Date overrides ───────────────────────────────────────────────────────


class DeliveryScheduleUpdate(BaseModel):
    date: date
    morning_enabled: bool = True
    afternoon_enabled: bool = True
    custom_max_capacity_morning: Optional[int] = Field(None, ge=0)
    custom_max_capacity_afternoon: Optional[int] = Field(None, ge=0)
    custom_morning_start: Optional[time] = None
    custom_morning_end: Optional[time] = None
    custom_afternoon_start: Optional[time] = None
    custom_afternoon_end: Optional[time] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_windows(self):
        _check_window(self.custom_morning_start, self.custom_morning_end, "custom morning")
        _check_window(self.custom_afternoon_start, self.custom_afternoon_end, "custom afternoon")
        return self


class DeliveryScheduleCreate(DeliveryScheduleUpdate):
    company_id: int


class DeliveryScheduleRead(DeliveryScheduleCreate):
    id: int


# ── Availability ─────────────────────────────────────────────────────────


class SlotAvailabilityRead(BaseModel):
    slot_type: HalfDay
    slot_type_name: str
    time_range: str  # "HH:MM - HH:MM"
    start_time: time
    end_time: time
    is_available: bool
    current_capacity: int
    max_capacity: int
    remaining_capacity: int

    model_config = {"from_attributes": True}


class DayAvailabilityRead(BaseModel):
    date: date
    slots: list[SlotAvailabilityRead]

    model_config = {"from_attributes": True}


class SlotRequest(BaseModel):
    """A specific (company, date, half-day)."""
    company_id: int
    date: date
    slot_type: HalfDay


class ReserveSlotRequest(SlotRequest):
    order_id: Optional[int] = Field(None, description="Opaque, only logged")


class ReleaseSlotRequest(SlotRequest):
    order_id: Optional[int] = Field(None, description="Opaque, only logged")


class ReserveSlotResponse(BaseModel):
    success: bool
    message: str


class SlotAvailabilityCheckResponse(BaseModel):
    is_available: bool
    remaining_capacity: int = 0
    max_capacity: int = 0
    message: str


# ── Domain → schema ──────────────────────────────────────────────────────


def slot_availability_read(slot) -> SlotAvailabilityRead:
    return SlotAvailabilityRead(
        slot_type=slot.half_day,
        slot_type_name=slot.label,
        time_range=slot.time_range,
        start_time=slot.window.start,
        end_time=slot.window.end,
        is_available=slot.is_available,
        current_capacity=slot.current_count,
        max_capacity=slot.max_capacity,
        remaining_capacity=slot.remaining,
    )


def day_availability_read(day) -> DayAvailabilityRead:
    return DayAvailabilityRead(
        date=day.date,
        slots=[slot_availability_read(slot) for slot in day.slots],
    )
