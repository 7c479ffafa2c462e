# backend/catalog_api/services/delivery/types.py
"""
Domain types for delivery scheduling.

Weekly defaults are kept as a map weekday (0 = Monday .. 6 = Sunday) → DaySchedule.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from .config import format_window, format_time, parse_time


class HalfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"

    @property
    def label(self) -> str:
        return "Morning" if self is HalfDay.MORNING else "Afternoon"

    @property
    def order(self) -> int:
        return 0 if self is HalfDay.MORNING else 1


HALF_DAYS = (HalfDay.MORNING, HalfDay.AFTERNOON)

WEEKDAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


@dataclass(frozen=True)
class TimeWindow:
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Window start must be before end, got {format_window(self.start, self.end)}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeWindow":
        return cls(parse_time(start), parse_time(end))

    @classmethod
    def optional(cls, start: time | None, end: time | None) -> "TimeWindow | None":
        """Build a window only when both ends are set."""
        if start is None or end is None:
            return None
        return cls(start, end)

    @property
    def label(self) -> str:
        return format_window(self.start, self.end)


@dataclass(frozen=True)
class DaySchedule:
    """Weekly default for one weekday."""
    enabled: bool = False
    morning: TimeWindow | None = None
    afternoon: TimeWindow | None = None

    def __post_init__(self):
        if self.enabled and self.morning is None and self.afternoon is None:
            raise ValueError("An enabled weekday needs at least one delivery window")

    def window(self, half_day: HalfDay) -> TimeWindow | None:
        return self.morning if half_day is HalfDay.MORNING else self.afternoon


CLOSED_DAY = DaySchedule()


def default_week() -> dict[int, DaySchedule]:
    """Weekly defaults for a company that has not customised its days."""
    workday = DaySchedule(
        enabled=True,
        morning=TimeWindow.from_strings("09:00", "13:00"),
        afternoon=TimeWindow.from_strings("14:00", "18:00"),
    )
    week = {weekday: workday for weekday in range(5)}
    week[5] = DaySchedule(enabled=False, morning=TimeWindow.from_strings("09:00", "12:00"))
    week[6] = CLOSED_DAY
    return week


@dataclass(frozen=True)
class WeeklySchedule:
    """Per-company weekly configuration."""
    company_id: int
    min_slots_ahead: int
    max_capacity_morning: int
    max_capacity_afternoon: int
    days: dict[int, DaySchedule] = field(default_factory=default_week)

    def __post_init__(self):
        if self.min_slots_ahead < 0:
            raise ValueError("min_slots_ahead must be >= 0")
        if self.max_capacity_morning < 0 or self.max_capacity_afternoon < 0:
            raise ValueError("Capacities must be >= 0")
        if any(weekday not in range(7) for weekday in self.days):
            raise ValueError("Weekday keys must be in 0..6")

    def day(self, weekday: int) -> DaySchedule:
        return self.days.get(weekday, CLOSED_DAY)

    def default_capacity(self, half_day: HalfDay) -> int:
        if half_day is HalfDay.MORNING:
            return self.max_capacity_morning
        return self.max_capacity_afternoon


@dataclass(frozen=True)
class DateOverride:
    """Specific-date exception to the weekly default."""
    company_id: int
    date: date
    morning_enabled: bool = True
    afternoon_enabled: bool = True
    custom_max_capacity_morning: int | None = None
    custom_max_capacity_afternoon: int | None = None
    custom_morning: TimeWindow | None = None
    custom_afternoon: TimeWindow | None = None
    id: int | None = None

    def __post_init__(self):
        for capacity in (self.custom_max_capacity_morning, self.custom_max_capacity_afternoon):
            if capacity is not None and capacity < 0:
                raise ValueError("Custom capacities must be >= 0")

    def enabled(self, half_day: HalfDay) -> bool:
        if half_day is HalfDay.MORNING:
            return self.morning_enabled
        return self.afternoon_enabled

    def custom_capacity(self, half_day: HalfDay) -> int | None:
        if half_day is HalfDay.MORNING:
            return self.custom_max_capacity_morning
        return self.custom_max_capacity_afternoon

    def custom_window(self, half_day: HalfDay) -> TimeWindow | None:
        if half_day is HalfDay.MORNING:
            return self.custom_morning
        return self.custom_afternoon


# ── Resolved schedules ───────────────────────────────────────────────────


@dataclass(frozen=True)
class HalfDaySchedule:
    enabled: bool = False
    window: TimeWindow | None = None
    max_capacity: int = 0

    @property
    def bookable(self) -> bool:
        """Enabled with a window. Capacity is checked separately."""
        return self.enabled and self.window is not None

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "start": format_time(self.window.start) if self.window else None,
            "end": format_time(self.window.end) if self.window else None,
            "max_capacity": self.max_capacity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HalfDaySchedule":
        window = None
        if data.get("start") and data.get("end"):
            window = TimeWindow.from_strings(data["start"], data["end"])
        return cls(
            enabled=bool(data.get("enabled")),
            window=window,
            max_capacity=int(data.get("max_capacity") or 0),
        )


@dataclass(frozen=True)
class EffectiveDaySchedule:
    date: date
    morning: HalfDaySchedule = HalfDaySchedule()
    afternoon: HalfDaySchedule = HalfDaySchedule()

    def get(self, half_day: HalfDay) -> HalfDaySchedule:
        return self.morning if half_day is HalfDay.MORNING else self.afternoon

    @property
    def has_bookable(self) -> bool:
        return self.morning.bookable or self.afternoon.bookable

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "morning": self.morning.to_dict(),
            "afternoon": self.afternoon.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EffectiveDaySchedule":
        return cls(
            date=date.fromisoformat(data["date"]),
            morning=HalfDaySchedule.from_dict(data.get("morning") or {}),
            afternoon=HalfDaySchedule.from_dict(data.get("afternoon") or {}),
        )


# ── Availability ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SlotAvailability:
    half_day: HalfDay
    window: TimeWindow
    current_count: int
    max_capacity: int
    remaining: int
    is_available: bool

    @property
    def label(self) -> str:
        return self.half_day.label

    @property
    def time_range(self) -> str:
        return self.window.label


@dataclass(frozen=True)
class DayAvailability:
    date: date
    slots: list[SlotAvailability] = field(default_factory=list)

    def slot(self, half_day: HalfDay) -> SlotAvailability | None:
        for slot in self.slots:
            if slot.half_day is half_day:
                return slot
        return None
