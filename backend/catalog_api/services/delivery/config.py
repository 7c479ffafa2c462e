# backend/catalog_api/services/delivery/config.py
"""
Delivery engine configuration.
"""

from dataclasses import dataclass
from datetime import time
from functools import lru_cache


@dataclass(frozen=True)
class DeliveryConfig:
    """
    Configuration for the delivery-slot engine.

    Attributes:
        default_range_days: Days shown when the caller gives no end date
        afternoon_cutoff: "HH:MM" from which "now" counts as the afternoon half-day
        cache_ttl_seconds: Redis TTL for resolved day schedules
        default_min_slots_ahead: min_slots_ahead for newly created settings
        default_max_capacity: Per half-day ceiling for newly created settings
    """
    default_range_days: int = 30
    afternoon_cutoff: str = "13:00"
    cache_ttl_seconds: int = 86400  # 24 hours
    default_min_slots_ahead: int = 2
    default_max_capacity: int = 10

    def __post_init__(self):
        """Validate configuration."""
        if self.default_range_days < 0:
            raise ValueError(f"default_range_days must be >= 0, got {self.default_range_days}")
        if self.default_min_slots_ahead < 0:
            raise ValueError(f"default_min_slots_ahead must be >= 0, got {self.default_min_slots_ahead}")
        if self.default_max_capacity < 0:
            raise ValueError(f"default_max_capacity must be >= 0, got {self.default_max_capacity}")
        time_str_to_minutes(self.afternoon_cutoff)

    @property
    def afternoon_cutoff_time(self) -> time:
        """Cut-off as a time-of-day."""
        return parse_time(self.afternoon_cutoff)


@lru_cache
def get_delivery_config() -> DeliveryConfig:
    """
    Get delivery configuration (singleton).
    """
    return DeliveryConfig()


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    try:
        hour_str, minute_str = value.split(":")[:2]
        hour, minute = int(hour_str), int(minute_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return hour * 60 + minute


def parse_time(value: str) -> time:
    minutes = time_str_to_minutes(value)
    return time(minutes // 60, minutes % 60)


def format_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def format_window(start: time, end: time) -> str:
    """Format a window as "HH:MM - HH:MM"."""
    return f"{format_time(start)} - {format_time(end)}"
