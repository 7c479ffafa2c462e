# backend/catalog_api/services/delivery/clock.py
"""
Injectable clock. Routers depend on get_clock so tests can pin "now".
"""

from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Local wall-clock time."""
    return datetime.now()


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always returns the same moment."""
    return lambda: moment


def get_clock() -> Clock:
    """FastAPI dependency."""
    return system_clock
