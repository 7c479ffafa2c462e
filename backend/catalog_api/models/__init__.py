from .tables import (
    Base,
    Company,
    DeliverySchedule,
    DeliverySettings,
    DeliverySlot,
    DeliveryWeekday,
    metadata,
)

__all__ = [
    "Base",
    "Company",
    "DeliverySchedule",
    "DeliverySettings",
    "DeliverySlot",
    "DeliveryWeekday",
    "metadata",
]
