# backend/catalog_api/services/delivery/errors.py
"""
Domain errors raised by the delivery engine.

Capacity exhaustion and missing configuration are NOT errors:
reserve_slot returns False and availability comes back empty.
"""


class DeliveryError(Exception):
    """Base class for delivery engine errors."""


class DeliverySettingsNotFound(DeliveryError):
    def __init__(self, company_id: int):
        self.company_id = company_id
        super().__init__(f"No delivery settings for company {company_id}")


class DeliverySettingsAlreadyExist(DeliveryError):
    def __init__(self, company_id: int):
        self.company_id = company_id
        super().__init__(f"Delivery settings already exist for company {company_id}")


class OverrideNotFound(DeliveryError):
    def __init__(self, override_id: int):
        self.override_id = override_id
        super().__init__(f"Delivery schedule {override_id} not found")


class OverrideAlreadyExists(DeliveryError):
    def __init__(self, company_id: int, target_date):
        self.company_id = company_id
        self.date = target_date
        super().__init__(
            f"A delivery schedule already exists for company {company_id} on {target_date.isoformat()}"
        )
