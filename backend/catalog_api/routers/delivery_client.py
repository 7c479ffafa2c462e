# backend/catalog_api/routers/delivery_client.py
"""
Delivery endpoints used by the ordering flow.

GET  /delivery/slots          - Bookable half-days (minimum advance applied)
POST /delivery/slots/check    - Capacity of one specific half-day
POST /delivery/slots/reserve  - Atomic reservation (called at order creation)
POST /delivery/slots/release  - Give capacity back (order cancelled)
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.delivery import (
    DayAvailabilityRead,
    ReleaseSlotRequest,
    ReserveSlotRequest,
    ReserveSlotResponse,
    SlotAvailabilityCheckResponse,
    SlotRequest,
    day_availability_read,
)
from ..services.delivery import (
    get_availability,
    get_available_slots,
    release_slot,
    repository,
    reserve_slot,
)
from ..services.delivery.clock import Clock, get_clock


router = APIRouter(prefix="/delivery", tags=["delivery"])


def _require_company(db: Session, company_id: int) -> None:
    if not repository.company_exists(db, company_id):
        raise HTTPException(status_code=404, detail="Company not found")


@router.get("/slots", response_model=list[DayAvailabilityRead])
def get_slots(
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    only_available: bool = True,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    clock: Clock = Depends(get_clock),
):
    """Bookable half-days for a company."""
    _require_company(db, company_id)
    days = get_available_slots(
        db,
        company_id,
        start_date=start_date,
        end_date=end_date,
        only_available=only_available,
        now=clock(),
        redis=redis,
    )
    return [day_availability_read(day) for day in days]


@router.post("/slots/check", response_model=SlotAvailabilityCheckResponse)
def check_slot(
    data: SlotRequest,
    db: Session = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
):
    """
    Capacity check for one half-day before placing an order.

    Like reserve, this does not apply the minimum-advance rule: a half-day
    hidden from GET /slots by min_slots_ahead can still report capacity here.
    """
    _require_company(db, data.company_id)
    days = get_availability(
        db, data.company_id, data.date, data.date,
        only_available=False,
        redis=redis,
    )
    slot = days[0].slot(data.slot_type) if days else None

    if slot is None:
        return SlotAvailabilityCheckResponse(
            is_available=False,
            message="No delivery slots for the selected date",
        )

    return SlotAvailabilityCheckResponse(
        is_available=slot.is_available,
        remaining_capacity=slot.remaining,
        max_capacity=slot.max_capacity,
        message="Slot available" if slot.is_available else "Slot fully booked",
    )


@router.post("/slots/reserve", response_model=ReserveSlotResponse)
def reserve(data: ReserveSlotRequest, db: Session = Depends(get_db)):
    _require_company(db, data.company_id)
    if not reserve_slot(db, data.company_id, data.date, data.slot_type, data.order_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The selected delivery slot is no longer available",
        )
    return ReserveSlotResponse(success=True, message="Slot reserved")


@router.post("/slots/release", status_code=status.HTTP_204_NO_CONTENT)
def release(data: ReleaseSlotRequest, db: Session = Depends(get_db)):
    _require_company(db, data.company_id)
    release_slot(db, data.company_id, data.date, data.slot_type, data.order_id)
