# backend/catalog_api/services/delivery/reservation.py
"""
Slot reservation and release.

reserve_slot is a single conditional UPDATE against the counter row, so
concurrent callers racing for the last unit cannot both succeed. The
capacity ceiling is resolved from the database on every call.

The minimum-advance rule is NOT checked here; it only filters listings.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from . import repository
from .resolver import resolve
from .types import HalfDay

logger = logging.getLogger(__name__)


def reserve_slot(
    db: Session,
    company_id: int,
    target_date: date,
    half_day: HalfDay,
    order_id: int | str | None = None,
) -> bool:
    """
    Reserve one unit of capacity.

    Returns:
        True on success. False when the half-day is closed, has no window,
        the company has no settings, or capacity is exhausted.
    """
    schedule = resolve(db, company_id, target_date).get(half_day)

    if not schedule.bookable:
        logger.warning(
            f"Reserve rejected: company {company_id} {target_date} {half_day.value} "
            f"is not enabled (order {order_id})"
        )
        return False

    if schedule.max_capacity <= 0:
        logger.warning(
            f"Reserve rejected: company {company_id} {target_date} {half_day.value} "
            f"has no capacity (order {order_id})"
        )
        return False

    try:
        repository.ensure_counter(db, company_id, target_date, half_day)
        reserved = repository.conditional_increment(
            db, company_id, target_date, half_day, schedule.max_capacity
        )
        if not reserved:
            db.rollback()
            logger.warning(
                f"Reserve rejected: company {company_id} {target_date} {half_day.value} "
                f"is full (max {schedule.max_capacity}, order {order_id})"
            )
            return False
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Slot reserved: company {company_id} {target_date} {half_day.value} (order {order_id})"
    )
    return True


def release_slot(
    db: Session,
    company_id: int,
    target_date: date,
    half_day: HalfDay,
    order_id: int | str | None = None,
) -> None:
    """Give back one unit of capacity. Never goes below zero."""
    try:
        released = repository.decrement(db, company_id, target_date, half_day)
        db.commit()
    except Exception:
        db.rollback()
        raise

    if released:
        logger.info(
            f"Slot released: company {company_id} {target_date} {half_day.value} (order {order_id})"
        )
    else:
        logger.info(
            f"Release skipped: company {company_id} {target_date} {half_day.value} "
            f"has no reservations (order {order_id})"
        )
