from datetime import datetime, timedelta

from catalog_api.services.delivery import (
    calculate_availability,
    get_availability,
    get_available_slots,
    repository,
    reserve_slot,
)
from catalog_api.services.delivery.resolver import resolve_day_schedule
from catalog_api.services.delivery.types import (
    DateOverride,
    DaySchedule,
    HalfDay,
    TimeWindow,
)
from factories import MONDAY, weekly

SUNDAY = MONDAY + timedelta(days=6)


def test_remaining_capacity_from_counters():
    config = weekly(1, max_capacity_morning=3)
    schedules = [resolve_day_schedule(config, None, MONDAY)]
    counts = {(MONDAY, HalfDay.MORNING): 2}

    days = calculate_availability(schedules, counts, only_available=True)

    morning = days[0].slot(HalfDay.MORNING)
    assert morning.current_count == 2
    assert morning.remaining == 1
    assert morning.is_available
    assert morning.time_range == "09:00 - 13:00"
    assert days[0].slot(HalfDay.AFTERNOON).remaining == 10


def test_full_half_days_dropped_only_when_requested():
    config = weekly(1, max_capacity_morning=2)
    schedules = [resolve_day_schedule(config, None, MONDAY)]
    # Ceiling shrank below what was already booked
    counts = {(MONDAY, HalfDay.MORNING): 3}

    listed = calculate_availability(schedules, counts, only_available=True)
    full = calculate_availability(schedules, counts, only_available=False)

    assert [s.half_day for s in listed[0].slots] == [HalfDay.AFTERNOON]
    morning = full[0].slot(HalfDay.MORNING)
    assert morning.remaining == 0
    assert not morning.is_available


def test_days_without_listed_half_days_are_omitted():
    config = weekly(1, max_capacity_morning=0, max_capacity_afternoon=0)
    schedules = [resolve_day_schedule(config, None, MONDAY)]

    assert calculate_availability(schedules, {}, only_available=True) == []
    assert len(calculate_availability(schedules, {}, only_available=False)) == 1


def test_disabled_weekday_never_listed(db, configured_company):
    days = get_availability(db, configured_company, MONDAY, SUNDAY, only_available=False)

    listed_dates = [day.date for day in days]
    assert listed_dates == [MONDAY + timedelta(days=i) for i in range(5)]
    for day in days:
        assert [slot.half_day for slot in day.slots] == [HalfDay.MORNING, HalfDay.AFTERNOON]


def test_counters_are_read_for_the_range(db, configured_company):
    assert reserve_slot(db, configured_company, MONDAY, HalfDay.AFTERNOON)
    assert reserve_slot(db, configured_company, MONDAY, HalfDay.AFTERNOON)

    days = get_availability(db, configured_company, MONDAY, MONDAY)

    assert days[0].slot(HalfDay.AFTERNOON).current_count == 2
    assert days[0].slot(HalfDay.AFTERNOON).remaining == 8
    assert days[0].slot(HalfDay.MORNING).current_count == 0


def test_no_settings_means_nothing_bookable(db, company_id):
    assert get_availability(db, company_id, MONDAY, SUNDAY) == []
    assert get_available_slots(db, company_id, MONDAY, SUNDAY, now=datetime(2026, 10, 19, 8)) == []


def test_override_opens_sunday(db, configured_company):
    repository.create_override(
        db,
        DateOverride(
            company_id=configured_company,
            date=SUNDAY,
            afternoon_enabled=False,
            custom_morning=TimeWindow.from_strings("10:00", "12:00"),
            custom_max_capacity_morning=4,
        ),
    )
    db.commit()

    days = get_availability(db, configured_company, SUNDAY, SUNDAY)

    assert len(days) == 1
    assert days[0].slot(HalfDay.MORNING).max_capacity == 4
    assert days[0].slot(HalfDay.AFTERNOON) is None


def test_available_slots_applies_minimum_advance(db, company_id):
    repository.create_weekly_config(db, weekly(company_id, min_slots_ahead=2))
    db.commit()
    now = datetime(2026, 10, 19, 8, 0)

    days = get_available_slots(db, company_id, MONDAY, MONDAY + timedelta(days=1), now=now)

    flat = [(day.date, slot.half_day) for day in days for slot in day.slots]
    assert flat == [
        (MONDAY + timedelta(days=1), HalfDay.MORNING),
        (MONDAY + timedelta(days=1), HalfDay.AFTERNOON),
    ]


def test_available_slots_defaults_and_clamps_to_today(db, configured_company):
    now = datetime(2026, 10, 21, 8, 0)  # Wednesday

    days = get_available_slots(db, configured_company, start_date=MONDAY, now=now)

    assert days[0].date == now.date()
    # Default range: 30 days after the start
    assert days[-1].date <= now.date() + timedelta(days=30)


def test_monday_morning_end_to_end(db, company_id):
    monday_only = {
        0: DaySchedule(enabled=True, morning=TimeWindow.from_strings("09:00", "13:00")),
    }
    repository.create_weekly_config(
        db,
        weekly(company_id, days=monday_only, min_slots_ahead=1, max_capacity_morning=10),
    )
    db.commit()
    now = datetime(2026, 10, 19, 8, 0)

    listed = get_availability(db, company_id, MONDAY, MONDAY)
    assert len(listed) == 1
    assert [slot.half_day for slot in listed[0].slots] == [HalfDay.MORNING]
    assert listed[0].slots[0].remaining == 10

    assert get_available_slots(db, company_id, MONDAY, MONDAY, now=now) == []

    # The advance rule only filters listings
    assert reserve_slot(db, company_id, MONDAY, HalfDay.MORNING, order_id=501)
    assert repository.get_counter(db, company_id, MONDAY, HalfDay.MORNING) == 1
