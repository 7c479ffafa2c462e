from datetime import datetime, timedelta

from catalog_api.services.delivery.advance import apply_minimum_advance, current_half_day
from catalog_api.services.delivery.types import (
    DayAvailability,
    HalfDay,
    SlotAvailability,
    TimeWindow,
)
from factories import MONDAY

TUESDAY = MONDAY + timedelta(days=1)
WEDNESDAY = MONDAY + timedelta(days=2)


def _slot(half_day: HalfDay) -> SlotAvailability:
    window = (
        TimeWindow.from_strings("09:00", "13:00")
        if half_day is HalfDay.MORNING
        else TimeWindow.from_strings("14:00", "18:00")
    )
    return SlotAvailability(
        half_day=half_day,
        window=window,
        current_count=0,
        max_capacity=10,
        remaining=10,
        is_available=True,
    )


def _sequence() -> list[DayAvailability]:
    """A=Mon AM, B=Mon PM, C=Tue AM, D=Tue PM, E=Wed AM."""
    return [
        DayAvailability(MONDAY, [_slot(HalfDay.MORNING), _slot(HalfDay.AFTERNOON)]),
        DayAvailability(TUESDAY, [_slot(HalfDay.MORNING), _slot(HalfDay.AFTERNOON)]),
        DayAvailability(WEDNESDAY, [_slot(HalfDay.MORNING)]),
    ]


def _flat(days: list[DayAvailability]) -> list[tuple]:
    return [(day.date, slot.half_day) for day in days for slot in day.slots]


def test_skips_from_current_half_day():
    now = datetime(2026, 10, 19, 15, 0)  # Monday afternoon → index 1 (B)

    result = apply_minimum_advance(_sequence(), 2, now)

    assert _flat(result) == [(TUESDAY, HalfDay.AFTERNOON), (WEDNESDAY, HalfDay.MORNING)]
    assert [day.date for day in result] == [TUESDAY, WEDNESDAY]


def test_zero_advance_starts_at_current_half_day():
    now = datetime(2026, 10, 19, 8, 0)

    result = apply_minimum_advance(_sequence(), 0, now)

    assert _flat(result) == _flat(_sequence())


def test_current_half_day_not_in_sequence_trims_from_front():
    now = datetime(2026, 10, 18, 10, 0)  # Sunday, not listed

    result = apply_minimum_advance(_sequence(), 1, now)

    assert _flat(result)[0] == (MONDAY, HalfDay.AFTERNOON)
    assert len(_flat(result)) == 4


def test_skipping_past_the_end_leaves_nothing():
    now = datetime(2026, 10, 19, 8, 0)

    assert apply_minimum_advance(_sequence(), 5, now) == []
    assert apply_minimum_advance([], 2, now) == []


def test_unsorted_input_is_flattened_chronologically():
    days = [
        DayAvailability(TUESDAY, [_slot(HalfDay.AFTERNOON), _slot(HalfDay.MORNING)]),
        DayAvailability(MONDAY, [_slot(HalfDay.AFTERNOON)]),
    ]
    now = datetime(2026, 10, 19, 14, 0)

    result = apply_minimum_advance(days, 1, now)

    assert _flat(result) == [(TUESDAY, HalfDay.MORNING), (TUESDAY, HalfDay.AFTERNOON)]


def test_current_half_day_cutoff():
    assert current_half_day(datetime(2026, 10, 19, 12, 59)) == (MONDAY, HalfDay.MORNING)
    assert current_half_day(datetime(2026, 10, 19, 13, 0)) == (MONDAY, HalfDay.AFTERNOON)


def test_passed_half_days_are_never_listed():
    # Monday afternoon is full and filtered out; Monday morning is over
    days = [
        DayAvailability(MONDAY, [_slot(HalfDay.MORNING)]),
        DayAvailability(TUESDAY, [_slot(HalfDay.MORNING), _slot(HalfDay.AFTERNOON)]),
    ]
    now = datetime(2026, 10, 19, 15, 0)

    assert _flat(apply_minimum_advance(days, 0, now)) == [
        (TUESDAY, HalfDay.MORNING),
        (TUESDAY, HalfDay.AFTERNOON),
    ]
    assert _flat(apply_minimum_advance(days, 1, now)) == [(TUESDAY, HalfDay.AFTERNOON)]
