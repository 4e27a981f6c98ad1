from datetime import date

import pytest

from careslots.core.exceptions import InvalidScheduleInput
from careslots.services.slot_engine import (
    BookedSlot,
    DaySchedule,
    SiblingSchedule,
    check_schedule_conflicts,
    day_of_week_for,
    generate_slots,
    overlap_window,
    resolve_available_slots,
    time_to_minutes,
    validate_day_schedule,
)

MONDAY = date(2030, 1, 7)
WEDNESDAY = date(2030, 1, 9)


def _times(slots):
    return [slot.time for slot in slots]


def _availability(slots):
    return {slot.time: slot.is_available for slot in slots}


def test_day_of_week_counts_from_sunday():
    assert day_of_week_for(date(2030, 1, 6)) == 0
    assert day_of_week_for(MONDAY) == 1
    assert day_of_week_for(date(2030, 1, 12)) == 6


# generate_slots

def test_generate_slots_drops_partial_trailing_slot():
    slots = generate_slots("09:00", "10:30", 30)
    assert _times(slots) == ["09:00", "09:30", "10:00"]
    assert all(slot.duration_minutes == 30 for slot in slots)


@pytest.mark.parametrize("start,end,duration,expected", [
    ("08:00", "12:00", 15, 16),
    ("08:00", "12:00", 45, 5),
    ("13:10", "17:00", 20, 11),
    ("00:00", "23:59", 120, 11),
])
def test_generate_slots_count_and_spacing(start, end, duration, expected):
    slots = generate_slots(start, end, duration)
    assert len(slots) == expected
    minutes = [int(s.time[:2]) * 60 + int(s.time[3:]) for s in slots]
    assert all(b - a == duration for a, b in zip(minutes, minutes[1:]))


def test_generate_slots_is_repeatable():
    assert generate_slots("09:00", "17:00", 30) == generate_slots("09:00", "17:00", 30)


@pytest.mark.parametrize("start,end,duration", [
    ("", "10:00", 30),
    ("09:00", None, 30),
    ("09:00", "10:00", 0),
    ("09:00", "10:00", None),
])
def test_generate_slots_missing_input_gives_nothing(start, end, duration):
    assert generate_slots(start, end, duration) == []


def test_generate_slots_end_before_start_gives_nothing():
    assert generate_slots("12:00", "09:00", 30) == []


def test_generate_slots_rejects_malformed_time():
    with pytest.raises(InvalidScheduleInput):
        generate_slots("9am", "10:00", 30)
    with pytest.raises(InvalidScheduleInput):
        generate_slots("09:00", "25:00", 30)
    with pytest.raises(InvalidScheduleInput):
        generate_slots("09:00garbage", "10:00", 30)


@pytest.mark.parametrize("value", ["09:00xyz", "09:301", "10:00PM", "09:00:99", "9", " : "])
def test_time_with_trailing_garbage_is_rejected(value):
    with pytest.raises(InvalidScheduleInput):
        time_to_minutes(value)


@pytest.mark.parametrize("value, expected", [("9:05", 545), ("09:30:00", 570), (" 23:59 ", 1439)])
def test_time_parsing_accepts_canonical_forms(value, expected):
    assert time_to_minutes(value) == expected


def test_validate_rejects_end_time_with_trailing_garbage():
    with pytest.raises(InvalidScheduleInput):
        validate_day_schedule(DaySchedule(1, True, "09:00", "12:00junk", 30))


def test_generate_slots_rejects_negative_duration():
    with pytest.raises(InvalidScheduleInput):
        generate_slots("09:00", "10:00", -15)


# validate_day_schedule

def test_validate_accepts_unavailable_day_without_times():
    validate_day_schedule(DaySchedule(day_of_week=0, is_available=False))


@pytest.mark.parametrize("entry", [
    DaySchedule(day_of_week=7, start_time="09:00", end_time="12:00"),
    DaySchedule(day_of_week=1, start_time="12:00", end_time="09:00"),
    DaySchedule(day_of_week=1, start_time="09:00", end_time=None),
    DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00", slot_duration=10),
    DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00", slot_duration=150),
    DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00", break_start="10:00"),
    DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00", break_start="10:30", break_end="10:00"),
    DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00", break_start="11:30", break_end="12:30"),
])
def test_validate_rejects_inconsistent_day(entry):
    with pytest.raises(InvalidScheduleInput):
        validate_day_schedule(entry)


# resolve_available_slots

def test_booked_time_is_marked_unavailable():
    entry = DaySchedule(day_of_week=1, start_time="09:00", end_time="10:30", slot_duration=30)
    slots = resolve_available_slots(entry, MONDAY, {"09:30"})
    assert _availability(slots) == {"09:00": True, "09:30": False, "10:00": True}


def test_booked_times_with_seconds_are_normalized():
    entry = DaySchedule(day_of_week=1, start_time="09:00", end_time="10:00", slot_duration=30)
    slots = resolve_available_slots(entry, MONDAY, ["09:00:00"])
    assert _availability(slots) == {"09:00": False, "09:30": True}


def test_break_slot_is_unavailable_without_booking():
    entry = DaySchedule(
        day_of_week=1, start_time="09:00", end_time="12:00", slot_duration=30,
        break_start="10:00", break_end="10:30",
    )
    slots = resolve_available_slots(entry, MONDAY, set())
    availability = _availability(slots)
    assert len(slots) == 6
    assert availability["10:00"] is False
    assert [t for t, free in availability.items() if not free] == ["10:00"]


def test_slot_running_into_break_is_unavailable():
    entry = DaySchedule(
        day_of_week=1, start_time="09:00", end_time="12:00", slot_duration=45,
        break_start="10:00", break_end="10:30",
    )
    availability = _availability(resolve_available_slots(entry, MONDAY))
    # 09:45-10:30 overlaps the break even though it starts before it
    assert availability == {"09:00": True, "09:45": False, "10:30": True, "11:15": True}


def test_excluded_booking_keeps_its_slot_available():
    entry = DaySchedule(day_of_week=1, start_time="09:00", end_time="10:30", slot_duration=30)
    booked = [BookedSlot(41, "09:00"), BookedSlot(42, "09:30")]
    availability = _availability(resolve_available_slots(entry, MONDAY, booked, exclude_booking_id=42))
    assert availability == {"09:00": False, "09:30": True, "10:00": True}


def test_unavailable_or_missing_entry_offers_nothing():
    assert resolve_available_slots(None, MONDAY, set()) == []
    closed = DaySchedule(day_of_week=1, is_available=False)
    assert resolve_available_slots(closed, MONDAY, set()) == []


def test_entry_for_another_weekday_is_rejected():
    entry = DaySchedule(day_of_week=3, start_time="09:00", end_time="10:00")
    with pytest.raises(InvalidScheduleInput):
        resolve_available_slots(entry, MONDAY, set())


# check_schedule_conflicts

def _sibling(offering_id, name, day, start, end, available=True):
    return SiblingSchedule(
        offering_id, name,
        DaySchedule(day_of_week=day, is_available=available, start_time=start, end_time=end),
    )


def test_overlap_window_is_half_open():
    assert overlap_window("09:00", "12:00", "11:00", "14:00") == ("11:00", "12:00")
    assert overlap_window("09:00", "12:00", "12:00", "14:00") is None


def test_disjoint_ranges_do_not_conflict():
    proposed = [DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00")]
    siblings = [_sibling(2, "Ultrasound", 1, "13:00", "17:00")]
    report = check_schedule_conflicts(proposed, siblings)
    assert report.ok
    assert report.conflicts == []


def test_overlap_reports_day_sibling_and_window():
    proposed = [DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00")]
    siblings = [_sibling(2, "Ultrasound", 1, "11:00", "14:00")]
    report = check_schedule_conflicts(proposed, siblings)
    assert not report.ok
    assert report.conflicts == ["Monday: overlaps with Ultrasound from 11:00 to 12:00"]


def test_each_day_is_checked_independently():
    proposed = [
        DaySchedule(day_of_week=3, start_time="09:00", end_time="12:00"),
        DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00"),
    ]
    siblings = [
        _sibling(2, "Ultrasound", 1, "13:00", "15:00"),
        _sibling(2, "Ultrasound", 3, "10:00", "11:00"),
    ]
    report = check_schedule_conflicts(proposed, siblings)
    assert report.conflicts == ["Wednesday: overlaps with Ultrasound from 10:00 to 11:00"]
    assert [(day.day_name, day.ok) for day in report.days] == [("Monday", True), ("Wednesday", False)]


def test_every_overlapping_sibling_is_reported():
    proposed = [DaySchedule(day_of_week=2, start_time="08:00", end_time="18:00")]
    siblings = [
        _sibling(3, "X-Ray", 2, "09:00", "10:00"),
        _sibling(2, "Blood Panel", 2, "16:00", "19:00"),
        _sibling(4, "MRI", 2, "07:00", "08:00"),
    ]
    report = check_schedule_conflicts(proposed, siblings)
    assert report.conflicts == [
        "Tuesday: overlaps with Blood Panel from 16:00 to 18:00",
        "Tuesday: overlaps with X-Ray from 09:00 to 10:00",
    ]


def test_unavailable_days_are_ignored_on_both_sides():
    proposed = [
        DaySchedule(day_of_week=1, is_available=False),
        DaySchedule(day_of_week=2, start_time="09:00", end_time="12:00"),
    ]
    siblings = [
        _sibling(2, "Ultrasound", 1, "09:00", "12:00"),
        _sibling(2, "Ultrasound", 2, "09:00", "12:00", available=False),
    ]
    report = check_schedule_conflicts(proposed, siblings)
    assert report.ok
    assert [day.day_of_week for day in report.days] == [2]


def test_conflict_check_is_repeatable():
    proposed = [
        DaySchedule(day_of_week=1, start_time="09:00", end_time="12:00"),
        DaySchedule(day_of_week=5, start_time="14:00", end_time="18:00"),
    ]
    siblings = [
        _sibling(7, "MRI", 5, "17:00", "19:00"),
        _sibling(6, "CT", 1, "08:00", "09:30"),
    ]
    first = check_schedule_conflicts(proposed, siblings)
    second = check_schedule_conflicts(list(reversed(proposed)), list(reversed(siblings)))
    assert first.conflicts == second.conflicts
    assert len(first.conflicts) == 2
