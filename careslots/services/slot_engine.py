"""Slot generation, availability resolution and overlap conflict detection.

Everything in this module is a pure function of its arguments. Reading booked
times or sibling schedules and persisting results is done by the services that
call into it.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from ..core.exceptions import InvalidScheduleInput

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

MIN_SLOT_DURATION = 15
MAX_SLOT_DURATION = 120


@dataclass(frozen=True)
class Slot:
    time: str
    duration_minutes: int


@dataclass(frozen=True)
class SlotAvailability:
    time: str
    is_available: bool


@dataclass(frozen=True)
class DaySchedule:
    """Canonical form of one weekly schedule row"""
    day_of_week: int
    is_available: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    slot_duration: int = 30
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @classmethod
    def from_row(cls, row: Any) -> "DaySchedule":
        """Build from an ORM row or a request schema"""
        return cls(
            day_of_week=row.day_of_week,
            is_available=bool(row.is_available),
            start_time=row.start_time,
            end_time=row.end_time,
            slot_duration=row.slot_duration,
            break_start=row.break_start,
            break_end=row.break_end,
        )


class BookedSlot(NamedTuple):
    booking_id: Any
    time: str


class SiblingSchedule(NamedTuple):
    offering_id: Any
    offering_name: str
    entry: DaySchedule


@dataclass
class DayCheck:
    day_of_week: int
    day_name: str
    conflicts: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts


@dataclass
class ConflictReport:
    days: List[DayCheck] = field(default_factory=list)

    @property
    def conflicts(self) -> List[str]:
        return [conflict for day in self.days for conflict in day.conflicts]

    @property
    def ok(self) -> bool:
        return all(day.ok for day in self.days)


def day_name(day_of_week: int) -> str:
    if 0 <= day_of_week < len(DAY_NAMES):
        return DAY_NAMES[day_of_week]
    return f"Day {day_of_week}"


def day_of_week_for(on_date: date) -> int:
    """0 = Sunday .. 6 = Saturday"""
    return on_date.isoweekday() % 7


_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")


def _parse_time(value: str) -> Tuple[int, int]:
    match = _TIME_PATTERN.fullmatch(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidScheduleInput(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise InvalidScheduleInput(f"Invalid time '{value}', expected HH:MM")
    return hours, minutes


def normalize_time(value: str) -> str:
    """Canonical HH:MM form: "9:30" and "09:30:00" -> "09:30"."""
    hours, minutes = _parse_time(value)
    return f"{hours:02d}:{minutes:02d}"


def time_to_minutes(value: str) -> int:
    hours, minutes = _parse_time(value)
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def generate_slots(start: Optional[str], end: Optional[str], duration_minutes: Optional[int]) -> List[Slot]:
    """Split [start, end) into consecutive slots of ``duration_minutes``.

    Missing values produce no slots. A trailing remainder shorter than one
    slot is dropped.
    """
    if not start or not end or not duration_minutes:
        return []
    if duration_minutes < 0:
        raise InvalidScheduleInput(f"Slot duration must be positive, got {duration_minutes}")

    current = time_to_minutes(start)
    end_minutes = time_to_minutes(end)

    slots = []
    while current + duration_minutes <= end_minutes:
        slots.append(Slot(minutes_to_time(current), duration_minutes))
        current += duration_minutes
    return slots


def validate_day_schedule(
    entry: DaySchedule,
    min_duration: int = MIN_SLOT_DURATION,
    max_duration: int = MAX_SLOT_DURATION,
) -> None:
    """Raise InvalidScheduleInput if an available day is inconsistent"""
    if not 0 <= entry.day_of_week <= 6:
        raise InvalidScheduleInput(f"Invalid day_of_week: {entry.day_of_week}. Must be between 0-6.")
    if not entry.is_available:
        return

    name = day_name(entry.day_of_week)
    if not entry.start_time or not entry.end_time:
        raise InvalidScheduleInput(f"{name}: start_time and end_time are required")
    start = time_to_minutes(entry.start_time)
    end = time_to_minutes(entry.end_time)
    if end <= start:
        raise InvalidScheduleInput(f"{name}: end_time must be later than start_time")

    duration = entry.slot_duration
    if duration is None or not min_duration <= duration <= max_duration:
        raise InvalidScheduleInput(
            f"{name}: slot duration must be between {min_duration} and {max_duration} minutes"
        )

    if entry.break_start or entry.break_end:
        if not (entry.break_start and entry.break_end):
            raise InvalidScheduleInput(f"{name}: break_start and break_end must be given together")
        break_start = time_to_minutes(entry.break_start)
        break_end = time_to_minutes(entry.break_end)
        if break_end <= break_start:
            raise InvalidScheduleInput(f"{name}: break_end must be later than break_start")
        if break_start < start or break_end > end:
            raise InvalidScheduleInput(f"{name}: break must lie within working hours")


def _collect_booked_times(
    booked_times: Iterable[Union[str, BookedSlot, Tuple[Any, str]]],
    exclude_booking_id: Any = None,
) -> set:
    times = set()
    for item in booked_times:
        if isinstance(item, str):
            times.add(normalize_time(item))
            continue
        booking_id, time = item
        if exclude_booking_id is not None and str(booking_id) == str(exclude_booking_id):
            continue
        times.add(normalize_time(time))
    return times


def resolve_available_slots(
    entry: Optional[DaySchedule],
    on_date: date,
    booked_times: Iterable[Union[str, BookedSlot, Tuple[Any, str]]] = (),
    exclude_booking_id: Any = None,
) -> List[SlotAvailability]:
    """Tag every slot of ``entry`` on ``on_date`` as available or not.

    ``booked_times`` holds plain "HH:MM" strings or (booking_id, time) pairs;
    a pair whose id equals ``exclude_booking_id`` does not occupy its slot, so
    a booking being rescheduled can keep its current time.
    """
    if entry is None or not entry.is_available:
        return []

    weekday = day_of_week_for(on_date)
    if entry.day_of_week != weekday:
        raise InvalidScheduleInput(
            f"Schedule for {day_name(entry.day_of_week)} cannot resolve {on_date.isoformat()} ({day_name(weekday)})"
        )

    taken = _collect_booked_times(booked_times, exclude_booking_id)

    break_window = None
    if entry.break_start and entry.break_end:
        break_window = (time_to_minutes(entry.break_start), time_to_minutes(entry.break_end))

    result = []
    for slot in generate_slots(entry.start_time, entry.end_time, entry.slot_duration):
        available = slot.time not in taken
        if available and break_window:
            slot_start = time_to_minutes(slot.time)
            slot_end = slot_start + slot.duration_minutes
            if slot_start < break_window[1] and slot_end > break_window[0]:
                available = False
        result.append(SlotAvailability(slot.time, available))
    return result


def overlap_window(
    start_a: str, end_a: str, start_b: str, end_b: str
) -> Optional[Tuple[str, str]]:
    """Half-open intersection of [start_a, end_a) and [start_b, end_b)"""
    start = max(time_to_minutes(start_a), time_to_minutes(start_b))
    end = min(time_to_minutes(end_a), time_to_minutes(end_b))
    if start < end:
        return minutes_to_time(start), minutes_to_time(end)
    return None


def check_schedule_conflicts(
    proposed: Iterable[DaySchedule],
    siblings: Iterable[SiblingSchedule],
) -> ConflictReport:
    """Compare each available proposed day with sibling offerings on that day.

    Every day is checked and every overlap is reported.
    """
    by_day: Dict[int, List[SiblingSchedule]] = {}
    for sibling in siblings:
        if sibling.entry.is_available:
            by_day.setdefault(sibling.entry.day_of_week, []).append(sibling)

    report = ConflictReport()
    for entry in sorted(proposed, key=lambda e: e.day_of_week):
        if not entry.is_available:
            continue
        check = DayCheck(entry.day_of_week, day_name(entry.day_of_week))
        same_day = sorted(by_day.get(entry.day_of_week, []), key=lambda s: (s.offering_name, str(s.offering_id)))
        for sibling in same_day:
            if not sibling.entry.start_time or not sibling.entry.end_time:
                continue
            window = overlap_window(
                entry.start_time, entry.end_time,
                sibling.entry.start_time, sibling.entry.end_time,
            )
            if window:
                check.conflicts.append(
                    f"{check.day_name}: overlaps with {sibling.offering_name} from {window[0]} to {window[1]}"
                )
        report.days.append(check)
    return report
