from typing import List, Optional


class SchedulingError(Exception):
    """Base class for errors raised by the scheduling services"""


class InvalidScheduleInput(SchedulingError, ValueError):
    """Malformed times, durations or break windows"""


class MissingOfferingReference(SchedulingError):
    """Center, offering or date needed to resolve availability is absent"""


class ScheduleConflict(SchedulingError):
    """Proposed schedule overlaps schedules of other offerings at the same center"""

    default_message = "Overlapping time ranges on the same day are not allowed for different offerings at one center."

    def __init__(self, conflicts: List[str], message: Optional[str] = None):
        self.conflicts = list(conflicts)
        self.message = message or self.default_message
        super().__init__(self.message)


class PersistenceFailure(SchedulingError):
    """The database rejected a write"""


class SlotUnavailable(SchedulingError):
    """Requested slot is booked, on a break or not part of the schedule"""
