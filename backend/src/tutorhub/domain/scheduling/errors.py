from __future__ import annotations


class SchedulingError(ValueError):
    """Input rejected by the scheduling engine."""

    kind = "SchedulingError"


class InvalidTimeFormat(SchedulingError):
    kind = "InvalidTimeFormat"


class UnknownTimezone(SchedulingError):
    kind = "UnknownTimezone"

    def __init__(self, zone: str):
        self.zone = zone
        super().__init__(f"Unknown timezone '{zone}'")


class InvalidDuration(SchedulingError):
    kind = "InvalidDuration"


class OverlappingHoliday(SchedulingError):
    kind = "OverlappingHoliday"


class InvalidAvailability(SchedulingError):
    kind = "InvalidAvailability"


class InvalidHoliday(SchedulingError):
    kind = "InvalidHoliday"
