from __future__ import annotations


class ServiceError(Exception):
    """Base class for service layer failures."""

    kind = "ServiceError"


class NotFoundError(ServiceError):
    kind = "NotFound"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class SessionNotFound(NotFoundError):
    kind = "SessionNotFound"

    def __init__(self, session_id: str):
        super().__init__("Session", session_id)


class UserNotFound(NotFoundError):
    kind = "UserNotFound"

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class NotAuthorized(ServiceError):
    kind = "NotAuthorized"


class AvailabilityNotSet(ServiceError):
    kind = "AvailabilityNotSet"


class HolidayConflict(ServiceError):
    kind = "HolidayConflict"


class InvalidSlot(ServiceError):
    kind = "InvalidSlot"


class SlotAlreadyBooked(ServiceError):
    kind = "SlotAlreadyBooked"


class DuplicateSessionForDate(ServiceError):
    kind = "DuplicateSessionForDate"


class SessionHasBookings(ServiceError):
    kind = "SessionHasBookings"


class CacheUnavailable(ServiceError):
    """Cache backend failure. Never fatal: callers fall back to computing."""

    kind = "CacheUnavailable"
