"""Validation errors raised for reading sessions with bad dates."""

from enum import Enum


class DateRejection(str, Enum):
    """Why a session's dates were rejected."""

    FUTURE_DATE = "future_date"
    TOO_FAR_IN_PAST = "too_far_in_past"
    INVERTED_RANGE = "inverted_range"


_MESSAGES = {
    DateRejection.FUTURE_DATE: "Session date cannot be in the future",
    DateRejection.TOO_FAR_IN_PAST: "Session date is too far in the past",
    DateRejection.INVERTED_RANGE: "Session end cannot be before its start",
}


class SessionDateError(ValueError):
    """A session was rejected because of its dates."""

    def __init__(self, reason: DateRejection, message: str = ""):
        self.reason = reason
        super().__init__(message or _MESSAGES[reason])
