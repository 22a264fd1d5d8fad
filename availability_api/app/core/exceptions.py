"""
Domain-specific exception hierarchy for the availability service.

Input errors derive from ``InvalidTimeSlotError`` and are always
caused by the client.  ``SlotConflictError`` and ``SlotNotFoundError``
are expected business outcomes.  ``SlotStoreError`` marks an
unexpected failure inside the store.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""

    message = "availability service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class InvalidTimeSlotError(AvailabilityError):
    """Raised when request input cannot be turned into a time slot."""

    message = "invalid time slot"


class BadPayloadError(InvalidTimeSlotError):
    message = "request payload failed to marshal to TimeSlotJSON format"


class BadTimestampError(InvalidTimeSlotError):
    message = "request Start time could not be interpreted as an RFC3339 timestamp"


class PastOrMissingStartError(InvalidTimeSlotError):
    message = "request Start time cannot be missing or in the past"


class BadDurationError(InvalidTimeSlotError):
    message = "input Duration string could not be interpreted"


class NonPositiveDurationError(InvalidTimeSlotError):
    message = "input Duration cannot be missing, zero or negative"


class SlotConflictError(AvailabilityError):
    """Raised when a reservation overlaps an existing slot."""

    message = "some or all of requested time is already reserved"


class SlotNotFoundError(AvailabilityError):
    """Raised when no stored slot exactly matches a cancellation."""

    message = "no matching time slot found"


class SlotStoreError(AvailabilityError):
    """Raised when the slot store fails unexpectedly."""

    message = "slot store failure"


class StoreTimeoutError(SlotStoreError):
    """Raised when a store call does not finish within its deadline."""

    message = "slot store did not respond within the deadline"
