from __future__ import annotations


class BookingError(RuntimeError):
    """Base class for failures surfaced to the booking flow."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised when required input is missing or malformed."""

    kind = "validation"

    def __init__(self, message: str, fields: list[str] | tuple[str, ...] | None = None) -> None:
        super().__init__(message)
        self.fields = tuple(fields or ())


class NotFoundError(BookingError):
    """Raised when a referenced business, service, staff member or appointment does not exist."""

    kind = "not_found"


class SlotConflictError(BookingError):
    """Raised when a reservation overlaps an existing appointment of the same staff member."""

    kind = "slot_conflict"


class TransientServiceError(BookingError):
    """Raised on network/backend failures and timeouts; safe to retry."""

    kind = "transient"


class InvalidTransitionError(RuntimeError):
    """Raised when a wizard event is not allowed in the current step."""
