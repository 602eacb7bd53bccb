"""Custom exceptions for booking management."""


class BookingError(Exception):
    """Base class for errors reported to callers of the booking services."""
    code = "booking_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised when booking input is invalid. Storage is never touched."""
    code = "validation_error"


class NotFoundError(BookingError):
    """Raised when a referenced booking, customer or driver does not exist."""
    code = "not_found"


class InvalidTransitionError(BookingError):
    """Raised when a lifecycle transition is not allowed from the current status."""
    code = "invalid_transition"

    def __init__(self, current: str, attempted: str, message: str = ""):
        self.current = current
        self.attempted = attempted
        super().__init__(
            message or f"Cannot move booking from {current} to {attempted}"
        )


class TransientStorageError(BookingError):
    """Raised when the store stayed contended after every retry attempt."""
    code = "storage_unavailable"
