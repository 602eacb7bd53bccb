"""
Services package - Business logic layer.

This package contains the booking and dispatch logic. It operates on Django
models but is decoupled from the HTTP/WebSocket layer.

Modules:
    - dispatch: Booking creation and car assignment
    - booking_management: Lifecycle transitions, persistence access, read views
"""

# Expose commonly used functions at package level
from .dispatch import (
    BookingResult,
    create_booking,
)
from .booking_management import (
    accept_booking,
    complete_booking,
    mark_booking_paid,
    customer_bookings,
    pending_bookings,
    driver_bookings,
    all_bookings,
    booking_statistics,
    BookingError,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    TransientStorageError,
)

__all__ = [
    # Dispatch
    "BookingResult",
    "create_booking",
    # Lifecycle
    "accept_booking",
    "complete_booking",
    "mark_booking_paid",
    # Views
    "customer_bookings",
    "pending_bookings",
    "driver_bookings",
    "all_bookings",
    "booking_statistics",
    # Exceptions
    "BookingError",
    "ValidationError",
    "NotFoundError",
    "InvalidTransitionError",
    "TransientStorageError",
]
