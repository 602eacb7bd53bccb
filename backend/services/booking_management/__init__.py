"""
Booking management service - lifecycle, persistence and read views.

This module handles:
    - Accepting, completing and marking bookings paid
    - Validating lifecycle transitions
    - Atomic, retried access to bookings and cars
    - Read-only booking views and statistics
"""

from .lifecycle import (
    LifecycleResult,
    accept_booking,
    complete_booking,
    mark_booking_paid,
)
from .queries import (
    customer_bookings,
    pending_bookings,
    driver_bookings,
    all_bookings,
    booking_statistics,
)
from .exceptions import (
    BookingError,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    TransientStorageError,
)

__all__ = [
    # Lifecycle operations
    "LifecycleResult",
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
