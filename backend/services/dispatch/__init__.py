"""
Dispatch service.

This module handles:
    - Validating booking requests
    - Creating bookings
    - Assigning the first eligible car and its driver
"""

from .booking_dispatch import (
    BookingResult,
    create_booking,
    validate_booking_request,
)
from .car_selection import select_and_claim_car

__all__ = [
    "BookingResult",
    "create_booking",
    "validate_booking_request",
    "select_and_claim_car",
]
