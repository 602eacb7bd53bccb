"""
Booking creation and dispatch.

``create_booking`` validates the request, then in one transaction inserts
the booking and, when an eligible car exists, assigns that car and its
driver and marks the car busy. A booking without a car is a normal outcome:
it stays pending until a driver accepts it.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.utils import timezone

from bookings.models import Booking, STATUS_PENDING
from realtime.notifications import notify_new_booking
from services.booking_management import repository
from services.booking_management.exceptions import NotFoundError, ValidationError
from services.booking_management.transactions import atomic_with_retry
from .car_selection import select_and_claim_car

logger = logging.getLogger(__name__)

NOT_ASSIGNED_YET = "Not assigned yet"

# Booking.amount is DECIMAL(10, 2)
MAXIMUM_BOOKING_AMOUNT = Decimal("100000000")


@dataclass
class BookingResult:
    """Result object for booking creation."""
    booking: Booking
    car_assigned: bool
    message: str = ""

    @property
    def driver_name(self) -> str:
        if self.booking.driver_id is None:
            return NOT_ASSIGNED_YET
        return self.booking.driver.display_name


@dataclass(frozen=True)
class BookingRequest:
    customer_id: int
    pickup: str
    dropoff: str
    amount: Decimal


def validate_booking_request(customer_id, pickup, dropoff, amount) -> BookingRequest:
    """
    Check a booking request without touching storage.

    Raises:
        ValidationError: with a reason the caller can show to the customer
    """
    if isinstance(customer_id, bool):
        raise ValidationError("Invalid customer ID")
    try:
        customer_id = int(customer_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid customer ID")
    if customer_id <= 0:
        raise ValidationError("Invalid customer ID")

    if not isinstance(pickup, str) or not pickup.strip():
        raise ValidationError("Pickup location is required")
    if not isinstance(dropoff, str) or not dropoff.strip():
        raise ValidationError("Dropoff location is required")

    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Amount must be a number")

    minimum = settings.MINIMUM_BOOKING_AMOUNT
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Amount must be at least {minimum}")
    if amount >= MAXIMUM_BOOKING_AMOUNT:
        raise ValidationError("Amount is too large")

    # Bounds apply to the stored, cent-rounded value
    amount = amount.quantize(Decimal("0.01"))
    if amount < minimum:
        raise ValidationError(f"Amount must be at least {minimum}")
    if amount >= MAXIMUM_BOOKING_AMOUNT:
        raise ValidationError("Amount is too large")

    return BookingRequest(
        customer_id=customer_id,
        pickup=pickup.strip(),
        dropoff=dropoff.strip(),
        amount=amount,
    )


def create_booking(customer_id, pickup, dropoff, amount) -> BookingResult:
    """
    Create a booking and try to dispatch a car to it.

    Raises:
        ValidationError: bad input, nothing was stored
        NotFoundError: no customer with this id
        TransientStorageError: the store stayed contended after every retry
    """
    request = validate_booking_request(customer_id, pickup, dropoff, amount)
    logger.info(
        "Booking ride for customer %s: %s -> %s (%s)",
        request.customer_id, request.pickup, request.dropoff, request.amount,
    )

    result = _create_and_dispatch(request)

    if result.car_assigned:
        logger.info(
            "Booking %s assigned car %s and driver %s",
            result.booking.id, result.booking.car_id, result.booking.driver_id,
        )
    else:
        logger.info("Booking %s created without assignment", result.booking.id)
    return result


@atomic_with_retry
def _create_and_dispatch(request: BookingRequest) -> BookingResult:
    customer = repository.get_customer(request.customer_id)
    if customer is None:
        logger.warning("Customer %s not found or not a customer", request.customer_id)
        raise NotFoundError(f"Customer with ID {request.customer_id} not found")

    booking = Booking(
        customer=customer,
        pickup=request.pickup,
        dropoff=request.dropoff,
        amount=request.amount,
        status=STATUS_PENDING,
        created_at=timezone.now(),
    )

    car = select_and_claim_car()
    if car is not None:
        booking.car = car
        booking.driver = car.driver

    repository.insert_booking(booking)
    notify_new_booking(booking)

    if car is not None:
        message = "Ride booked successfully! Driver assigned."
    else:
        message = "Ride booked successfully! Waiting for available driver."
    return BookingResult(booking=booking, car_assigned=car is not None, message=message)
