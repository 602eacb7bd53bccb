"""
Driver and admin lifecycle operations on existing bookings.

Each operation is a single read-modify-write on the booking row (plus the
car row where a car is claimed or released), committed atomically with
transparent retry on transient storage errors. The lifecycle event is
queued for broadcast only once the write has committed.
"""

import logging
from dataclasses import dataclass

from bookings.models import (
    Booking,
    STATUS_ACCEPTED,
    STATUS_COMPLETED,
    STATUS_PAID,
)
from realtime.notifications import (
    notify_ride_accepted,
    notify_ride_completed,
    notify_booking_paid,
)
from . import repository
from .exceptions import NotFoundError, ValidationError
from .state_machine import apply_transition, assert_transition
from .transactions import atomic_with_retry

logger = logging.getLogger(__name__)


@dataclass
class LifecycleResult:
    """Result object for lifecycle operations."""
    booking: Booking
    message: str = ""
    car_released: bool = False
    car_attached: bool = False


# ===================== Driver Operations =====================

@atomic_with_retry
def accept_booking(booking_id: int, driver_id: int) -> LifecycleResult:
    """
    Driver accepts a pending booking.

    A booking left unassigned by dispatch may be accepted by any driver. In
    that case the driver's own available car, if any, is attached and marked
    busy; without one the booking proceeds with no car.

    Raises:
        NotFoundError: booking or driver does not exist
        ValidationError: booking is assigned to a different driver
        InvalidTransitionError: booking is not pending
    """
    booking = repository.get_booking_for_update(booking_id)

    driver = repository.get_driver(driver_id)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")

    assert_transition(booking.status, STATUS_ACCEPTED)

    if booking.driver_id is not None and booking.driver_id != driver.id:
        raise ValidationError("This booking is assigned to another driver")

    changed = apply_transition(booking, STATUS_ACCEPTED)
    booking.driver = driver
    changed.append("driver")

    car_attached = False
    if booking.car_id is None:
        car = repository.find_available_car_for_driver(driver)
        if car is not None and repository.claim_car(car):
            booking.car = car
            changed.append("car")
            car_attached = True
            logger.info("Attached car %s of driver %s to booking %s", car.id, driver.id, booking.id)
        else:
            logger.info("Booking %s accepted by driver %s without a car", booking.id, driver.id)

    repository.update_booking(booking, changed)
    notify_ride_accepted(booking)

    logger.info("Booking %s accepted by driver %s", booking.id, driver.id)
    return LifecycleResult(
        booking=booking,
        message="Ride accepted successfully",
        car_attached=car_attached,
    )


@atomic_with_retry
def complete_booking(booking_id: int, driver_id: int) -> LifecycleResult:
    """
    Driver completes an accepted booking and releases the attached car.

    Raises:
        NotFoundError: no booking with this id is held by this driver
        InvalidTransitionError: booking is not accepted
    """
    booking = repository.get_booking_for_update(booking_id, driver_id=driver_id)

    changed = apply_transition(booking, STATUS_COMPLETED)
    repository.update_booking(booking, changed)

    car_released = repository.release_car(booking.car_id)
    if booking.car_id is not None and not car_released:
        logger.warning(
            "Car %s of booking %s was not busy at completion, left unchanged",
            booking.car_id, booking.id,
        )

    notify_ride_completed(booking)

    logger.info("Booking %s completed by driver %s", booking.id, driver_id)
    return LifecycleResult(
        booking=booking,
        message="Ride completed successfully",
        car_released=car_released,
    )


# ===================== Admin Operations =====================

@atomic_with_retry
def mark_booking_paid(booking_id: int) -> LifecycleResult:
    """
    Record that a completed booking has been paid.

    Raises:
        NotFoundError: booking does not exist
        InvalidTransitionError: booking is not completed
    """
    booking = repository.get_booking_for_update(booking_id)

    changed = apply_transition(booking, STATUS_PAID)
    repository.update_booking(booking, changed)
    notify_booking_paid(booking)

    logger.info("Booking %s marked paid (%s)", booking.id, booking.amount)
    return LifecycleResult(booking=booking, message="Payment marked successfully")

