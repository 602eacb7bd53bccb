"""
Persistence access for bookings, cars and the users they reference.

All functions expect to be called inside the caller's transaction (see
``transactions.atomic_with_retry``). Car status changes go through
conditional UPDATEs so that two transactions can never both move the same
car out of the state they read.
"""

import logging
from typing import Iterable, Optional

from django.contrib.auth import get_user_model
from django.db import connection

from bookings.models import Booking
from fleet.models import Car
from .exceptions import NotFoundError

User = get_user_model()
logger = logging.getLogger(__name__)


# ---------------------- Users ----------------------

def get_customer(customer_id) -> Optional[User]:
    """Return the user with this id if it has the customer role."""
    return User.objects.filter(id=customer_id, role=User.ROLE_CUSTOMER).first()


def get_driver(driver_id) -> Optional[User]:
    """Return the user with this id if it has the driver role."""
    return User.objects.filter(id=driver_id, role=User.ROLE_DRIVER).first()


# ---------------------- Cars ----------------------

def eligible_cars():
    """Cars that are available and operated by an active driver."""
    return Car.objects.filter(
        status=Car.STATUS_AVAILABLE,
        driver__isnull=False,
        driver__role=User.ROLE_DRIVER,
        driver__status=User.STATUS_ACTIVE,
    )


def find_available_car_with_active_driver(exclude: Iterable[int] = ()) -> Optional[Car]:
    """
    Return one eligible car, lowest id first, or None.

    On databases with row locking the candidate row is locked and rows already
    locked by a concurrent dispatch are skipped.
    """
    qs = eligible_cars().exclude(id__in=list(exclude)).order_by("id")
    if connection.features.has_select_for_update_skip_locked:
        qs = qs.select_for_update(skip_locked=True, of=("self",))
    return qs.select_related("driver").first()


def find_available_car_for_driver(driver) -> Optional[Car]:
    """Return the lowest id available car operated by this driver, or None."""
    qs = Car.objects.filter(driver=driver, status=Car.STATUS_AVAILABLE).order_by("id")
    if connection.features.has_select_for_update:
        qs = qs.select_for_update()
    return qs.first()


def claim_car(car: Car) -> bool:
    """
    Flip a car from available to busy.

    Returns False when another transaction got there first, in which case the
    in-memory instance is left untouched.
    """
    updated = Car.objects.filter(id=car.id, status=Car.STATUS_AVAILABLE).update(
        status=Car.STATUS_BUSY
    )
    if updated:
        car.status = Car.STATUS_BUSY
    return bool(updated)


def release_car(car_id) -> bool:
    """
    Flip a car from busy back to available.

    Safe to call more than once: only the call that observes the car busy
    changes it.
    """
    if car_id is None:
        return False
    updated = Car.objects.filter(id=car_id, status=Car.STATUS_BUSY).update(
        status=Car.STATUS_AVAILABLE
    )
    return bool(updated)


# ---------------------- Bookings ----------------------

def insert_booking(booking: Booking) -> Booking:
    booking.save(force_insert=True)
    return booking


def update_booking(booking: Booking, fields: Iterable[str]) -> Booking:
    booking.save(update_fields=list(fields))
    return booking


def get_booking_for_update(booking_id, **filters) -> Booking:
    """Load and row-lock a booking. Raises NotFoundError when it does not exist."""
    qs = Booking.objects.select_related("customer", "driver", "car")
    if connection.features.has_select_for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(id=booking_id, **filters)
    except Booking.DoesNotExist:
        raise NotFoundError(f"Booking {booking_id} not found")
