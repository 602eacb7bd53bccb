"""
Read-only booking projections.

Each view denormalises customer, driver and car display names at read time
through ``BookingViewSerializer``. None of these functions mutate state.
"""

from decimal import Decimal
from typing import Any, Dict, List

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum

from bookings.models import (
    Booking,
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_COMPLETED,
    STATUS_PAID,
)
from bookings.serializers import BookingViewSerializer

User = get_user_model()

CUSTOMER_HISTORY_LIMIT = 10
DRIVER_VIEW_STATUSES = (STATUS_ACCEPTED, STATUS_COMPLETED)


def _booking_rows():
    return Booking.objects.select_related("customer", "driver", "car")


def _serialize(qs) -> List[Dict[str, Any]]:
    return BookingViewSerializer(qs, many=True).data


def customer_bookings(customer_id: int) -> List[Dict[str, Any]]:
    """The customer's most recent bookings, newest first."""
    qs = (
        _booking_rows()
        .filter(customer_id=customer_id)
        .order_by("-created_at", "-id")[:CUSTOMER_HISTORY_LIMIT]
    )
    return _serialize(qs)


def pending_bookings() -> List[Dict[str, Any]]:
    """Bookings still waiting for a driver to accept, oldest first."""
    qs = _booking_rows().filter(status=STATUS_PENDING).order_by("created_at", "id")
    return _serialize(qs)


def driver_bookings(driver_id: int, status: str) -> List[Dict[str, Any]]:
    """A driver's accepted or completed bookings."""
    if status not in DRIVER_VIEW_STATUSES:
        raise ValueError(f"Unsupported driver booking status: {status}")
    qs = (
        _booking_rows()
        .filter(driver_id=driver_id, status=status)
        .order_by("-created_at", "-id")
    )
    return _serialize(qs)


def all_bookings() -> List[Dict[str, Any]]:
    """Every booking with full display info, for administrators."""
    return _serialize(_booking_rows().order_by("-created_at", "-id"))


def booking_statistics() -> Dict[str, Any]:
    """Booking counts per status, paid revenue and user totals."""
    counts = dict(
        Booking.objects.values_list("status").annotate(total=Count("id")).order_by()
    )
    revenue = (
        Booking.objects.filter(status=STATUS_PAID).aggregate(total=Sum("amount"))["total"]
        or Decimal("0.00")
    )

    return {
        "total_bookings": sum(counts.values()),
        "pending_bookings": counts.get(STATUS_PENDING, 0),
        "accepted_bookings": counts.get(STATUS_ACCEPTED, 0),
        "completed_bookings": counts.get(STATUS_COMPLETED, 0),
        "paid_bookings": counts.get(STATUS_PAID, 0),
        "total_revenue": revenue,
        "total_drivers": User.objects.filter(role=User.ROLE_DRIVER).count(),
        "total_customers": User.objects.filter(role=User.ROLE_CUSTOMER).count(),
    }
