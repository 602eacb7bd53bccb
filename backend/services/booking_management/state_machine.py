"""
Booking lifecycle state machine.

    pending -> accepted -> completed -> paid

Transitions only move forward one step at a time. This module knows nothing
about storage; callers load and save the booking themselves.
"""

from django.utils import timezone

from bookings.models import (
    STATUS_PENDING,
    STATUS_ACCEPTED,
    STATUS_COMPLETED,
    STATUS_PAID,
)
from .exceptions import InvalidTransitionError

BOOKING_TRANSITIONS = {
    STATUS_PENDING: {STATUS_ACCEPTED},
    STATUS_ACCEPTED: {STATUS_COMPLETED},
    STATUS_COMPLETED: {STATUS_PAID},
    STATUS_PAID: set(),
}

# Timestamp stamped on the booking when it enters each status
_TRANSITION_TIMESTAMPS = {
    STATUS_ACCEPTED: "accepted_at",
    STATUS_COMPLETED: "completed_at",
    STATUS_PAID: "paid_at",
}


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)


def apply_transition(booking, target: str) -> list:
    """
    Move ``booking`` to ``target`` in memory.

    Returns the list of changed field names, ready for ``save(update_fields=...)``.
    """
    assert_transition(booking.status, target)
    booking.status = target
    changed = ["status"]

    stamp = _TRANSITION_TIMESTAMPS.get(target)
    if stamp:
        setattr(booking, stamp, timezone.now())
        changed.append(stamp)
    return changed
