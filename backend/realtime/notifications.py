"""
Notification fan-out for booking lifecycle events.

Events are published only after the booking transaction commits:
``publish_on_commit`` registers a ``transaction.on_commit`` hook that hands
the event to a Celery task, and the task calls ``publish`` which sends it to
the channel group every connected listener (customers, drivers, admins)
joins. Delivery is best effort. Listeners that are not connected when the
event goes out never see it, and a failure anywhere in this module is logged
and never reaches the caller of the booking operation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction

from . import events

logger = logging.getLogger(__name__)


def publish(event_kind: str, payload: Dict[str, Any]) -> bool:
    """
    Broadcast one event to the bookings group.

    Returns True if the event was handed to the channel layer, False otherwise.
    """
    if event_kind not in events.EVENT_KINDS:
        logger.warning("Refusing to publish unknown event kind %s", event_kind)
        return False

    try:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("No channel layer available, dropping %s", event_kind)
            return False

        message = {"type": event_kind, **payload}
        logger.debug("WS -> %s: %s", settings.BOOKING_EVENTS_GROUP, message)
        async_to_sync(channel_layer.group_send)(settings.BOOKING_EVENTS_GROUP, message)
    except Exception:
        logger.exception("Failed to publish %s event", event_kind)
        return False

    return True


def publish_on_commit(event_kind: str, payload: Dict[str, Any]) -> None:
    """Queue an event for delivery once the surrounding transaction commits."""

    def _enqueue():
        from .tasks import broadcast_booking_event_task

        try:
            broadcast_booking_event_task.delay(event_kind, payload)
        except Exception:
            logger.exception(
                "Failed to enqueue %s event for booking %s",
                event_kind, payload.get("booking_id"),
            )

    transaction.on_commit(_enqueue)


# ---------------------- Lifecycle Events ----------------------

def notify_new_booking(booking) -> None:
    publish_on_commit(events.NEW_BOOKING_CREATED, {
        "booking_id": booking.id,
    })


def notify_ride_accepted(booking) -> None:
    publish_on_commit(events.RIDE_ACCEPTED, {
        "booking_id": booking.id,
        "driver_id": booking.driver_id,
    })


def notify_ride_completed(booking) -> None:
    publish_on_commit(events.RIDE_COMPLETED, {
        "booking_id": booking.id,
    })


def notify_booking_paid(booking) -> None:
    publish_on_commit(events.BOOKING_PAID, {
        "booking_id": booking.id,
        "customer_id": booking.customer_id,
        "customer_name": booking.customer.display_name if booking.customer_id else None,
        "driver_id": booking.driver_id,
        "driver_name": booking.driver.display_name if booking.driver_id else None,
        "amount": str(booking.amount),
        "paid_at": booking.paid_at.isoformat() if booking.paid_at else None,
    })
