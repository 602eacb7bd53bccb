"""WebSocket consumer that streams booking lifecycle events."""

import logging
from typing import Dict, Any

from django.conf import settings

from .base import BaseConsumer

logger = logging.getLogger(__name__)


class BookingEventsConsumer(BaseConsumer):
    """
    Every authenticated customer, driver and admin connects here and receives
    the four booking lifecycle events:
        - new_booking_created
        - ride_accepted
        - ride_completed
        - booking_paid
    """

    async def on_connect(self):
        await self._join_group(settings.BOOKING_EVENTS_GROUP)
        logger.info("User %s (%s) subscribed to booking events", self.user_id, self.role)

        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
            "message": "Subscribed to booking events",
        })

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        if msg_type == "ping":
            await self.send_json({"type": "pong"})
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Booking Event Handlers ----------------------
    # These handle group_send events from realtime.notifications.publish

    async def new_booking_created(self, event):
        await self.send_json({
            "type": "new_booking_created",
            "booking_id": event.get("booking_id"),
        })

    async def ride_accepted(self, event):
        await self.send_json({
            "type": "ride_accepted",
            "booking_id": event.get("booking_id"),
            "driver_id": event.get("driver_id"),
        })

    async def ride_completed(self, event):
        await self.send_json({
            "type": "ride_completed",
            "booking_id": event.get("booking_id"),
        })

    async def booking_paid(self, event):
        await self.send_json({
            "type": "booking_paid",
            "booking_id": event.get("booking_id"),
            "customer_id": event.get("customer_id"),
            "customer_name": event.get("customer_name"),
            "driver_id": event.get("driver_id"),
            "driver_name": event.get("driver_name"),
            "amount": event.get("amount"),
            "paid_at": event.get("paid_at"),
        })
