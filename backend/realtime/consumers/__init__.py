"""Realtime consumers for WebSocket communication."""

from .base import BaseConsumer
from .booking_consumer import BookingEventsConsumer

__all__ = [
    "BaseConsumer",
    "BookingEventsConsumer",
]
