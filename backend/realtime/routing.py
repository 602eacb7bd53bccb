"""WebSocket URL routing for the realtime app."""

from django.urls import re_path

from .consumers.booking_consumer import BookingEventsConsumer

websocket_urlpatterns = [
    # Booking lifecycle events for customers, drivers and admins
    # URL: ws://localhost:8000/ws/bookings/?token=<jwt>
    re_path(
        r"ws/bookings/$",
        BookingEventsConsumer.as_asgi(),
        name="booking-events-ws"
    ),
]
