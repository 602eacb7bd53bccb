"""
Realtime app: the notification fan-out for booking lifecycle events.

Key Components:
    - events.py: event kind names
    - notifications.py: publish / publish_on_commit and per-event helpers
    - tasks.py: Celery task that delivers committed events
    - consumers/: WebSocket consumer every listener connects to
    - middleware.py: JWT/Cookie authentication for WebSocket connections

Usage:
    from realtime.notifications import publish, notify_new_booking
    from realtime.consumers import BookingEventsConsumer
"""
