"""Celery tasks for delivering booking events to realtime listeners."""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def broadcast_booking_event_task(event_kind: str, payload: dict):
    """
    Deliver a committed booking event to every connected listener.

    Enqueued by ``realtime.notifications.publish_on_commit``. There is no
    retry: a listener that misses the broadcast does not get it later.
    """
    from realtime.notifications import publish

    delivered = publish(event_kind, payload)
    if delivered:
        logger.info("Broadcast %s for booking %s", event_kind, payload.get("booking_id"))
    else:
        logger.warning("Dropped %s for booking %s", event_kind, payload.get("booking_id"))
    return delivered
