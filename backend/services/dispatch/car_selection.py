"""
Car selection for new bookings.

Matching policy: the eligible car with the lowest id wins. There is no
ranking by distance, rating or idle time.
"""

import logging
from typing import Optional

from django.conf import settings

from fleet.models import Car
from services.booking_management import repository

logger = logging.getLogger(__name__)


def select_and_claim_car() -> Optional[Car]:
    """
    Pick an eligible car and mark it busy, inside the caller's transaction.

    When a concurrent dispatch claims the chosen car between the read and the
    conditional update, the next candidate is tried, up to
    ``DISPATCH_MAX_CANDIDATES`` cars. Returns None when nothing could be
    claimed.
    """
    skipped = []
    for _ in range(max(1, settings.DISPATCH_MAX_CANDIDATES)):
        car = repository.find_available_car_with_active_driver(exclude=skipped)
        if car is None:
            return None

        if repository.claim_car(car):
            return car

        logger.info("Car %s was claimed by another booking, trying the next one", car.id)
        skipped.append(car.id)

    logger.warning("No car could be claimed after %s candidates", len(skipped))
    return None
