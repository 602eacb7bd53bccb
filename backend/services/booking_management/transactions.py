"""
Atomic execution with bounded retry for booking operations.

Every state-changing booking operation runs as one unit of work inside
``transaction.atomic``. Lock timeouts, deadlocks and "database is locked"
errors surface from Django as ``OperationalError``; those are treated as
transient and the whole unit is re-run from the start. Domain errors
(validation, not found, invalid transition) propagate on the first attempt.
"""

import functools
import logging
import time

from django.conf import settings
from django.db import OperationalError, transaction

from .exceptions import TransientStorageError

logger = logging.getLogger(__name__)


def atomic_with_retry(func):
    """Run ``func`` in its own transaction, retrying on transient storage errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        attempts = max(1, settings.BOOKING_TRANSACTION_MAX_ATTEMPTS)
        backoff = settings.BOOKING_TRANSACTION_BACKOFF_SECONDS

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    return func(*args, **kwargs)
            except OperationalError as exc:
                if attempt == attempts:
                    logger.error(
                        "%s gave up after %s attempts: %s", func.__name__, attempts, exc
                    )
                    raise TransientStorageError(
                        "The booking store is busy. Please try again."
                    ) from exc

                delay = backoff * (2 ** (attempt - 1))
                logger.warning(
                    "Transient storage error in %s (attempt %s/%s), retrying in %.3fs: %s",
                    func.__name__, attempt, attempts, delay, exc,
                )
                if delay:
                    time.sleep(delay)

    return wrapper
