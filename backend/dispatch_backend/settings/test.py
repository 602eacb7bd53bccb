"""Settings used by the test suite: file-backed SQLite, in-memory channel layer, eager Celery."""

import os
import tempfile

from .base import *  # noqa: F401,F403

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.path.join(tempfile.gettempdir(), 'ride_dispatch.sqlite3'),
        'OPTIONS': {
            # Writers queue on the database lock instead of deadlocking on upgrade
            'transaction_mode': 'IMMEDIATE',
            'timeout': 20,
        },
        # File backed so that concurrent dispatch tests can share it across threads
        'TEST': {
            'NAME': os.path.join(tempfile.gettempdir(), 'test_ride_dispatch.sqlite3'),
        },
    }
}

CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    }
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = None

BOOKING_TRANSACTION_BACKOFF_SECONDS = 0

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
