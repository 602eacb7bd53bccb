"""Celery application for background delivery of booking events."""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "dispatch_backend.settings")

app = Celery("dispatch_backend")
app.config_from_object("django.conf:settings", namespace="CELERY")
# Worker threads of the web process resolve shared tasks through this app too
app.set_default()
app.autodiscover_tasks()
