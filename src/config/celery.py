"""Celery application for ProList Protect.

Workers run the outbox relay on the beat schedule declared in the Django
settings (``CELERY_BEAT_SCHEDULE``); every ``CELERY_*`` setting is read
from there.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("prolist")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
