"""
Celery configuration for the marketplace backend.

Celery runs work that should not block a request, such as re-checking
pending Stripe checkout sessions. Redis is both broker and result backend.
Tasks are auto-discovered from the tasks.py module of every installed app.

Usage:
    from payments.tasks import sync_pending_charges

    sync_pending_charges.delay()
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("marketplace")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
