"""
Celery configuration for the PrintHub backend.

Workers deliver order notifications (persist + websocket fan-out) off the
request path.
"""

import os

from celery import Celery


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "printhubBackend.settings")

app = Celery("printhubBackend")

# Settings prefixed with CELERY_ in Django settings configure the app.
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()

app.conf.update(
    task_routes={
        "notifications.tasks.*": {"queue": "notification_tasks"},
    },
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,
    worker_max_tasks_per_child=1000,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
)
