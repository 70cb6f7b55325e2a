"""Celery application for background report rendering.

Start the worker::

    celery -A backend.app.workers.celery_app worker -Q exports --loglevel=info
"""

from __future__ import annotations

from celery import Celery

from backend.app.core.config import settings

celery = Celery(
    "kikstshop",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["backend.app.workers.tasks.exports"],
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=settings.SHOP_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Report rendering stays off the default queue
    task_routes={"backend.app.workers.tasks.exports.*": {"queue": "exports"}},
    # Results only carry the stored report's path and URL
    result_expires=24 * 60 * 60,
)
