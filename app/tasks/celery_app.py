"""Celery application for background jobs.

Broker and result backend come from settings.  Set
``CELERY_TASK_ALWAYS_EAGER=true`` to run jobs inline (local development).
In eager mode the cancellation mail is sent inside the HTTP request,
including the SMTP retries, so a failing relay holds the response for about
3 seconds of backoff (1s, then 2s) on top of the connection attempts.
"""
from __future__ import annotations

from celery import Celery

from app.core.settings import get_settings

settings = get_settings()

celery_app = Celery(
    "fastfeet",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.cancellation_mail"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=120,
    result_expires=3600,
    task_always_eager=settings.celery_task_always_eager,
)
