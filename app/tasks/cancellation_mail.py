"""Cancellation mail job.

``enqueue_cancellation_mail`` is called from the request path once a
delivery is soft-cancelled; the worker renders and sends the email.
"""
from __future__ import annotations

import logging
from dataclasses import asdict

from kombu.exceptions import OperationalError

from app.core.settings import get_settings
from app.notification.email_sender import CancellationMailSender
from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)

CANCELLATION_MAIL_KEY = "cancellation_mail"


@celery_app.task(name=CANCELLATION_MAIL_KEY, max_retries=0)
def send_cancellation_mail(payload: dict) -> dict:
    """Send the cancellation mail described by *payload*; return the receipt."""
    settings = get_settings()
    sender = CancellationMailSender(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        mail_from=settings.mail_from,
    )
    receipt = sender.send(payload)
    result = asdict(receipt)
    result["timestamp"] = receipt.timestamp.isoformat()
    return result


def enqueue_cancellation_mail(payload: dict) -> str | None:
    """Queue the cancellation mail; return the task id, or ``None`` if the broker is down.

    A failed enqueue does not roll back the cancellation.
    """
    try:
        result = send_cancellation_mail.delay(payload)
    except OperationalError as exc:
        logger.error("Could not enqueue cancellation mail for delivery %s: %s", payload.get("delivery_id"), exc)
        return None
    logger.info("Cancellation mail queued for delivery %s (task %s)", payload.get("delivery_id"), result.id)
    return result.id
