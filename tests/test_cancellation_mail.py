"""Tests for the cancellation mail Celery task and its enqueue helper."""
from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from kombu.exceptions import OperationalError

from app.notification.email_sender import MailReceipt
from app.tasks.cancellation_mail import (
    CANCELLATION_MAIL_KEY,
    enqueue_cancellation_mail,
    send_cancellation_mail,
)
from app.tasks.celery_app import celery_app


PAYLOAD = {
    "delivery_id": 3,
    "product": "Desk",
    "canceled_at": None,
    "deliveryman": {"id": 1, "name": "Dai", "email": "dai@fastfeet.com"},
    "recipient": {"id": 2, "name": "Bach"},
}


def test_task_is_registered():
    assert CANCELLATION_MAIL_KEY in celery_app.tasks


@patch("app.tasks.cancellation_mail.CancellationMailSender")
def test_task_sends_and_returns_receipt(mock_sender_cls):
    mock_sender_cls.return_value.send.return_value = MailReceipt(
        delivery_id=3,
        email="dai@fastfeet.com",
        status="SENT",
        timestamp=datetime(2026, 10, 19, tzinfo=timezone.utc),
        smtp_response="250 OK",
        attempt_count=1,
    )

    result = send_cancellation_mail.apply(args=[PAYLOAD]).get()

    mock_sender_cls.return_value.send.assert_called_once_with(PAYLOAD)
    assert result["status"] == "SENT"
    assert result["timestamp"] == "2026-10-19T00:00:00+00:00"


@patch("app.tasks.cancellation_mail.send_cancellation_mail")
def test_enqueue_returns_task_id(mock_task):
    mock_task.delay.return_value = MagicMock(id="abc")
    assert enqueue_cancellation_mail(PAYLOAD) == "abc"
    mock_task.delay.assert_called_once_with(PAYLOAD)


@patch("app.tasks.cancellation_mail.send_cancellation_mail")
def test_enqueue_broker_down_returns_none(mock_task):
    mock_task.delay.side_effect = OperationalError("connection refused")
    assert enqueue_cancellation_mail(PAYLOAD) is None
