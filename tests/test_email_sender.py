"""Tests for app/notification/email_sender.py.

All SMTP calls are mocked — no real server needed.
"""
from __future__ import annotations

import email as email_mod
import smtplib
from unittest.mock import MagicMock, patch

from app.notification.email_sender import CancellationMailSender, render_cancellation


def _payload(**overrides) -> dict:
    payload = {
        "delivery_id": 7,
        "product": "Rocket stove",
        "canceled_at": "2026-10-19T12:30:00+00:00",
        "deliveryman": {"id": 1, "name": "Gaspar Antunes", "email": "gaspar@fastfeet.com"},
        "recipient": {"id": 2, "name": "Ludwig van Beethoven"},
    }
    payload.update(overrides)
    return payload


def _mock_server(mock_smtp_cls) -> MagicMock:
    mock_server = MagicMock()
    mock_smtp_cls.return_value.__enter__ = MagicMock(return_value=mock_server)
    mock_smtp_cls.return_value.__exit__ = MagicMock(return_value=False)
    return mock_server


class TestRender:
    def test_substitutes_fields(self):
        html = render_cancellation(_payload())
        assert "Gaspar Antunes" in html
        assert "#7" in html
        assert "Rocket stove" in html
        assert "Ludwig van Beethoven" in html
        assert "October 19, 2026 12:30" in html

    def test_missing_recipient(self):
        html = render_cancellation(_payload(recipient=None))
        assert "${recipient_name}" not in html


class TestSend:
    @patch("app.notification.email_sender.smtplib.SMTP")
    def test_sent(self, mock_smtp_cls):
        mock_server = _mock_server(mock_smtp_cls)

        sender = CancellationMailSender(smtp_host="localhost", smtp_port=25)
        receipt = sender.send(_payload())

        assert receipt.status == "SENT"
        assert receipt.delivery_id == 7
        assert receipt.attempt_count == 1
        mock_smtp_cls.assert_called_once_with("localhost", 25)
        from_addr, to_addrs, raw = mock_server.sendmail.call_args.args
        assert to_addrs == ["gaspar@fastfeet.com"]
        msg = email_mod.message_from_string(raw)
        assert msg["Subject"] == "Delivery canceled"
        assert "gaspar@fastfeet.com" in msg["To"]

    def test_no_email_is_skipped(self):
        sender = CancellationMailSender(smtp_host="localhost")
        receipt = sender.send(_payload(deliveryman=None))
        assert receipt.status == "SKIPPED"
        assert receipt.attempt_count == 0
        assert receipt.email == ""

    @patch("app.notification.email_sender.time.sleep")
    @patch("app.notification.email_sender.smtplib.SMTP")
    def test_retry_succeeds_on_second_attempt(self, mock_smtp_cls, mock_sleep):
        mock_server = _mock_server(mock_smtp_cls)
        mock_server.sendmail.side_effect = [smtplib.SMTPException("temporary error"), None]

        receipt = CancellationMailSender(smtp_host="localhost").send(_payload())

        assert receipt.status == "SENT"
        assert receipt.attempt_count == 2
        mock_sleep.assert_called_once_with(1)

    @patch("app.notification.email_sender.time.sleep")
    @patch("app.notification.email_sender.smtplib.SMTP")
    def test_three_failures_returns_failed(self, mock_smtp_cls, mock_sleep):
        mock_server = _mock_server(mock_smtp_cls)
        mock_server.sendmail.side_effect = smtplib.SMTPException("permanent error")

        receipt = CancellationMailSender(smtp_host="localhost").send(_payload())

        assert receipt.status == "FAILED"
        assert receipt.attempt_count == 3
        assert receipt.smtp_response == "permanent error"
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch("app.notification.email_sender.time.sleep")
    @patch("app.notification.email_sender.smtplib.SMTP")
    def test_connection_refused_is_retried(self, mock_smtp_cls, mock_sleep):
        mock_smtp_cls.side_effect = ConnectionRefusedError("refused")
        receipt = CancellationMailSender(smtp_host="localhost").send(_payload())
        assert receipt.status == "FAILED"
        assert mock_smtp_cls.call_count == 3
