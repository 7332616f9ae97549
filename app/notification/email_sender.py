"""SMTP sender for delivery cancellation emails.

Runs inside the background worker.  Retries up to 3 times with exponential
backoff before reporting ``FAILED``.

Safety: the deliveryman email is never logged, only ``delivery_id``.
"""
from __future__ import annotations

import logging
import smtplib
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from string import Template
from typing import Literal

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "cancellation_email.html"

_MAX_RETRIES = 3
_BACKOFF_BASE = 1  # seconds: 1, 2


@dataclass
class MailReceipt:
    """Record of a single cancellation mail attempt."""

    delivery_id: int | None
    email: str
    status: Literal["SENT", "FAILED", "SKIPPED"]
    timestamp: datetime
    smtp_response: str | None
    attempt_count: int


def _format_date(value: str | None) -> str:
    if not value:
        moment = datetime.now(timezone.utc)
    else:
        moment = datetime.fromisoformat(value)
    return moment.strftime("%B %d, %Y %H:%M")


def render_cancellation(payload: dict, template_dir: str | Path = TEMPLATE_DIR) -> str:
    """Substitute the job payload into the cancellation template."""
    template_html = (Path(template_dir) / TEMPLATE_NAME).read_text(encoding="utf-8")
    deliveryman = payload.get("deliveryman") or {}
    recipient = payload.get("recipient") or {}
    return Template(template_html).safe_substitute(
        deliveryman_name=deliveryman.get("name") or "deliveryman",
        delivery_id=payload.get("delivery_id", ""),
        product=payload.get("product") or "",
        recipient_name=recipient.get("name") or "",
        canceled_date=_format_date(payload.get("canceled_at")),
    )


class CancellationMailSender:
    """Send the delivery cancellation email to the responsible deliveryman."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int = 587,
        mail_from: str = "noreply@fastfeet.local",
        template_dir: str | Path = TEMPLATE_DIR,
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.mail_from = mail_from
        self.template_dir = template_dir

    def send(self, payload: dict) -> MailReceipt:
        """Render the template, send via SMTP, return a receipt."""
        delivery_id = payload.get("delivery_id")
        deliveryman = payload.get("deliveryman") or {}
        address = deliveryman.get("email")

        if not address:
            logger.info("Delivery %s has no deliveryman email; skipping", delivery_id)
            return MailReceipt(
                delivery_id=delivery_id,
                email="",
                status="SKIPPED",
                timestamp=datetime.now(timezone.utc),
                smtp_response=None,
                attempt_count=0,
            )

        msg = MIMEMultipart("alternative")
        msg["Subject"] = "Delivery canceled"
        msg["From"] = self.mail_from
        msg["To"] = f"{deliveryman.get('name', '')} <{address}>"
        msg.attach(MIMEText(render_cancellation(payload, self.template_dir), "html"))

        last_error: str | None = None
        for attempt in range(1, _MAX_RETRIES + 1):
            try:
                with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                    server.sendmail(self.mail_from, [address], msg.as_string())
                logger.info("Cancellation mail sent for delivery %s (attempt %d)", delivery_id, attempt)
                return MailReceipt(
                    delivery_id=delivery_id,
                    email=address,
                    status="SENT",
                    timestamp=datetime.now(timezone.utc),
                    smtp_response="250 OK",
                    attempt_count=attempt,
                )
            except (smtplib.SMTPException, OSError) as exc:
                last_error = str(exc)
                logger.warning(
                    "SMTP error for delivery %s attempt %d: %s", delivery_id, attempt, last_error
                )
                if attempt < _MAX_RETRIES:
                    time.sleep(_BACKOFF_BASE * (2 ** (attempt - 1)))

        logger.error("Cancellation mail failed for delivery %s after %d attempts", delivery_id, _MAX_RETRIES)
        return MailReceipt(
            delivery_id=delivery_id,
            email=address,
            status="FAILED",
            timestamp=datetime.now(timezone.utc),
            smtp_response=last_error,
            attempt_count=_MAX_RETRIES,
        )
