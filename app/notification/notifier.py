"""Administrator notifications.

Notifications are free-text rows addressed to a user.  Only the content
length and the target user id are logged.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.db.models import Notification
from app.db.repositories import NotificationRepository, UserRepository

logger = logging.getLogger(__name__)


def notify_administrator(db_session: Session, content: str) -> Notification | None:
    """Address *content* to the first administrator user.

    Returns ``None`` when no administrator exists.  Flushes but does **not**
    commit; the caller controls the transaction boundary.
    """
    administrator = UserRepository(db_session).first_administrator()
    if administrator is None:
        logger.warning("No administrator user found; notification dropped (%d chars)", len(content))
        return None

    notification = NotificationRepository(db_session).create(content=content, user_id=administrator.id)
    logger.info("Notification %s created for user %s", notification.id, administrator.id)
    return notification


def list_notifications(db_session: Session, user_id: int, limit: int = 20) -> list[Notification]:
    """Return the latest notifications for *user_id*, newest first."""
    return NotificationRepository(db_session).list_for_user(user_id, limit=limit)


def mark_read(db_session: Session, notification_id: int) -> Notification:
    repo = NotificationRepository(db_session)
    notification = repo.get(notification_id)
    if notification is None:
        raise KeyError("Notification does not exist")
    return repo.update(notification, read=True)
