"""Notification inbox routes.

GET /notifications?user_id=N — latest notifications of a user
PUT /notifications/{id}      — mark a notification as read
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.db.models import Notification
from app.notification.notifier import list_notifications, mark_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_summary(n: Notification) -> dict:
    return {
        "id": n.id,
        "content": n.content,
        "user_id": n.user_id,
        "read": n.read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


@router.get("", summary="List notifications of a user")
def get_notifications(user_id: int = Query(...), db: Session = Depends(get_db)):
    return [_notification_summary(n) for n in list_notifications(db, user_id)]


@router.put("/{notification_id}", summary="Mark a notification as read")
def read_notification(notification_id: int, db: Session = Depends(get_db)):
    try:
        notification = mark_read(db, notification_id)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return _notification_summary(notification)
