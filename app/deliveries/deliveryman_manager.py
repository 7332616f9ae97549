"""Deliveryman records: list, create, update and delete.

Email addresses are unique across deliverymen.  The check happens here
rather than in the schema, on both create and update.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.db.models import Deliveryman
from app.db.repositories import DeliverymanRepository, FileRepository

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = frozenset({"avatar_id"})


class DeliverymanManager:
    def __init__(self, db_session: Session) -> None:
        self.db = db_session
        self.deliverymen = DeliverymanRepository(db_session)
        self.files = FileRepository(db_session)

    def list_deliverymen(self) -> list[Deliveryman]:
        return self.deliverymen.list(limit=None)

    def get_deliveryman(self, deliveryman_id: int) -> Deliveryman:
        deliveryman = self.deliverymen.get(deliveryman_id)
        if deliveryman is None:
            raise KeyError("Deliveryman does not exist")
        return deliveryman

    def _check_avatar(self, avatar_id: int | None) -> None:
        if avatar_id is not None and self.files.get(avatar_id) is None:
            raise KeyError("Avatar does not exist")

    def create_deliveryman(self, name: str, email: str, avatar_id: int | None = None) -> Deliveryman:
        if self.deliverymen.find_by_email(email) is not None:
            raise ValueError("User already exists.")
        self._check_avatar(avatar_id)

        deliveryman = self.deliverymen.create(name=name, email=email, avatar_id=avatar_id)
        logger.info("Deliveryman %s created", deliveryman.id)
        return deliveryman

    def update_deliveryman(self, deliveryman_id: int, **changes) -> Deliveryman:
        """Apply *changes* (name, email, avatar_id) to an existing deliveryman.

        Only the keys passed are touched.  ``None`` clears ``avatar_id`` and is
        ignored for the required name and email.  Changing the email to one
        held by another deliveryman raises ``ValueError``.
        """
        deliveryman = self.get_deliveryman(deliveryman_id)
        changes = {
            key: value for key, value in changes.items() if value is not None or key in _NULLABLE_FIELDS
        }

        email = changes.get("email")
        if email and email != deliveryman.email:
            if self.deliverymen.find_by_email(email) is not None:
                raise ValueError("Deliveryman already exists.")
        self._check_avatar(changes.get("avatar_id"))

        self.deliverymen.update(deliveryman, **changes)
        logger.info("Deliveryman %s updated (%s)", deliveryman.id, ", ".join(sorted(changes)) or "no changes")
        return deliveryman

    def delete_deliveryman(self, deliveryman_id: int) -> None:
        deliveryman = self.get_deliveryman(deliveryman_id)
        self.deliverymen.delete(deliveryman)
        logger.info("Deliveryman %s deleted", deliveryman_id)
