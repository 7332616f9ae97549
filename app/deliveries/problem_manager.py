"""Delivery problem manager.

Reports problems against open deliveries and cancels the delivery behind a
problem.  Creating a problem notifies the administrator.  Cancelling only
flushes the change; the caller commits and then queues the mail built by
``cancellation_payload``, so a rolled-back cancellation never sends one.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models import Delivery, DeliveryProblem
from app.db.repositories import DeliveryProblemRepository, DeliveryRepository, DeliverymanRepository
from app.notification.notifier import notify_administrator

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class ProblemManager:
    """List, report and act on delivery problems."""

    def __init__(self, db_session: Session, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.db = db_session
        self.page_size = page_size
        self.deliveries = DeliveryRepository(db_session)
        self.deliverymen = DeliverymanRepository(db_session)
        self.problems = DeliveryProblemRepository(db_session)

    def _offset(self, page: int) -> int:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        return (page - 1) * self.page_size

    # -- query --------------------------------------------------------------

    def list_problems(self, page: int = 1) -> list[DeliveryProblem]:
        """Return one page of all problems, ordered by id."""
        return self.problems.list_detailed(limit=self.page_size, offset=self._offset(page))

    def list_delivery_problems(self, delivery_id: int, page: int = 1) -> list[DeliveryProblem]:
        """Return one page of the problems reported for *delivery_id*."""
        if self.deliveries.get(delivery_id) is None:
            raise KeyError("Delivery does not exist")
        return self.problems.list_detailed(
            delivery_id=delivery_id,
            limit=self.page_size,
            offset=self._offset(page),
        )

    # -- report -------------------------------------------------------------

    def report_problem(
        self,
        delivery_id: int,
        deliveryman_id: int,
        description: str,
    ) -> DeliveryProblem:
        """Create a problem for an open delivery owned by *deliveryman_id*."""
        delivery = self.deliveries.get(delivery_id)
        if delivery is None:
            raise KeyError("Delivery does not exist")
        if delivery.is_finished:
            raise ValueError("The delivery has been finished")

        deliveryman = self.deliverymen.get(deliveryman_id)
        if deliveryman is None:
            raise KeyError("Deliveryman does not exist")

        if self.deliveries.find_for_deliveryman(delivery_id, deliveryman_id) is None:
            raise PermissionError("Delivery does not belong deliveryman")

        problem = self.problems.create(delivery_id=delivery_id, description=description)
        logger.info("Delivery problem %s reported for delivery %s", problem.id, delivery_id)

        notify_administrator(
            self.db,
            f"New delivery problem by {deliveryman.name} for delivery {delivery_id}",
        )
        return problem

    # -- cancel -------------------------------------------------------------

    def cancel_delivery(self, problem_id: int) -> Delivery:
        """Soft-cancel the delivery behind *problem_id*."""
        problem = self.problems.get(problem_id)
        if problem is None:
            raise KeyError("Delivery problem does not exist")

        delivery = self.deliveries.get_with_parties(problem.delivery_id)
        if delivery is None:
            raise KeyError("Delivery does not exist")
        if delivery.is_finished:
            raise ValueError("The delivery has been finished")

        delivery.canceled_at = datetime.now(timezone.utc)
        self.db.flush()
        logger.info("Delivery %s canceled after problem %s", delivery.id, problem_id)
        return delivery


def cancellation_payload(delivery: Delivery) -> dict:
    """Build the JSON-serialisable job payload for the cancellation mail."""
    deliveryman = delivery.deliveryman
    recipient = delivery.recipient
    return {
        "delivery_id": delivery.id,
        "product": delivery.product,
        "canceled_at": delivery.canceled_at.isoformat() if delivery.canceled_at else None,
        "deliveryman": (
            {"id": deliveryman.id, "name": deliveryman.name, "email": deliveryman.email}
            if deliveryman
            else None
        ),
        "recipient": {"id": recipient.id, "name": recipient.name} if recipient else None,
    }
