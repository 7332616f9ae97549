"""Delivery problem routes.

GET    /delivery-problems                          — all problems, paginated
GET    /deliveries/{delivery_id}/problems          — problems of one delivery
POST   /deliveries/{delivery_id}/problems          — report a problem
DELETE /delivery-problems/{problem_id}/cancel-delivery — cancel the delivery
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.api.deps import get_problem_manager
from app.db.models import Delivery, DeliveryProblem, Deliveryman, Recipient
from app.deliveries.problem_manager import ProblemManager, cancellation_payload
from app.tasks.cancellation_mail import enqueue_cancellation_mail

router = APIRouter(tags=["delivery-problems"])


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class ReportProblemBody(BaseModel):
    description: str = Field(min_length=1)
    deliveryman_id: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _isoformat(value):
    return value.isoformat() if value else None


def _recipient_dict(r: Recipient | None) -> dict | None:
    if r is None:
        return None
    return {"id": r.id, "name": r.name}


def _deliveryman_dict(d: Deliveryman | None) -> dict | None:
    if d is None:
        return None
    return {"id": d.id, "name": d.name, "email": d.email}


def _problem_detail(p: DeliveryProblem) -> dict:
    return {
        "id": p.id,
        "description": p.description,
        "created_at": _isoformat(p.created_at),
        "delivery": {
            "product": p.delivery.product,
            "recipient": _recipient_dict(p.delivery.recipient),
            "deliveryman": _deliveryman_dict(p.delivery.deliveryman),
        },
    }


def _delivery_dict(d: Delivery) -> dict:
    return {
        "id": d.id,
        "product": d.product,
        "canceled_at": _isoformat(d.canceled_at),
        "start_date": _isoformat(d.start_date),
        "end_date": _isoformat(d.end_date),
        "signature_id": d.signature_id,
        "recipient": _recipient_dict(d.recipient),
        "deliveryman": _deliveryman_dict(d.deliveryman),
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/delivery-problems", summary="List all delivery problems")
def list_problems(
    page: int = Query(1, ge=1),
    pm: ProblemManager = Depends(get_problem_manager),
):
    return [_problem_detail(p) for p in pm.list_problems(page)]


@router.get("/deliveries/{delivery_id}/problems", summary="List problems of a delivery")
def list_delivery_problems(
    delivery_id: int,
    page: int = Query(1, ge=1),
    pm: ProblemManager = Depends(get_problem_manager),
):
    try:
        problems = pm.list_delivery_problems(delivery_id, page)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return [_problem_detail(p) for p in problems]


@router.post("/deliveries/{delivery_id}/problems", summary="Report a delivery problem")
def report_problem(
    delivery_id: int,
    body: ReportProblemBody,
    pm: ProblemManager = Depends(get_problem_manager),
):
    try:
        problem = pm.report_problem(delivery_id, body.deliveryman_id, body.description)
    except (KeyError, ValueError, PermissionError) as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return {
        "id": problem.id,
        "delivery_id": problem.delivery_id,
        "deliveryman_id": body.deliveryman_id,
        "description": problem.description,
        "created_at": _isoformat(problem.created_at),
    }


@router.delete(
    "/delivery-problems/{problem_id}/cancel-delivery",
    summary="Cancel the delivery behind a problem",
)
def cancel_delivery(
    problem_id: int,
    pm: ProblemManager = Depends(get_problem_manager),
):
    try:
        delivery = pm.cancel_delivery(problem_id)
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])

    # The mail goes out only once the cancellation is durable.
    pm.db.commit()
    enqueue_cancellation_mail(cancellation_payload(delivery))
    return _delivery_dict(delivery)
