"""Deliveryman routes.

GET    /deliverymen       — list deliverymen
GET    /deliverymen/{id}  — deliveryman detail
POST   /deliverymen       — create deliveryman
PUT    /deliverymen       — update deliveryman (id in body)
DELETE /deliverymen/{id}  — delete deliveryman
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from app.api.deps import get_deliveryman_manager
from app.db.models import Deliveryman
from app.deliveries.deliveryman_manager import DeliverymanManager

router = APIRouter(prefix="/deliverymen", tags=["deliverymen"])


class CreateDeliverymanBody(BaseModel):
    name: str
    email: EmailStr
    avatar_id: int | None = None


class UpdateDeliverymanBody(BaseModel):
    id: int
    name: str | None = None
    email: EmailStr | None = None
    avatar_id: int | None = None


def _deliveryman_summary(d: Deliveryman) -> dict:
    return {
        "id": d.id,
        "name": d.name,
        "email": d.email,
        "avatar_id": d.avatar_id,
    }


@router.get("", summary="List deliverymen")
def list_deliverymen(dm: DeliverymanManager = Depends(get_deliveryman_manager)):
    return [_deliveryman_summary(d) for d in dm.list_deliverymen()]


@router.get("/{deliveryman_id}", summary="Get deliveryman detail")
def get_deliveryman(deliveryman_id: int, dm: DeliverymanManager = Depends(get_deliveryman_manager)):
    try:
        deliveryman = dm.get_deliveryman(deliveryman_id)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    summary = _deliveryman_summary(deliveryman)
    summary["avatar_url"] = deliveryman.avatar.url if deliveryman.avatar else None
    return summary


@router.post("", summary="Create a deliveryman")
def create_deliveryman(
    body: CreateDeliverymanBody,
    dm: DeliverymanManager = Depends(get_deliveryman_manager),
):
    try:
        deliveryman = dm.create_deliveryman(body.name, body.email, avatar_id=body.avatar_id)
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return {"id": deliveryman.id, "name": deliveryman.name, "email": deliveryman.email}


@router.put("", summary="Update a deliveryman")
def update_deliveryman(
    body: UpdateDeliverymanBody,
    dm: DeliverymanManager = Depends(get_deliveryman_manager),
):
    try:
        deliveryman = dm.update_deliveryman(body.id, **body.model_dump(exclude_unset=True, exclude={"id"}))
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return _deliveryman_summary(deliveryman)


@router.delete("/{deliveryman_id}", summary="Delete a deliveryman")
def delete_deliveryman(deliveryman_id: int, dm: DeliverymanManager = Depends(get_deliveryman_manager)):
    try:
        dm.delete_deliveryman(deliveryman_id)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=exc.args[0])
    return None
