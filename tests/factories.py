"""Row builders shared by the test modules."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.db.models import Delivery, Deliveryman, DeliveryProblem, File, Recipient, User


def make_admin(db: Session, *, name: str = "Admin", email: str = "admin@fastfeet.com") -> User:
    user = User(name=name, email=email, administrator=True)
    db.add(user)
    db.flush()
    return user


def make_deliveryman(db: Session, *, name: str = "Gaspar Antunes", email: str = "gaspar@fastfeet.com") -> Deliveryman:
    deliveryman = Deliveryman(name=name, email=email)
    db.add(deliveryman)
    db.flush()
    return deliveryman


def make_recipient(db: Session, *, name: str = "Ludwig van Beethoven") -> Recipient:
    recipient = Recipient(name=name, city="Diadema", state="SP")
    db.add(recipient)
    db.flush()
    return recipient


def make_delivery(
    db: Session,
    *,
    deliveryman: Deliveryman | None = None,
    recipient: Recipient | None = None,
    product: str = "Rocket stove",
    finished: bool = False,
) -> Delivery:
    signature_id = None
    end_date = None
    if finished:
        signature = File(name="signature.png", path=f"sig-{product}.png")
        db.add(signature)
        db.flush()
        signature_id = signature.id
        end_date = datetime.now(timezone.utc)

    delivery = Delivery(
        product=product,
        deliveryman_id=deliveryman.id if deliveryman else None,
        recipient_id=recipient.id if recipient else None,
        signature_id=signature_id,
        end_date=end_date,
    )
    db.add(delivery)
    db.flush()
    return delivery


def make_problem(db: Session, delivery: Delivery, *, description: str = "Recipient was not at home") -> DeliveryProblem:
    problem = DeliveryProblem(delivery_id=delivery.id, description=description)
    db.add(problem)
    db.flush()
    return problem
