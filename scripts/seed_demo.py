#!/usr/bin/env python3
"""Seed demo data: 1 administrator, 3 deliverymen, 3 recipients, 5 deliveries.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

# Ensure project root is on sys.path
sys.path.insert(0, ".")

from app.db.base import Base
from app.db.models import Delivery, Deliveryman, DeliveryProblem, File, Recipient, User
from app.db.session import get_engine


def seed(session: Session) -> None:
    """Insert demo users, deliverymen, recipients, deliveries and problems."""
    now = datetime.now(timezone.utc)

    session.add(User(name="Distribuidora FastFeet", email="admin@fastfeet.com", administrator=True))

    couriers = [
        Deliveryman(name="Gaspar Antunes", email="gaspar@fastfeet.com"),
        Deliveryman(name="Dai Jiang", email="dai@fastfeet.com"),
        Deliveryman(name="Tom Hanson", email="tom@fastfeet.com"),
    ]
    recipients = [
        Recipient(name="Ludwig van Beethoven", street="Rua Beethoven", number="1729",
                  state="SP", city="Diadema", zip_code="09960-580"),
        Recipient(name="Wolfgang Amadeus", street="Rua Mozart", number="1756",
                  state="RJ", city="Rio de Janeiro", zip_code="20010-000"),
        Recipient(name="Johann Sebastian Bach", street="Rua Bach", number="1685",
                  state="MG", city="Belo Horizonte", zip_code="30110-000"),
    ]
    session.add_all(couriers + recipients)
    session.flush()

    signature = File(name="signature.png", path="demo-signature.png")
    session.add(signature)
    session.flush()

    deliveries = [
        # (product, courier, recipient, started, finished)
        ("Rocket stove", couriers[0], recipients[0], True, False),
        ("Wireless headphones", couriers[0], recipients[1], False, False),
        ("Vinyl collection", couriers[1], recipients[2], True, True),
        ("Standing desk", couriers[2], recipients[0], True, False),
        ("Espresso machine", couriers[1], recipients[1], False, False),
    ]
    rows: list[Delivery] = []
    for product, courier, recipient, started, finished in deliveries:
        delivery = Delivery(
            product=product,
            deliveryman_id=courier.id,
            recipient_id=recipient.id,
            start_date=now - timedelta(hours=6) if started else None,
            end_date=now - timedelta(hours=1) if finished else None,
            signature_id=signature.id if finished else None,
        )
        session.add(delivery)
        rows.append(delivery)
    session.flush()

    session.add_all([
        DeliveryProblem(delivery_id=rows[0].id, description="Recipient was not at home"),
        DeliveryProblem(delivery_id=rows[3].id, description="Package damaged in transit"),
    ])

    session.commit()
    print(f"Seeded 1 administrator, {len(couriers)} deliverymen, {len(recipients)} recipients, "
          f"{len(rows)} deliveries, 2 delivery problems.")


def main() -> None:
    engine = get_engine()
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        seed(session)


if __name__ == "__main__":
    main()
