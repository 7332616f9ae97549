"""Tests for app/deliveries/deliveryman_manager.py."""
from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from app.db.models import File
from app.deliveries.deliveryman_manager import DeliverymanManager
from tests.factories import make_deliveryman


def test_update_ignores_none_values(db_session: Session) -> None:
    courier = make_deliveryman(db_session, name="Gaspar", email="gaspar@fastfeet.com")
    DeliverymanManager(db_session).update_deliveryman(courier.id, name=None, email=None)
    assert courier.name == "Gaspar"
    assert courier.email == "gaspar@fastfeet.com"


def test_update_changes_email_when_free(db_session: Session) -> None:
    courier = make_deliveryman(db_session, email="gaspar@fastfeet.com")
    DeliverymanManager(db_session).update_deliveryman(courier.id, email="g.antunes@fastfeet.com")
    assert courier.email == "g.antunes@fastfeet.com"


def test_create_duplicate_raises_value_error(db_session: Session) -> None:
    make_deliveryman(db_session, email="gaspar@fastfeet.com")
    with pytest.raises(ValueError, match="User already exists."):
        DeliverymanManager(db_session).create_deliveryman("Other", "gaspar@fastfeet.com")


def test_delete_missing_raises_key_error(db_session: Session) -> None:
    with pytest.raises(KeyError):
        DeliverymanManager(db_session).delete_deliveryman(1)


def test_list_is_unbounded(db_session: Session) -> None:
    for i in range(120):
        make_deliveryman(db_session, name=f"Courier {i}", email=f"c{i}@fastfeet.com")
    assert len(DeliverymanManager(db_session).list_deliverymen()) == 120


def test_update_with_none_avatar_clears_it(db_session: Session) -> None:
    avatar = File(name="me.png", path="me.png")
    db_session.add(avatar)
    db_session.flush()
    courier = make_deliveryman(db_session)
    courier.avatar_id = avatar.id
    db_session.flush()

    DeliverymanManager(db_session).update_deliveryman(courier.id, avatar_id=None)
    assert courier.avatar_id is None
