from __future__ import annotations

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.db import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def create(self, **kwargs) -> ModelT:
        entity = self.model(**kwargs)
        self.db.add(entity)
        self.db.flush()
        return entity

    def get(self, entity_id: int) -> ModelT | None:
        return self.db.get(self.model, entity_id)

    def list(self, limit: int = 100, offset: int = 0) -> list[ModelT]:
        stmt = select(self.model).order_by(self.model.id).offset(offset).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def update(self, entity: ModelT, **kwargs) -> ModelT:
        for key, value in kwargs.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()


class UserRepository(BaseRepository[models.User]):
    model = models.User

    def first_administrator(self) -> models.User | None:
        stmt = select(models.User).where(models.User.administrator.is_(True)).order_by(models.User.id).limit(1)
        return self.db.execute(stmt).scalars().first()


class FileRepository(BaseRepository[models.File]):
    model = models.File


class RecipientRepository(BaseRepository[models.Recipient]):
    model = models.Recipient


class DeliverymanRepository(BaseRepository[models.Deliveryman]):
    model = models.Deliveryman

    def find_by_email(self, email: str) -> models.Deliveryman | None:
        stmt = select(models.Deliveryman).where(models.Deliveryman.email == email)
        return self.db.execute(stmt).scalars().first()


class DeliveryRepository(BaseRepository[models.Delivery]):
    model = models.Delivery

    def get_with_parties(self, delivery_id: int) -> models.Delivery | None:
        """Load a delivery together with its recipient and deliveryman."""
        stmt = (
            select(models.Delivery)
            .where(models.Delivery.id == delivery_id)
            .options(
                selectinload(models.Delivery.recipient),
                selectinload(models.Delivery.deliveryman),
            )
        )
        return self.db.execute(stmt).scalars().first()

    def find_for_deliveryman(self, delivery_id: int, deliveryman_id: int) -> models.Delivery | None:
        stmt = select(models.Delivery).where(
            models.Delivery.id == delivery_id,
            models.Delivery.deliveryman_id == deliveryman_id,
        )
        return self.db.execute(stmt).scalars().first()


class DeliveryProblemRepository(BaseRepository[models.DeliveryProblem]):
    model = models.DeliveryProblem

    def list_detailed(
        self,
        *,
        delivery_id: int | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[models.DeliveryProblem]:
        """Problems ordered by id with delivery, recipient and deliveryman eagerly loaded."""
        stmt = (
            select(models.DeliveryProblem)
            .options(
                selectinload(models.DeliveryProblem.delivery).selectinload(models.Delivery.recipient),
                selectinload(models.DeliveryProblem.delivery).selectinload(models.Delivery.deliveryman),
            )
            .order_by(models.DeliveryProblem.id)
            .offset(offset)
            .limit(limit)
        )
        if delivery_id is not None:
            stmt = stmt.where(models.DeliveryProblem.delivery_id == delivery_id)
        return list(self.db.execute(stmt).scalars().all())


class NotificationRepository(BaseRepository[models.Notification]):
    model = models.Notification

    def list_for_user(self, user_id: int, limit: int = 20) -> list[models.Notification]:
        stmt = (
            select(models.Notification)
            .where(models.Notification.user_id == user_id)
            .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
