"""FastAPI dependency injection — database sessions and manager factories."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.settings import get_settings
from app.db.session import get_session_factory
from app.deliveries.deliveryman_manager import DeliverymanManager
from app.deliveries.problem_manager import ProblemManager


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_problem_manager(db: Session = Depends(get_db)) -> ProblemManager:
    """Return a ProblemManager bound to the current DB session."""
    return ProblemManager(db, page_size=get_settings().problems_page_size)


def get_deliveryman_manager(db: Session = Depends(get_db)) -> DeliverymanManager:
    """Return a DeliverymanManager bound to the current DB session."""
    return DeliverymanManager(db)
