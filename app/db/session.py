from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.settings import get_settings

_engine = None
_session_factory = None


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # Sessions are used from FastAPI threadpool threads, not the creating thread.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def get_engine():
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        _engine = create_engine(database_url, **_engine_options(database_url))
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            class_=Session,
        )
    return _session_factory
