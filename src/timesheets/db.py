from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)


def build_engine(url: str, **kwargs) -> Engine:
    """
    Engine for `url`. SQLite connections are shared by the request
    threads, so the same-thread check is turned off for them.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def init_db(bind: Engine | None = None) -> None:
    """
    Create missing tables without Alembic (demo databases, tests).
    """
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logger.info("Timesheet tables ready on %s", bind.url.render_as_string(hide_password=True))


def get_db():
    """
    FastAPI dependency. Routes commit explicitly; closing an uncommitted
    session rolls it back.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Session:
    """
    Transaction for scripts: commit on success, rollback on any error.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
