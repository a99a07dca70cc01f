"""
Database engine, session factory and FastAPI session dependency.

All request handlers share one synchronous engine. Each request gets its
own session from ``get_sync_db``; the session is always closed when the
request finishes.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from salon_backend.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def build_engine(database_url: str, echo: bool = False):
    """Create an engine with the connect arguments the backend needs."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(global_settings.DB_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_sync_db() -> Generator[Session, None, None]:
    """
    Yield a database session for one request.

    Usage:
        @router.get("/")
        async def route(db: Session = Depends(get_sync_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create all tables registered on ``Base.metadata``."""
    # Models must be imported so their tables are registered
    from salon_backend.fastapi import models  # noqa: F401

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    logger.info("Database tables ensured on %s", target.url.render_as_string(hide_password=True))
