"""
Engine and session handling for the dashboard database.

The engine is created on first use, so importing this module (or anything
that imports the models) never opens a connection pool.

Usage:
    # Scripts and the refresh pipeline: one unit of work per block
    from courtside.db import get_session

    with get_session() as session:
        session.add(Player(name="Jannik Sinner", ranking=1, points=11830))
        # committed on exit, rolled back if the block raises

    # FastAPI endpoints: one session per request
    from courtside.db.session import get_db

    @app.get("/api/players")
    def list_players(db: Session = Depends(get_db)):
        ...
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from courtside.config import settings


def database_url() -> URL:
    """
    Resolve the connection URL.

    When a service credential is configured it replaces whatever password
    the URL carries, so the URL itself can be committed without secrets.
    """
    url = make_url(settings.database_url)
    if settings.database_service_key:
        url = url.set(password=settings.database_service_key)
    return url


def get_engine() -> Engine:
    """
    Build a pooled engine for database_url().

    Connections are pre-pinged so a pool that outlived a database restart
    recovers on its own. SQL echo follows LOG_LEVEL=DEBUG.
    """
    return create_engine(
        database_url(),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
    )


_engine = None


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Bound to the engine per call in get_session()/get_db()
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Yield a session that commits when the block finishes.

    Raises:
        Whatever the block raised, after the transaction is rolled back
    """
    session = SessionLocal(bind=_get_engine())
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: a request-scoped session the endpoint commits itself."""
    db = SessionLocal(bind=_get_engine())
    try:
        yield db
    finally:
        db.close()
