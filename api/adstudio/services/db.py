from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import settings
from ..models.exceptions import ServiceNotConfiguredException


_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def is_configured() -> bool:
    return bool(settings.database_url)


def get_engine() -> Engine:
    """Create the engine on first use; unset DATABASE_URL means 503."""
    global _engine, _SessionLocal
    if not settings.database_url:
        raise ServiceNotConfiguredException("Database", "DATABASE_URL")
    if _engine is None:
        kwargs = {"pool_pre_ping": True}
        if settings.database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        _engine = create_engine(settings.database_url, **kwargs)
        _SessionLocal = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    return _engine


def reset_engine() -> None:
    """Dispose the engine so the next call rebinds to the current DATABASE_URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def create_tables() -> None:
    from ..models.tables import Base

    Base.metadata.create_all(get_engine())


@contextmanager
def db_session() -> Iterator[Session]:
    get_engine()
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
