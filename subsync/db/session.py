from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from subsync.core.config import settings
from subsync.db.base import Base
from typing import Generator

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Engine = the DB connection factory
engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    connect_args=_connect_args,
    future=True
)

# SessionLocal = the session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)

def init_db() -> None:
    """Create any missing tables for the registered models"""
    import subsync.models  # noqa: F401  (registers every table on Base.metadata)

    Base.metadata.create_all(bind=engine)

def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
