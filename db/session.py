"""Database session management for table booking."""

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings


def create_engine(url: str = settings.DATABASE_URL, echo: bool = settings.DB_ECHO) -> Engine:
    """
    Create the SQLAlchemy engine.

    Args:
        url: Database URL
        echo: Whether to log all SQL statements

    Returns:
        SQLAlchemy engine
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return sa_create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(bind: Engine) -> sessionmaker:
    """Session factory with the project's session defaults."""
    return sessionmaker(
        bind=bind,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


# Global engine instance
engine: Engine = create_engine()

SessionLocal = create_session_factory(engine)


def init_db(bind: Engine = None) -> None:
    """Initialize database by creating all tables."""
    from . import models_sqlalchemy  # noqa: F401  register models
    from .base import Base

    Base.metadata.create_all(bind=bind or engine)


def drop_db(bind: Engine = None) -> None:
    """Drop all database tables. Use with caution!"""
    from .base import Base

    Base.metadata.drop_all(bind=bind or engine)


def close_db() -> None:
    """Close database engine and all connections."""
    engine.dispose()
