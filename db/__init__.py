"""Database layer for table booking."""

from .base import Base
from .models_sqlalchemy import Restaurant, DiningTable, BookingRow
from .repository import SqlAlchemyReservationStore
from .session import (
    engine,
    SessionLocal,
    create_engine,
    create_session_factory,
    init_db,
    drop_db,
    close_db,
)

__all__ = [
    # Base
    "Base",
    # Models
    "Restaurant",
    "DiningTable",
    "BookingRow",
    # Store
    "SqlAlchemyReservationStore",
    # Session
    "engine",
    "SessionLocal",
    "create_engine",
    "create_session_factory",
    "init_db",
    "drop_db",
    "close_db",
]
