"""SQLAlchemy models for restaurants, tables and bookings."""

from datetime import date, time
from typing import Any, Dict, Optional
from uuid import uuid4

from sqlalchemy import JSON, Date, Float, ForeignKey, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base
from domain.enums import ReservationStatus, TableStatus


def _new_id() -> str:
    return str(uuid4())


class Restaurant(Base):
    """Restaurant row with its weekly hours and booking policy."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    timezone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # "HH:MM" or "HH:MM:SS"; NULL means closed that day
    monday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    monday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    tuesday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    tuesday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    wednesday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    wednesday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    thursday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    thursday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    friday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    friday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    saturday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    saturday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    sunday_open: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    sunday_close: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)

    # {"hours": int, "minutes": int}
    reservation_duration: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    min_advance_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    advance_booking_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    min_party_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_party_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    def to_record(self) -> Dict[str, Any]:
        """Column values keyed by column name."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}')>"


class DiningTable(Base):
    """A table of a restaurant."""

    __tablename__ = "dining_tables"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    restaurant_id: Mapped[str] = mapped_column(
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TableStatus.AVAILABLE.value,
    )

    def __repr__(self) -> str:
        return (
            f"<DiningTable(id={self.id}, capacity={self.capacity}, "
            f"status='{self.status}')>"
        )


class BookingRow(Base):
    """A reservation of a table."""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    restaurant_id: Mapped[str] = mapped_column(
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    table_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("dining_tables.id", ondelete="SET NULL"),
        nullable=True,
    )
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    booking_time: Mapped[time] = mapped_column(Time, nullable=False)
    expected_end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.PLANNED.value,
        index=True,
    )
    guest_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_bookings_restaurant_date", "restaurant_id", "booking_date"),
        Index("ix_bookings_table_date", "table_id", "booking_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingRow(id={self.id}, table_id={self.table_id}, "
            f"date={self.booking_date}, time={self.booking_time}, status='{self.status}')>"
        )
