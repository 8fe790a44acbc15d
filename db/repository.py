"""SQLAlchemy-backed storage collaborator."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.restaurant_config import RestaurantConfig
from domain.models import Booking, Table
from services.exceptions import RestaurantNotFoundError, StorageError
from services.store import check_insert_allowed
from .models_sqlalchemy import BookingRow, DiningTable, Restaurant


logger = logging.getLogger(__name__)


class SqlAlchemyReservationStore:
    """
    ReservationStore over a relational database.

    Each call runs in its own session. ``insert_booking`` locks the restaurant
    row (``SELECT ... FOR UPDATE`` where the backend supports it) before
    re-checking overlaps, so concurrent writers for one restaurant queue up.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_restaurant_config(self, restaurant_id: str) -> RestaurantConfig:
        try:
            with self.session_factory() as session:
                restaurant = session.get(Restaurant, restaurant_id)
                if restaurant is None:
                    raise RestaurantNotFoundError(restaurant_id)
                return RestaurantConfig.from_record(restaurant.to_record())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load restaurant {restaurant_id}: {e}") from e

    def get_tables(self, restaurant_id: str) -> List[Table]:
        try:
            with self.session_factory() as session:
                rows = session.scalars(
                    select(DiningTable)
                    .where(DiningTable.restaurant_id == restaurant_id)
                    .order_by(DiningTable.id)
                ).all()
                return [Table.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load tables for restaurant {restaurant_id}: {e}") from e

    def get_bookings(self, restaurant_id: str) -> List[Booking]:
        try:
            with self.session_factory() as session:
                rows = session.scalars(
                    select(BookingRow).where(BookingRow.restaurant_id == restaurant_id)
                ).all()
                return [Booking.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load bookings for restaurant {restaurant_id}: {e}") from e

    def insert_booking(self, restaurant_id: str, booking: Booking) -> Booking:
        """
        Insert ``booking`` unless its table is already taken for the interval.

        Raises:
            RestaurantNotFoundError: unknown restaurant
            BookingConflictError: overlapping booking on the same table
            StorageError: database failure
        """
        try:
            with self.session_factory() as session, session.begin():
                restaurant = session.scalars(
                    select(Restaurant)
                    .where(Restaurant.id == restaurant_id)
                    .with_for_update()
                ).one_or_none()
                if restaurant is None:
                    raise RestaurantNotFoundError(restaurant_id)

                existing = self._bookings_on_table(session, booking)
                check_insert_allowed(
                    booking,
                    existing,
                    RestaurantConfig.from_record(restaurant.to_record()),
                )

                session.add(BookingRow(
                    id=booking.id,
                    restaurant_id=restaurant_id,
                    table_id=booking.table_id,
                    booking_date=booking.booking_date,
                    booking_time=booking.booking_time,
                    expected_end_time=booking.expected_end_time,
                    party_size=booking.party_size,
                    status=booking.status.value,
                    guest_name=booking.guest_name,
                ))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to store booking for restaurant {restaurant_id}: {e}") from e

        logger.info(f"Stored booking {booking.id} on table {booking.table_id}")
        return booking

    @staticmethod
    def _bookings_on_table(session: Session, booking: Booking) -> List[Booking]:
        if booking.table_id is None:
            return []
        rows = session.scalars(
            select(BookingRow).where(
                BookingRow.table_id == booking.table_id,
                BookingRow.booking_date == booking.booking_date,
            )
        ).all()
        return [Booking.model_validate(row) for row in rows]
