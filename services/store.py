"""
Storage collaborator interface and an in-memory implementation.

The booking logic reads restaurant config, tables and bookings through
``ReservationStore`` and writes only through ``insert_booking``.
"""
import logging
import threading
from typing import Dict, Iterable, List, Optional, Protocol

from core.restaurant_config import RestaurantConfig
from domain.models import Booking, Table
from services.conflicts import has_conflict
from services.exceptions import BookingConflictError, RestaurantNotFoundError


logger = logging.getLogger(__name__)


class ReservationStore(Protocol):
    """Read and insert operations the booking logic needs from storage."""

    def get_restaurant_config(self, restaurant_id: str) -> RestaurantConfig:
        ...

    def get_tables(self, restaurant_id: str) -> List[Table]:
        ...

    def get_bookings(self, restaurant_id: str) -> List[Booking]:
        ...

    def insert_booking(self, restaurant_id: str, booking: Booking) -> Booking:
        ...


def check_insert_allowed(
    booking: Booking,
    existing: Iterable[Booking],
    config: RestaurantConfig,
) -> None:
    """
    Storage-side guard: refuse a booking that overlaps another occupying
    booking on the same table and date.

    Raises:
        BookingConflictError: if the table is taken for that interval
    """
    if booking.table_id is None:
        return

    same_table = [
        b for b in existing
        if b.is_occupying
        and b.table_id == booking.table_id
        and b.booking_date == booking.booking_date
    ]
    end = booking.expected_end_time
    if end is None or has_conflict(booking.booking_time, end, same_table, config.default_duration):
        raise BookingConflictError(booking.table_id)


class InMemoryReservationStore:
    """Thread-safe dictionary-backed store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._configs: Dict[str, RestaurantConfig] = {}
        self._tables: Dict[str, List[Table]] = {}
        self._bookings: Dict[str, List[Booking]] = {}

    def add_restaurant(
        self,
        config: RestaurantConfig,
        tables: Optional[Iterable[Table]] = None,
        bookings: Optional[Iterable[Booking]] = None,
    ) -> None:
        with self._lock:
            self._configs[config.id] = config
            self._tables[config.id] = list(tables or [])
            self._bookings[config.id] = list(bookings or [])

    def get_restaurant_config(self, restaurant_id: str) -> RestaurantConfig:
        with self._lock:
            config = self._configs.get(restaurant_id)
        if config is None:
            raise RestaurantNotFoundError(restaurant_id)
        return config

    def get_tables(self, restaurant_id: str) -> List[Table]:
        with self._lock:
            return list(self._tables.get(restaurant_id, []))

    def get_bookings(self, restaurant_id: str) -> List[Booking]:
        with self._lock:
            return list(self._bookings.get(restaurant_id, []))

    def insert_booking(self, restaurant_id: str, booking: Booking) -> Booking:
        """
        Insert a booking, re-checking overlap under the store lock.

        Raises:
            RestaurantNotFoundError: unknown restaurant
            BookingConflictError: the table is already taken for that interval
        """
        with self._lock:
            config = self._configs.get(restaurant_id)
            if config is None:
                raise RestaurantNotFoundError(restaurant_id)
            bookings = self._bookings.setdefault(restaurant_id, [])
            check_insert_allowed(booking, bookings, config)
            bookings.append(booking)

        logger.info(f"Stored booking {booking.id} on table {booking.table_id}")
        return booking
