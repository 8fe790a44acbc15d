"""FastAPI dependencies for table booking endpoints."""

import threading
import weakref
from functools import lru_cache

from fastapi import Depends

from db.repository import SqlAlchemyReservationStore
from db.session import SessionLocal
from services.availability import AvailabilityService
from services.booking_service import BookingService
from services.reservation_validation import ReservationValidator
from services.store import ReservationStore


@lru_cache
def get_store() -> ReservationStore:
    """Storage collaborator shared by all requests."""
    return SqlAlchemyReservationStore(SessionLocal)


def get_validator(store: ReservationStore = Depends(get_store)) -> ReservationValidator:
    return ReservationValidator(store)


def get_availability_service(store: ReservationStore = Depends(get_store)) -> AvailabilityService:
    return AvailabilityService(store)


_booking_services: "weakref.WeakKeyDictionary[ReservationStore, BookingService]" = weakref.WeakKeyDictionary()
_booking_services_lock = threading.Lock()


def get_booking_service(store: ReservationStore = Depends(get_store)) -> BookingService:
    """
    One BookingService per store.

    The service owns the per-restaurant locks, so it must outlive a single
    request.
    """
    with _booking_services_lock:
        service = _booking_services.get(store)
        if service is None:
            service = _booking_services[store] = BookingService(store)
        return service
