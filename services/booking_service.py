"""
Booking creation: validate and insert as one step per restaurant.

Validation alone is a check over a snapshot; two requests for the last free
table can both pass it. ``BookingService`` serializes validate + insert per
restaurant and, when the store still reports a conflict (another process
wrote first), moves on to the next free table.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError

from core.config import settings
from core.utils_datetime import parse_hhmm
from domain.enums import RejectionKind, ReservationStatus
from domain.models import Booking, ReservationRequest, Table
from services.exceptions import BookingConflictError, StorageError
from services.reservation_validation import (
    NO_TABLE_MESSAGE,
    ReservationDecision,
    ReservationValidator,
)
from services.store import ReservationStore


logger = logging.getLogger(__name__)

LOCK_STRIPES = 64


@dataclass
class BookingOutcome:
    """Result of a booking attempt."""
    decision: ReservationDecision
    booking: Optional[Booking] = None

    @property
    def created(self) -> bool:
        return self.booking is not None


class BookingService:
    """Creates bookings without double-booking a table."""

    def __init__(
        self,
        store: ReservationStore,
        validator: Optional[ReservationValidator] = None,
        max_attempts: Optional[int] = None,
    ):
        """
        Args:
            store: Storage collaborator; its insert must reject overlaps
            validator: Decision function; built over ``store`` if omitted
            max_attempts: How many times to re-validate after losing a race
        """
        self.store = store
        self.validator = validator or ReservationValidator(store)
        self.max_attempts = max_attempts or settings.MAX_BOOKING_ATTEMPTS
        # Fixed pool; restaurants sharing a stripe just serialize together
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def _lock_for(self, restaurant_id: str) -> threading.Lock:
        return self._locks[hash(restaurant_id) % len(self._locks)]

    def book(
        self,
        request: Union[ReservationRequest, Mapping[str, Any]],
        guest_name: Optional[str] = None,
    ) -> BookingOutcome:
        """
        Validate ``request`` and store a booking on the assigned table.

        Returns the rejection unchanged when validation fails. Storage errors
        other than a booking conflict are returned as a retryable
        StorageUnavailable rejection.
        """
        if not isinstance(request, ReservationRequest):
            try:
                request = ReservationRequest.model_validate(request)
            except ValidationError:
                return BookingOutcome(decision=self.validator.validate(request))

        restaurant_id = request.restaurant_id or ""
        with self._lock_for(restaurant_id):
            for attempt in range(1, self.max_attempts + 1):
                decision = self.validator.validate(request)
                if not decision.accepted:
                    return BookingOutcome(decision=decision)

                for table in decision.available_tables:
                    booking = self._new_booking(request, table, decision.end_time, guest_name)
                    try:
                        stored = self.store.insert_booking(restaurant_id, booking)
                    except BookingConflictError:
                        logger.warning(
                            f"Table {table.id} taken concurrently for restaurant {restaurant_id} "
                            f"(attempt {attempt}); trying next table"
                        )
                        continue
                    except StorageError as e:
                        logger.error(f"Could not store booking for restaurant {restaurant_id}: {e}")
                        return BookingOutcome(decision=ReservationDecision.reject(
                            RejectionKind.STORAGE_UNAVAILABLE,
                            "Could not save the reservation. Please try again later.",
                            retryable=True,
                        ))

                    logger.info(f"Booked table {table.id} for restaurant {restaurant_id} as {stored.id}")
                    return BookingOutcome(
                        decision=ReservationDecision.accept(table, decision.end_time, decision.available_tables),
                        booking=stored,
                    )

        return BookingOutcome(decision=ReservationDecision.reject(
            RejectionKind.NO_TABLE_AVAILABLE, NO_TABLE_MESSAGE
        ))

    @staticmethod
    def _new_booking(
        request: ReservationRequest,
        table: Table,
        end_time: str,
        guest_name: Optional[str],
    ) -> Booking:
        return Booking(
            id=str(uuid4()),
            table_id=table.id,
            booking_date=request.booking_date,
            booking_time=parse_hhmm(request.booking_time),
            expected_end_time=parse_hhmm(end_time),
            party_size=request.party_size,
            status=ReservationStatus.PLANNED,
            guest_name=guest_name,
        )
