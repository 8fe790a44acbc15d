"""
Reservation validation: accept or reject a single proposed reservation and
pick its table.

The validator only reads from the store. Every business rejection and every
storage failure is returned as a ``ReservationDecision``; nothing is raised
past ``ReservationValidator.validate``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from core.restaurant_config import RestaurantConfig
from core.utils_datetime import (
    Clock,
    compute_end_time,
    crosses_midnight,
    get_current_datetime,
    localize,
    parse_hhmm,
)
from domain.enums import RejectionKind
from domain.models import Duration, ReservationDecisionOut, ReservationRequest, Table
from services.exceptions import RestaurantNotFoundError, StorageError
from services.store import ReservationStore
from services.table_assignment import (
    assign_table,
    assignment_order,
    find_available_tables,
    group_bookings_by_table,
)


logger = logging.getLogger(__name__)


MISSING_DATA_MESSAGE = (
    "Missing critical reservation data (restaurant ID, date, time, party size, or valid duration)."
)
INVALID_DATETIME_MESSAGE = "Invalid date or time format."
LOOKUP_FAILED_MESSAGE = "Could not load restaurant information. Please try again later."
RESTAURANT_NOT_FOUND_MESSAGE = "Restaurant not found."
DURATION_UNRESOLVABLE_MESSAGE = (
    "Restaurant information is incomplete or reservation duration is not configured."
)
CLOSED_MESSAGE = "Restaurant is closed at the selected time."
CROSSES_MIDNIGHT_MESSAGE = "Reservations cannot run past midnight."
STORAGE_UNAVAILABLE_MESSAGE = "Could not check table availability. Please try again later."
NO_TABLE_MESSAGE = "No tables available for the selected time, party size, or duration."
ACCEPTED_MESSAGE = "Reservation slot is potentially available."


@dataclass
class ReservationDecision:
    """Accepted (with a table and end time) or rejected (with a reason)."""
    accepted: bool
    table: Optional[Table] = None
    end_time: Optional[str] = None
    error_kind: Optional[RejectionKind] = None
    message: str = ""
    retryable: bool = False
    # Every free table, in assignment order; the first one is ``table``
    available_tables: List[Table] = field(default_factory=list)

    @classmethod
    def accept(cls, table: Table, end_time: str, available_tables: List[Table]) -> "ReservationDecision":
        return cls(
            accepted=True,
            table=table,
            end_time=end_time,
            message=ACCEPTED_MESSAGE,
            available_tables=available_tables,
        )

    @classmethod
    def reject(cls, kind: RejectionKind, message: str, retryable: bool = False) -> "ReservationDecision":
        return cls(accepted=False, error_kind=kind, message=message, retryable=retryable)

    @property
    def is_infrastructure_failure(self) -> bool:
        """Storage trouble rather than a business rule; the caller may retry."""
        return not self.accepted and self.retryable

    def to_out(self) -> ReservationDecisionOut:
        return ReservationDecisionOut(
            accepted=self.accepted,
            table=self.table,
            end_time=self.end_time,
            error_kind=self.error_kind,
            message=self.message,
            retryable=self.retryable,
        )


@dataclass(frozen=True)
class _CheckedRequest:
    restaurant_id: str
    start: datetime
    party_size: int
    duration: Duration

    @property
    def start_time(self) -> time:
        return self.start.time()


def _check_request(
    request: Union[ReservationRequest, Mapping[str, Any]]
) -> Tuple[Optional[_CheckedRequest], Optional[str]]:
    """Return the usable request, or None and the reason it is malformed."""
    if not isinstance(request, ReservationRequest):
        try:
            request = ReservationRequest.model_validate(request)
        except ValidationError:
            return None, MISSING_DATA_MESSAGE

    if (
        not request.restaurant_id
        or request.booking_date is None
        or not request.booking_time
        or request.party_size is None
        or request.requested_duration is None
    ):
        return None, MISSING_DATA_MESSAGE

    start_time = parse_hhmm(request.booking_time)
    if start_time is None:
        return None, INVALID_DATETIME_MESSAGE
    if request.party_size < 1:
        return None, "Party size must be at least 1."
    if request.requested_duration.total_minutes == 0:
        return None, "Reservation duration must be longer than zero."

    return _CheckedRequest(
        restaurant_id=request.restaurant_id,
        start=datetime.combine(request.booking_date, start_time),
        party_size=request.party_size,
        duration=request.requested_duration,
    ), None


class ReservationValidator:
    """Decides whether a reservation can be made and which table it gets."""

    def __init__(self, store: ReservationStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or get_current_datetime

    def validate(self, request: Union[ReservationRequest, Mapping[str, Any]]) -> ReservationDecision:
        """
        Validate a proposed reservation end to end.

        Checks, in order: request shape, restaurant lookup, default duration,
        party size limits, opening hours, midnight, booking window, and finally
        table availability for the requested duration.
        """
        checked, problem = _check_request(request)
        if checked is None:
            return self._rejected(RejectionKind.MALFORMED_REQUEST, problem)

        config, rejection = self._load_config(checked.restaurant_id)
        if rejection is not None:
            return rejection

        if config.default_duration is None:
            return self._rejected(RejectionKind.DURATION_UNRESOLVABLE, DURATION_UNRESOLVABLE_MESSAGE)

        if not config.accepts_party_size(checked.party_size):
            return self._rejected(
                RejectionKind.PARTY_SIZE_OUT_OF_RANGE,
                self._party_size_message(config),
            )

        if not config.is_open(checked.start):
            return self._rejected(RejectionKind.RESTAURANT_CLOSED, CLOSED_MESSAGE)

        if crosses_midnight(checked.start_time, checked.duration):
            return self._rejected(RejectionKind.CROSSES_MIDNIGHT, CROSSES_MIDNIGHT_MESSAGE)

        window_problem = self._check_booking_window(config, checked.start)
        if window_problem:
            return self._rejected(RejectionKind.OUTSIDE_BOOKING_WINDOW, window_problem)

        try:
            tables = self.store.get_tables(checked.restaurant_id)
            bookings = self.store.get_bookings(checked.restaurant_id)
        except StorageError as e:
            logger.error(f"Could not load tables/bookings for restaurant {checked.restaurant_id}: {e}")
            return self._rejected(RejectionKind.STORAGE_UNAVAILABLE, STORAGE_UNAVAILABLE_MESSAGE, retryable=True)

        end_time = compute_end_time(checked.start_time, checked.duration)
        available = find_available_tables(
            tables,
            group_bookings_by_table(bookings, checked.start.date()),
            checked.start_time,
            end_time,
            checked.party_size,
            config.default_duration,
        )
        table = assign_table(available)
        if table is None:
            return self._rejected(RejectionKind.NO_TABLE_AVAILABLE, NO_TABLE_MESSAGE)

        logger.info(
            f"Restaurant {checked.restaurant_id}: table {table.id} free "
            f"{checked.start.isoformat()}-{end_time} for party of {checked.party_size}"
        )
        return ReservationDecision.accept(table, end_time, assignment_order(available))

    def _load_config(
        self, restaurant_id: str
    ) -> Tuple[Optional[RestaurantConfig], Optional[ReservationDecision]]:
        try:
            return self.store.get_restaurant_config(restaurant_id), None
        except RestaurantNotFoundError:
            return None, self._rejected(
                RejectionKind.RESTAURANT_LOOKUP_FAILED, RESTAURANT_NOT_FOUND_MESSAGE
            )
        except StorageError as e:
            logger.error(f"Failed to fetch restaurant details for ID {restaurant_id}: {e}")
            return None, self._rejected(
                RejectionKind.RESTAURANT_LOOKUP_FAILED, LOOKUP_FAILED_MESSAGE, retryable=True
            )

    def _check_booking_window(self, config: RestaurantConfig, start: datetime) -> Optional[str]:
        now = localize(self.clock(), config.tz)
        start_local = config.tz.localize(start)

        min_hours = config.effective_min_advance_hours
        if start_local < now + timedelta(hours=min_hours):
            return f"Reservations must be made at least {min_hours:g} hours in advance."

        max_days = config.effective_advance_booking_days
        if start_local.date() > now.date() + timedelta(days=max_days):
            return f"Reservations can be made at most {max_days} days in advance."

        return None

    @staticmethod
    def _party_size_message(config: RestaurantConfig) -> str:
        return (
            f"Party size must be between {config.effective_min_party_size} "
            f"and {config.effective_max_party_size} guests."
        )

    @staticmethod
    def _rejected(kind: RejectionKind, message: str, retryable: bool = False) -> ReservationDecision:
        logger.info(f"Reservation rejected ({kind.value}): {message}")
        return ReservationDecision.reject(kind, message, retryable=retryable)


def validate_reservation(
    request: Union[ReservationRequest, Mapping[str, Any]],
    store: ReservationStore,
    clock: Optional[Clock] = None,
) -> ReservationDecision:
    """Validate one reservation request against ``store``."""
    return ReservationValidator(store, clock).validate(request)
